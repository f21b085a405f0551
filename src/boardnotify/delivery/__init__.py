"""Delivery of rendered notifications.

Exports
-------
WebhookDelivery
    Posts attachments to an incoming webhook over httpx.
Notifier
    Converts diffs and posts the result.
format_mention_message / make_extract / mention_messages
    Direct-message rendering for mentioned users.
"""

from .mentions import format_mention_message, make_extract, markdown_to_text, mention_messages
from .notifier import Notifier
from .webhook import WebhookDelivery, build_payload

__all__ = [
    "Notifier",
    "WebhookDelivery",
    "build_payload",
    "format_mention_message",
    "make_extract",
    "markdown_to_text",
    "mention_messages",
]
