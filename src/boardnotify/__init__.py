"""boardnotify: render board/card diffs into chat notification attachments.

Public re-exports
-----------------

* **Engine:** :class:`DiffConverter`, :func:`diffs_to_attachments`
* **Configuration:** :class:`NotifyConfig`
* **Capabilities:** :class:`LinkBuilder`, :class:`PlainLinkBuilder`,
  :class:`ServerLinkBuilder`, :class:`TextDiffer`, :class:`MarkdownDiffer`
* **Delivery:** :class:`WebhookDelivery`, :class:`Notifier`
* **Errors:** Every :class:`BoardNotifyError` subclass and :class:`ErrorCode`
* **Models:** Input snapshots, diffs, and output attachments

Usage::

    from boardnotify import DiffConverter, NotifyConfig, diff_from_dict

    converter = DiffConverter(NotifyConfig(language="en"))
    result = converter.convert([diff_from_dict(payload) for payload in diffs])
    for attachment in result.attachments:
        print(attachment.pretext)
    if result.error is not None:
        log.warning(str(result.error))
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from boardnotify.config import MENTION_PATTERN, NotifyConfig

# ── Delivery ────────────────────────────────────────────────────────────
from boardnotify.delivery import (
    Notifier,
    WebhookDelivery,
    format_mention_message,
    make_extract,
    mention_messages,
)

# ── Errors ──────────────────────────────────────────────────────────────
from boardnotify.errors import (
    BoardNotifyError,
    DeliveryAuthError,
    DeliveryError,
    DeliveryNetworkError,
    DeliveryNotFoundError,
    DeliveryServerError,
    DeliveryValidationError,
    DiffValidationError,
    ErrorCode,
    MultiError,
    NotifyBatchError,
    RenderError,
    TemplateCompileError,
    TemplateError,
    TemplateExecutionError,
)

# ── Capabilities ────────────────────────────────────────────────────────
from boardnotify.links import LinkBuilder, PlainLinkBuilder, ServerLinkBuilder
from boardnotify.loader import diff_from_dict, validate_tree

# ── Models ──────────────────────────────────────────────────────────────
from boardnotify.models import (
    Attachment,
    AttachmentField,
    BatchResult,
    Block,
    BlockType,
    Board,
    ChangeKind,
    Diff,
    PropDiff,
    classify,
)

# ── Engine ──────────────────────────────────────────────────────────────
from boardnotify.render import DiffConverter, MentionFilter, TemplateCache, diffs_to_attachments
from boardnotify.textdiff import MarkdownDiffer, TextDiffer

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Engine
    "DiffConverter",
    "diffs_to_attachments",
    "TemplateCache",
    "MentionFilter",
    # Configuration
    "NotifyConfig",
    "MENTION_PATTERN",
    # Capabilities
    "LinkBuilder",
    "PlainLinkBuilder",
    "ServerLinkBuilder",
    "TextDiffer",
    "MarkdownDiffer",
    # Input
    "diff_from_dict",
    "validate_tree",
    # Delivery
    "WebhookDelivery",
    "Notifier",
    "format_mention_message",
    "make_extract",
    "mention_messages",
    # Error base + code enum
    "BoardNotifyError",
    "ErrorCode",
    # Template errors
    "TemplateError",
    "TemplateCompileError",
    "TemplateExecutionError",
    # Input / render errors
    "DiffValidationError",
    "RenderError",
    "NotifyBatchError",
    "MultiError",
    # Delivery errors
    "DeliveryError",
    "DeliveryAuthError",
    "DeliveryNotFoundError",
    "DeliveryValidationError",
    "DeliveryServerError",
    "DeliveryNetworkError",
    # Models
    "Block",
    "BlockType",
    "Board",
    "PropDiff",
    "Diff",
    "ChangeKind",
    "classify",
    "Attachment",
    "AttachmentField",
    "BatchResult",
]
