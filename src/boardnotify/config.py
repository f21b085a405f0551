"""Configuration for boardnotify.

:class:`NotifyConfig` is a plain dataclass that captures every tuneable
knob of the rendering engine and the webhook delivery.  One instance is
passed to :class:`~boardnotify.render.converter.DiffConverter` and, when
posting, to :class:`~boardnotify.delivery.webhook.WebhookDelivery`.

The three card templates are Jinja2 sources.  They are rendered with the
following variables:

* ``diff`` -- the card :class:`~boardnotify.models.Diff`
* ``card`` -- the card block (falls back to the new or old block)
* ``board`` -- the :class:`~boardnotify.models.Board`, if any
* ``unknown_author`` -- :attr:`NotifyConfig.unknown_author`

and the filters ``print_authors``, ``make_link``, ``make_board_link``,
``strip_newlines`` and ``board_description``.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Default templates
# ---------------------------------------------------------------------------

DEFAULT_ADD_CARD_TEMPLATE = (
    "{{ diff.authors | print_authors(unknown_author) }} added card "
    "[{{ card.title }}]({{ diff | make_link }})"
)

DEFAULT_MODIFY_CARD_TEMPLATE = (
    "###### {{ diff.authors | print_authors(unknown_author) }} modified card "
    "[{{ card.title }}]({{ diff | make_link }}) on board {{ diff | make_board_link }}"
)

DEFAULT_DELETE_CARD_TEMPLATE = (
    "{{ diff.authors | print_authors(unknown_author) }} deleted card "
    "[{{ card.title }}]({{ diff | make_link }})"
)

MENTION_PATTERN = r"@[A-Za-z0-9_\-]+"
"""An ``@`` followed by one or more ASCII letters, digits, ``_`` or ``-``."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotifyConfig:
    """Complete configuration for the notification engine.

    Every parameter has a sensible default; an engine built from
    ``NotifyConfig()`` renders English notifications with plain
    (backticked) links and never touches the network.

    Parameters
    ----------
    language:
        Language key.  Partitions the template cache so that the same
        template name compiles once per language.
    add_card_template / modify_card_template / delete_card_template:
        Jinja2 sources for the attachment pretext of added, modified and
        deleted cards.
    unknown_author:
        Placeholder rendered when a diff carries no authors.
    title_label:
        Field title used for card title changes.
    description_label:
        Field title used for content (description) changes.
    attachment_changed_suffix:
        Appended to the author list to title attachment fields.
    comment_suffix:
        Appended to the author list to title comment fields.
    attachment_added_format / attachment_removed_format:
        ``str.format`` patterns for attachment field values.
    comment_deleted_format:
        ``str.format`` pattern for a deleted comment's value.
    image_placeholder / attachment_placeholder:
        Sentences synthesised for untitled image and attachment blocks.
        ``{op}`` is replaced by one of the ``op_*`` verbs.
    newline_glyph:
        Visible separator substituted for embedded newlines.
    mention_pattern:
        Regular expression recognising a mention token.  Content fields
        whose text matches are dropped.
    include_comment_changes:
        Add comment fields to modified-card attachments.  Off by default
        because mentions in comments are delivered separately.
    diff_context_chars:
        Characters of unchanged text kept on each side of an edit by the
        default text differ.  ``0`` keeps all unchanged text.
    webhook_url:
        Incoming-webhook URL used by the delivery layer.  Never logged.
    webhook_username / webhook_channel:
        Optional overrides sent with every webhook post.
    timeout_seconds:
        HTTP request timeout for webhook posts.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        A :class:`~boardnotify.observability.MetricsHook` or ``None``.
    logger:
        A :class:`logging.Logger` or ``None`` for the structured default.
    debug_dump_attachments:
        Write each batch's (redacted) attachment payload to *stderr*.
    """

    # ── Language & templates ────────────────────────────────────────────
    language: str = "en"

    add_card_template: str = DEFAULT_ADD_CARD_TEMPLATE

    modify_card_template: str = DEFAULT_MODIFY_CARD_TEMPLATE

    delete_card_template: str = DEFAULT_DELETE_CARD_TEMPLATE

    # ── Labels ──────────────────────────────────────────────────────────
    unknown_author: str = "unknown user"

    title_label: str = "Title"

    description_label: str = "Description"

    attachment_changed_suffix: str = " changed an attachment"

    comment_suffix: str = " commented"

    attachment_added_format: str = "Attachment added: **`{}`**"

    attachment_removed_format: str = "Attachment removed: ~~`{}`~~"

    comment_deleted_format: str = "~~`{}`~~"

    image_placeholder: str = "Image {op}."

    attachment_placeholder: str = "Attachment {op}."

    op_added: str = "added"

    op_deleted: str = "deleted"

    op_modified: str = "modified"

    # ── Content rules ───────────────────────────────────────────────────
    newline_glyph: str = "¶ "

    mention_pattern: str = MENTION_PATTERN

    include_comment_changes: bool = False

    diff_context_chars: int = 0

    # ── Delivery ────────────────────────────────────────────────────────
    webhook_url: str = ""

    webhook_username: str | None = None

    webhook_channel: str | None = None

    timeout_seconds: float = 10.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    logger: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_attachments: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.language:
            raise ValueError("language must be a non-empty string")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.diff_context_chars < 0:
            raise ValueError(f"diff_context_chars must be >= 0, got {self.diff_context_chars}")
        try:
            re.compile(self.mention_pattern)
        except re.error as exc:
            raise ValueError(f"mention_pattern is not a valid regular expression: {exc}") from exc

    def __repr__(self) -> str:
        """Mask the webhook URL; it embeds the hook secret."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "webhook_url" and val:
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"webhook_url='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotifyConfig({', '.join(parts)})"
