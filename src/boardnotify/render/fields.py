"""Field generators.

Each generator inspects a card diff and returns *fields* extended with
zero or more :class:`AttachmentField` entries.  They share the signature
``(fields, card_diff, ctx) -> fields`` so the attachment builder can run
them as a pipeline:

* :func:`append_title_changes`
* :func:`append_property_changes`
* :func:`append_attachment_changes`
* :func:`append_content_changes`
* :func:`append_comment_changes` (not part of the default pipeline)

Title and property generators expect a card diff with both sides present.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from boardnotify.config import NotifyConfig
from boardnotify.models import AttachmentField, BlockType, ChangeKind, Diff, classify
from boardnotify.observability import TRACE, NoopMetricsHook, get_null_logger
from boardnotify.textdiff import MarkdownDiffer, TextDiffer

from .authors import make_authors_list, strip_newlines
from .mentions import MentionFilter

FieldGenerator = Callable[[list[AttachmentField], Diff, "RenderContext"], list[AttachmentField]]

# Block types the content generator never reports.
_CONTENT_SKIP_TYPES: frozenset[BlockType] = frozenset({
    BlockType.DIVIDER,
    BlockType.COMMENT,
})


@dataclass
class RenderContext:
    """Collaborators shared by the field generators for one engine."""

    config: NotifyConfig = field(default_factory=NotifyConfig)
    differ: TextDiffer = field(default_factory=MarkdownDiffer)
    mention_filter: MentionFilter = field(default_factory=MentionFilter)
    logger: logging.Logger = field(default_factory=get_null_logger)
    metrics: Any = field(default_factory=NoopMetricsHook)

    def strip(self, text: str) -> str:
        return strip_newlines(text, self.config.newline_glyph)

    def op_verb(self, kind: ChangeKind) -> str:
        if kind is ChangeKind.ADDED:
            return self.config.op_added
        if kind is ChangeKind.DELETED:
            return self.config.op_deleted
        return self.config.op_modified


def append_title_changes(
    fields: list[AttachmentField], card_diff: Diff, ctx: RenderContext,
) -> list[AttachmentField]:
    """Emit one field when the card title changed."""
    new_title = card_diff.new_block.title
    old_title = card_diff.old_block.title
    if new_title != old_title:
        fields.append(AttachmentField(
            title=ctx.config.title_label,
            value=f"{ctx.strip(new_title)}  ~~`{ctx.strip(old_title)}`~~",
        ))
    return fields


def append_property_changes(
    fields: list[AttachmentField], card_diff: Diff, ctx: RenderContext,
) -> list[AttachmentField]:
    """Emit one field per changed property, in the diff's order."""
    for prop in card_diff.prop_diffs:
        if not prop.changed:
            continue

        if prop.old_value:
            value = f"{ctx.strip(prop.new_value)}  ~~`{ctx.strip(prop.old_value)}`~~"
        else:
            value = prop.new_value

        fields.append(AttachmentField(title=prop.name, value=value))
    return fields


def append_attachment_changes(
    fields: list[AttachmentField], card_diff: Diff, ctx: RenderContext,
) -> list[AttachmentField]:
    """Emit one field per file attachment that was added or removed."""
    cfg = ctx.config
    for child in card_diff.diffs:
        if child.block_type is not BlockType.ATTACHMENT:
            continue

        kind = classify(child)
        if kind is ChangeKind.ADDED:
            value = cfg.attachment_added_format.format(child.new_block.title)
        elif kind is ChangeKind.DELETED:
            value = cfg.attachment_removed_format.format(ctx.strip(child.old_block.title))
        else:
            continue

        fields.append(AttachmentField(
            title=make_authors_list(child.authors, cfg.unknown_author) + cfg.attachment_changed_suffix,
            value=value,
        ))
    return fields


def append_comment_changes(
    fields: list[AttachmentField], card_diff: Diff, ctx: RenderContext,
) -> list[AttachmentField]:
    """Emit one field per comment that was added or deleted.

    Not wired into the default pipeline: comments with mentions already
    reach the mentioned users.  Enable with
    :attr:`NotifyConfig.include_comment_changes` or call directly.
    """
    cfg = ctx.config
    for child in card_diff.diffs:
        if child.block_type is not BlockType.COMMENT:
            continue

        kind = classify(child)
        if kind is ChangeKind.ADDED:
            value = child.new_block.title
        elif kind is ChangeKind.DELETED:
            value = cfg.comment_deleted_format.format(ctx.strip(child.old_block.title))
        else:
            continue

        fields.append(AttachmentField(
            title=make_authors_list(child.authors, cfg.unknown_author) + cfg.comment_suffix,
            value=value,
        ))
    return fields


def append_content_changes(
    fields: list[AttachmentField], card_diff: Diff, ctx: RenderContext,
) -> list[AttachmentField]:
    """Emit one markdown-diff field per changed content block.

    Dividers and comments are ignored.  Untitled images and attachments
    get a synthesised sentence instead of a text diff.  Fields whose old
    or new text contains a mention are dropped by the mention filter.
    """
    cfg = ctx.config
    for child in card_diff.diffs:
        kind = classify(child)
        if kind is ChangeKind.SKIP or child.block_type in _CONTENT_SKIP_TYPES:
            continue

        op = ctx.op_verb(kind)
        old_title = child.old_block.title if child.old_block is not None else ""
        new_title = child.new_block.title if child.new_block is not None else ""

        if child.block_type is BlockType.IMAGE:
            if not new_title:
                new_title = cfg.image_placeholder.format(op=op)
            old_title = ""
        elif child.block_type is BlockType.ATTACHMENT:
            if not new_title:
                new_title = cfg.attachment_placeholder.format(op=op)
            old_title = ""
        else:
            if kind is not ChangeKind.ADDED:
                if kind is ChangeKind.DELETED:
                    new_title = ""
                # newlines are only collapsed for modifications and deletions
                old_title = ctx.strip(old_title)
                new_title = ctx.strip(new_title)
            if new_title == old_title:
                continue

        ctx.logger.log(
            TRACE,
            "append_content_changes",
            extra={
                "extra_fields": {
                    "type": child.block_type.value,
                    "op": op,
                    "old_title": old_title,
                    "new_title": new_title,
                }
            },
        )

        markdown = ctx.differ.diff_to_markdown(old_title, new_title)
        if not markdown:
            continue

        if not ctx.mention_filter.allows(new_title, old_title):
            ctx.logger.debug(
                "append_content_changes - skipping content with mention",
                extra={"extra_fields": {"type": child.block_type.value, "block_id": child.block_id}},
            )
            ctx.metrics.increment(
                "boardnotify.mention_suppressed_total",
                tags={"type": child.block_type.value},
            )
            continue

        fields.append(AttachmentField(title=cfg.description_label, value=markdown))
    return fields


DEFAULT_PIPELINE: tuple[FieldGenerator, ...] = (
    append_title_changes,
    append_property_changes,
    append_attachment_changes,
    append_content_changes,
)
