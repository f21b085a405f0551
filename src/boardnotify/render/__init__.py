"""Diff-to-attachment rendering engine.

Exports
-------
DiffConverter
    Batch engine; owns the template cache.
diffs_to_attachments
    One-shot conversion helper.
AttachmentBuilder
    Per-card classification and assembly.
TemplateCache
    Thread-safe compiled-template cache.
MentionFilter
    Drops content fields that contain a mention.
"""

from .attachments import AttachmentBuilder
from .authors import make_authors_list, strip_newlines
from .converter import DiffConverter, diffs_to_attachments
from .fields import (
    DEFAULT_PIPELINE,
    RenderContext,
    append_attachment_changes,
    append_comment_changes,
    append_content_changes,
    append_property_changes,
    append_title_changes,
)
from .mentions import MentionFilter, extract_mentions
from .templates import TemplateCache

__all__ = [
    "AttachmentBuilder",
    "DEFAULT_PIPELINE",
    "DiffConverter",
    "MentionFilter",
    "RenderContext",
    "TemplateCache",
    "append_attachment_changes",
    "append_comment_changes",
    "append_content_changes",
    "append_property_changes",
    "append_title_changes",
    "diffs_to_attachments",
    "extract_mentions",
    "make_authors_list",
    "strip_newlines",
]
