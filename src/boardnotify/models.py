"""Public data models for boardnotify.

Inputs (:class:`Block`, :class:`Board`, :class:`PropDiff`, :class:`Diff`)
are frozen dataclasses: diff trees are owned by the change-detection
component that produced them and the engine never mutates them.  Outputs
(:class:`Attachment`, :class:`AttachmentField`, :class:`BatchResult`) are
plain dataclasses owned by the caller once returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from boardnotify.errors import BoardNotifyError, MultiError, NotifyBatchError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockType(str, Enum):
    """Content types a block (and therefore a diff) can carry."""

    CARD = "card"
    COMMENT = "comment"
    ATTACHMENT = "attachment"
    IMAGE = "image"
    TEXT = "text"
    DIVIDER = "divider"
    CHECKBOX = "checkbox"
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    BOARD = "board"
    VIEW = "view"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | BlockType | None) -> BlockType:
        """Map a raw type string to a member, falling back to ``UNKNOWN``."""
        if isinstance(value, BlockType):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class ChangeKind(str, Enum):
    """Classification of a diff node."""

    ADDED = "added"
    """Only the new block exists."""

    DELETED = "deleted"
    """The new block is missing or marked deleted while the old one exists."""

    MODIFIED = "modified"
    """Both sides exist and the new block is live."""

    SKIP = "skip"
    """Neither side exists -- a degenerate no-op."""


# ---------------------------------------------------------------------------
# Input snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Block:
    """Snapshot of one block at a point in time.

    Attributes
    ----------
    id:
        Block identifier.
    type:
        Content type of the block.
    title:
        The block's text.  For cards this is the card title, for text
        blocks the paragraph content, for attachments the file name.
    board_id / parent_id:
        Back-references used by link builders.
    delete_at:
        Deletion timestamp in milliseconds; ``0`` while the block is live.
    """

    id: str
    type: BlockType = BlockType.UNKNOWN
    title: str = ""
    board_id: str = ""
    parent_id: str = ""
    delete_at: int = 0

    @property
    def deleted(self) -> bool:
        return self.delete_at != 0


@dataclass(frozen=True)
class Board:
    """The board a card lives on."""

    id: str
    team_id: str = ""
    title: str = ""
    description: str = ""
    channel_id: str = ""


@dataclass(frozen=True)
class PropDiff:
    """A named card property's old and new textual value."""

    name: str
    old_value: str = ""
    new_value: str = ""

    @property
    def changed(self) -> bool:
        return self.new_value != self.old_value


def _unique_authors(authors: Iterable[str] | str) -> tuple[str, ...]:
    """De-duplicate *authors*, keeping first-seen order.

    A bare string is a single author.
    """
    if isinstance(authors, str):
        authors = (authors,) if authors else ()
    return tuple(dict.fromkeys(authors))


@dataclass(frozen=True)
class Diff:
    """A before/after comparison of a block and its descendants.

    Attributes
    ----------
    block_type:
        Type of the compared block.
    new_block / old_block:
        The two snapshots.  ``old_block is None`` means the block was
        created; ``new_block is None`` (or ``new_block.deleted``) means it
        was removed.
    board / card:
        Back-references to the board and owning card.
    authors:
        Identifiers of everyone who touched the block, unique and in
        first-seen order.  Lists and other iterables are normalised on
        construction; a bare string is a single author.
    prop_diffs:
        Ordered property changes (card diffs only).
    diffs:
        Ordered child diffs with the same shape.
    """

    block_type: BlockType
    new_block: Block | None = None
    old_block: Block | None = None
    board: Board | None = None
    card: Block | None = None
    authors: tuple[str, ...] = ()
    prop_diffs: tuple[PropDiff, ...] = ()
    diffs: tuple[Diff, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "block_type", BlockType.parse(self.block_type))
        object.__setattr__(self, "authors", _unique_authors(self.authors))
        object.__setattr__(self, "prop_diffs", tuple(self.prop_diffs))
        object.__setattr__(self, "diffs", tuple(self.diffs))

    @property
    def block_id(self) -> str:
        """Identifier of whichever side is present (new first)."""
        block = self.new_block or self.old_block
        return block.id if block is not None else ""


def classify(diff: Diff) -> ChangeKind:
    """Classify *diff* as added, deleted, modified or skip.

    The rules are evaluated in order:

    1. neither side present -> ``SKIP``
    2. new present, old missing -> ``ADDED``
    3. new missing or marked deleted, old present -> ``DELETED``
    4. otherwise -> ``MODIFIED``
    """
    new, old = diff.new_block, diff.old_block
    if new is None and old is None:
        return ChangeKind.SKIP
    if new is not None and old is None:
        return ChangeKind.ADDED
    if new is None or new.deleted:
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass
class AttachmentField:
    """One labelled line of an attachment."""

    title: str
    value: str
    short: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "value": self.value, "short": self.short}


@dataclass
class Attachment:
    """A rendered notification payload.

    ``fallback`` always equals ``pretext``.
    """

    pretext: str = ""
    fallback: str = ""
    title_link: str = ""
    fields: list[AttachmentField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the Slack-compatible attachment shape."""
        payload: dict[str, Any] = {
            "pretext": self.pretext,
            "fallback": self.fallback,
            "title_link": self.title_link,
        }
        if self.fields:
            payload["fields"] = [f.to_dict() for f in self.fields]
        return payload


@dataclass
class BatchResult:
    """Outcome of converting a list of diffs.

    Attributes
    ----------
    attachments:
        Attachments that rendered successfully, in input order.
    errors:
        Per-diff errors, in input order.  A diff that produced no
        attachment without failing contributes nothing here.
    """

    attachments: list[Attachment] = field(default_factory=list)
    errors: list[BoardNotifyError] = field(default_factory=list)

    @property
    def error(self) -> NotifyBatchError | None:
        """The aggregate error, or ``None`` when every diff rendered."""
        return MultiError(self.errors).error_or_none()

    @property
    def ok(self) -> bool:
        return not self.errors
