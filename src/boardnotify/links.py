"""Link-building capability.

The rendering engine never builds URLs itself; it asks a
:class:`LinkBuilder`.  When none is supplied, :class:`PlainLinkBuilder`
renders the backticked title instead of a hyperlink.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from boardnotify.models import Block, Board


@runtime_checkable
class LinkBuilder(Protocol):
    """Protocol for turning cards and boards into links."""

    def card_link(self, block: Block | None, board: Board | None, card: Block | None) -> str:
        """Return a link to *card* (or *block* within it) on *board*."""
        ...

    def board_link(self, board: Board | None) -> str:
        """Return a link to *board*."""
        ...


class PlainLinkBuilder:
    """Default builder: backticked titles, no URLs."""

    __slots__ = ()

    def card_link(self, block: Block | None, board: Board | None, card: Block | None) -> str:
        target = block if block is not None else card
        return f"`{target.title if target is not None else ''}`"

    def board_link(self, board: Board | None) -> str:
        return f"`{board.title if board is not None else ''}`"


class ServerLinkBuilder:
    """Builds absolute links into a boards web UI.

    Parameters
    ----------
    server_root:
        Base URL of the server, e.g. ``"https://chat.example.com/boards"``.
        A trailing slash is ignored.
    """

    def __init__(self, server_root: str) -> None:
        self._root = server_root.rstrip("/")

    def card_link(self, block: Block | None, board: Board | None, card: Block | None) -> str:
        card_id = card.id if card is not None else (block.id if block is not None else "")
        if board is None:
            return f"{self._root}/card/{card_id}"
        return f"{self._root}/team/{board.team_id}/{board.id}/0/{card_id}"

    def board_link(self, board: Board | None) -> str:
        if board is None:
            return self._root
        return f"{self._root}/team/{board.team_id}/{board.id}"
