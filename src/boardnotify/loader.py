"""Build and validate diff trees from JSON-like input.

The change-detection component hands diffs over as nested mappings.
:func:`diff_from_dict` accepts both camelCase (``newBlock``, ``deleteAt``,
``propDiffs``) and snake_case keys.  Authors may be a list of ids or an
``{id: name}`` mapping; mappings contribute their values.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from boardnotify.errors import DiffValidationError
from boardnotify.models import Block, BlockType, Board, Diff, PropDiff

DEFAULT_MAX_DEPTH = 32


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def block_from_dict(data: Mapping[str, Any] | None) -> Block | None:
    """Build a :class:`Block` snapshot, or ``None`` for a missing side."""
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise DiffValidationError(
            message=f"block must be a mapping, got {type(data).__name__}",
            context={"value": repr(data)[:100]},
        )
    return Block(
        id=str(_get(data, "id", default="")),
        type=BlockType.parse(_get(data, "type", default="unknown")),
        title=str(_get(data, "title", default="")),
        board_id=str(_get(data, "boardId", "board_id", default="")),
        parent_id=str(_get(data, "parentId", "parent_id", default="")),
        delete_at=int(_get(data, "deleteAt", "delete_at", default=0)),
    )


def board_from_dict(data: Mapping[str, Any] | None) -> Board | None:
    if data is None:
        return None
    return Board(
        id=str(_get(data, "id", default="")),
        team_id=str(_get(data, "teamId", "team_id", default="")),
        title=str(_get(data, "title", default="")),
        description=str(_get(data, "description", default="")),
        channel_id=str(_get(data, "channelId", "channel_id", default="")),
    )


def _authors_from(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple(str(v) for v in value.values())
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _prop_diffs_from(value: Sequence[Mapping[str, Any]] | None) -> tuple[PropDiff, ...]:
    if not value:
        return ()
    return tuple(
        PropDiff(
            name=str(_get(p, "name", default="")),
            old_value=str(_get(p, "oldValue", "old_value", default="")),
            new_value=str(_get(p, "newValue", "new_value", default="")),
        )
        for p in value
    )


def diff_from_dict(
    data: Mapping[str, Any],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _board: Board | None = None,
    _card: Block | None = None,
    _depth: int = 0,
) -> Diff:
    """Build a :class:`Diff` tree from a nested mapping.

    Children inherit the parent's ``board`` and ``card`` when they do not
    carry their own.

    Raises
    ------
    DiffValidationError
        If the input is not a mapping or nests deeper than *max_depth*.
    """
    if not isinstance(data, Mapping):
        raise DiffValidationError(
            message=f"diff must be a mapping, got {type(data).__name__}",
            context={"depth": _depth},
        )
    if _depth > max_depth:
        raise DiffValidationError(
            message=f"diff tree exceeds maximum depth {max_depth}",
            context={"depth": _depth, "max_depth": max_depth},
        )

    board = board_from_dict(_get(data, "board")) or _board
    card = block_from_dict(_get(data, "card")) or _card
    new_block = block_from_dict(_get(data, "newBlock", "new_block"))
    old_block = block_from_dict(_get(data, "oldBlock", "old_block"))
    block_type = _get(data, "blockType", "block_type")
    if block_type is None:
        side = new_block or old_block
        block_type = side.type if side is not None else BlockType.UNKNOWN

    block_type = BlockType.parse(block_type)
    if card is None and block_type is BlockType.CARD:
        card = new_block or old_block

    children = tuple(
        diff_from_dict(child, max_depth=max_depth, _board=board, _card=card, _depth=_depth + 1)
        for child in _get(data, "diffs", default=())
    )

    return Diff(
        block_type=block_type,
        new_block=new_block,
        old_block=old_block,
        board=board,
        card=card,
        authors=_authors_from(_get(data, "authors")),
        prop_diffs=_prop_diffs_from(_get(data, "propDiffs", "prop_diffs")),
        diffs=children,
    )


def validate_tree(diff: Diff, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Check that *diff* is acyclic and at most *max_depth* levels deep.

    The same node may appear under two different parents; it may not
    appear twice on one root-to-leaf path.

    Raises
    ------
    DiffValidationError
    """
    path: set[int] = set()
    stack: list[tuple[Diff, int, bool]] = [(diff, 0, False)]
    while stack:
        node, depth, leaving = stack.pop()
        if leaving:
            path.discard(id(node))
            continue
        if id(node) in path:
            raise DiffValidationError(
                message=f"diff tree contains a cycle at block '{node.block_id}'",
                context={"path": node.block_id, "depth": depth},
            )
        if depth > max_depth:
            raise DiffValidationError(
                message=f"diff tree exceeds maximum depth {max_depth}",
                context={"depth": depth, "max_depth": max_depth},
            )
        path.add(id(node))
        stack.append((node, depth, True))
        stack.extend((child, depth + 1, False) for child in reversed(node.diffs))
