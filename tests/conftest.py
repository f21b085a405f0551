"""Shared test fixtures for the boardnotify test suite."""

from __future__ import annotations

import pytest

from boardnotify.config import NotifyConfig
from boardnotify.models import Block, BlockType, Board, Diff, PropDiff
from boardnotify.observability import get_null_logger
from boardnotify.render.converter import DiffConverter
from boardnotify.render.fields import RenderContext


def make_card(title: str = "Fix bug", card_id: str = "card-1", delete_at: int = 0) -> Block:
    return Block(id=card_id, type=BlockType.CARD, title=title, board_id="board-1", delete_at=delete_at)


def make_block(
    block_type: BlockType,
    title: str = "",
    block_id: str = "blk-1",
    delete_at: int = 0,
) -> Block:
    return Block(id=block_id, type=block_type, title=title, parent_id="card-1", delete_at=delete_at)


def make_board() -> Board:
    return Board(id="board-1", team_id="team-1", title="Roadmap", description="Q3 plans")


def child_diff(
    block_type: BlockType,
    old: str | None = None,
    new: str | None = None,
    authors: tuple[str, ...] = (),
    new_deleted: bool = False,
) -> Diff:
    """Child diff whose sides are present when *old* / *new* is not ``None``."""
    return Diff(
        block_type=block_type,
        old_block=make_block(block_type, old) if old is not None else None,
        new_block=(
            make_block(block_type, new, delete_at=1700000000000 if new_deleted else 0)
            if new is not None
            else None
        ),
        board=make_board(),
        card=make_card(),
        authors=authors,
    )


def modified_card(
    old_title: str = "Fix bug",
    new_title: str = "Fix bug",
    prop_diffs: tuple[PropDiff, ...] = (),
    children: tuple[Diff, ...] = (),
    authors: tuple[str, ...] = ("alice",),
) -> Diff:
    card = make_card(new_title)
    return Diff(
        block_type=BlockType.CARD,
        old_block=make_card(old_title),
        new_block=card,
        board=make_board(),
        card=card,
        authors=authors,
        prop_diffs=prop_diffs,
        diffs=children,
    )


@pytest.fixture
def config() -> NotifyConfig:
    """Default test configuration with a quiet logger."""
    return NotifyConfig(logger=get_null_logger())


@pytest.fixture
def converter(config: NotifyConfig) -> DiffConverter:
    """Converter using the default test config and plain links."""
    return DiffConverter(config)


@pytest.fixture
def ctx(config: NotifyConfig) -> RenderContext:
    """Render context for calling field generators directly."""
    return RenderContext(config=config)
