"""Tests for loader.py -- building and validating diff trees."""

import pytest

from boardnotify.errors import DiffValidationError
from boardnotify.loader import diff_from_dict, validate_tree
from boardnotify.models import BlockType, Diff

CAMEL_PAYLOAD = {
    "blockType": "card",
    "board": {"id": "b1", "teamId": "t1", "title": "Roadmap"},
    "newBlock": {"id": "c1", "type": "card", "title": "T2"},
    "oldBlock": {"id": "c1", "type": "card", "title": "T1"},
    "authors": {"u1": "alice", "u2": "bob"},
    "propDiffs": [{"name": "Status", "oldValue": "A", "newValue": "B"}],
    "diffs": [
        {
            "blockType": "text",
            "newBlock": {"id": "x1", "type": "text", "title": "hello", "deleteAt": 0},
            "authors": ["carol"],
        },
    ],
}


class TestDiffFromDict:
    def test_camel_case(self):
        d = diff_from_dict(CAMEL_PAYLOAD)
        assert d.block_type is BlockType.CARD
        assert d.new_block.title == "T2"
        assert d.old_block.title == "T1"
        assert d.board.team_id == "t1"
        assert d.authors == ("alice", "bob")
        assert d.prop_diffs[0].new_value == "B"

    def test_card_defaults_to_new_block(self):
        d = diff_from_dict(CAMEL_PAYLOAD)
        assert d.card.id == "c1"

    def test_children_inherit_board_and_card(self):
        child = diff_from_dict(CAMEL_PAYLOAD).diffs[0]
        assert child.block_type is BlockType.TEXT
        assert child.board.id == "b1"
        assert child.card.id == "c1"
        assert child.authors == ("carol",)
        assert child.old_block is None

    def test_snake_case(self):
        d = diff_from_dict({
            "block_type": "card",
            "old_block": {"id": "c", "title": "gone", "delete_at": 0},
            "new_block": {"id": "c", "title": "gone", "delete_at": 123},
            "prop_diffs": [{"name": "S", "old_value": "x", "new_value": ""}],
        })
        assert d.new_block.deleted
        assert d.prop_diffs[0].old_value == "x"

    def test_block_type_inferred_from_block(self):
        d = diff_from_dict({"newBlock": {"id": "i", "type": "image"}})
        assert d.block_type is BlockType.IMAGE

    def test_unknown_type(self):
        assert diff_from_dict({"blockType": "kanban"}).block_type is BlockType.UNKNOWN

    def test_not_a_mapping(self):
        with pytest.raises(DiffValidationError):
            diff_from_dict(["nope"])

    def test_block_not_a_mapping(self):
        with pytest.raises(DiffValidationError):
            diff_from_dict({"newBlock": "nope"})

    def test_too_deep(self):
        data: dict = {"blockType": "text"}
        node = data
        for _ in range(5):
            child = {"blockType": "text"}
            node["diffs"] = [child]
            node = child
        with pytest.raises(DiffValidationError) as exc_info:
            diff_from_dict(data, max_depth=3)
        assert exc_info.value.context["max_depth"] == 3


class TestValidateTree:
    def test_valid_tree(self):
        validate_tree(diff_from_dict(CAMEL_PAYLOAD))

    def test_shared_child_is_fine(self):
        shared = Diff(BlockType.TEXT)
        validate_tree(Diff(BlockType.CARD, diffs=(shared, shared)))

    def test_cycle_detected(self):
        root = Diff(BlockType.CARD)
        child = Diff(BlockType.TEXT, diffs=(root,))
        object.__setattr__(root, "diffs", (child,))
        with pytest.raises(DiffValidationError, match="cycle"):
            validate_tree(root)

    def test_depth_limit(self):
        node = Diff(BlockType.TEXT)
        for _ in range(4):
            node = Diff(BlockType.TEXT, diffs=(node,))
        validate_tree(node, max_depth=4)
        with pytest.raises(DiffValidationError):
            validate_tree(node, max_depth=3)
