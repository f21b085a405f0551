"""Tests for textdiff/lcs_matcher.py"""

from boardnotify.textdiff.lcs_matcher import MAX_DP_CELLS, lcs_match


class TestLcsMatch:
    def test_both_empty(self):
        assert lcs_match([], []) == []

    def test_one_empty(self):
        assert lcs_match(["a"], []) == []
        assert lcs_match([], ["a"]) == []

    def test_identical(self):
        assert lcs_match(list("abc"), list("abc")) == [(0, 0), (1, 1), (2, 2)]

    def test_insertion_in_middle(self):
        assert lcs_match(list("ac"), list("abc")) == [(0, 0), (1, 2)]

    def test_deletion_at_end(self):
        assert lcs_match(list("abc"), list("ab")) == [(0, 0), (1, 1)]

    def test_no_common(self):
        assert lcs_match(list("abc"), list("xyz")) == []

    def test_prefix_and_suffix_with_changed_middle(self):
        pairs = lcs_match(["x", "a", "b", "y"], ["x", "c", "b", "d", "y"])
        assert pairs == [(0, 0), (2, 2), (3, 4)]

    def test_pairs_strictly_increasing(self):
        pairs = lcs_match(list("abcabba"), list("cbabac"))
        assert len(pairs) == 4
        for (a1, b1), (a2, b2) in zip(pairs, pairs[1:]):
            assert a1 < a2 and b1 < b2


class TestLargeInputs:
    def test_oversized_middle_keeps_prefix_and_suffix_only(self):
        size = int(MAX_DP_CELLS ** 0.5) + 10
        old = ["head"] + [f"a{i}" for i in range(size)] + ["tail"]
        new = ["head"] + [f"b{i}" for i in range(size)] + ["tail"]
        assert lcs_match(old, new) == [(0, 0), (size + 1, size + 1)]

    def test_middle_at_limit_is_aligned(self):
        old = ["x", "shared", "y"]
        new = ["z", "shared", "w"]
        assert lcs_match(old, new) == [(1, 1)]
