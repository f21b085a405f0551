"""Longest Common Subsequence matching over token sequences.

Uses the standard dynamic-programming LCS algorithm to find the longest
sequence of tokens shared by the old and new text.  The matched pairs are
the anchors between which the markdown differ emits deletions and
insertions.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence

# Above this many DP cells the changed middle is reported as one
# replacement instead of being aligned token by token.
MAX_DP_CELLS = 250_000


def lcs_match(
    old_tokens: Sequence[Hashable],
    new_tokens: Sequence[Hashable],
) -> list[tuple[int, int]]:
    """Compute LCS-based matched pairs between *old_tokens* and *new_tokens*.

    Parameters
    ----------
    old_tokens:
        Tokens of the previous text.
    new_tokens:
        Tokens of the current text.

    Returns
    -------
    list[tuple[int, int]]
        ``(old_idx, new_idx)`` pairs of equal tokens, in increasing order
        on both sides.  Unmatched indices are deletions (old-only) or
        insertions (new-only).

    When the middles left after trimming would need more than :data:`MAX_DP_CELLS`
    table cells, only the common prefix and suffix are matched.
    """
    # Trim the common prefix and suffix first; most edits are local and
    # this keeps the DP table small.
    prefix = 0
    limit = min(len(old_tokens), len(new_tokens))
    while prefix < limit and old_tokens[prefix] == new_tokens[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and old_tokens[len(old_tokens) - 1 - suffix] == new_tokens[len(new_tokens) - 1 - suffix]
    ):
        suffix += 1

    pairs: list[tuple[int, int]] = [(i, i) for i in range(prefix)]

    old_mid = old_tokens[prefix : len(old_tokens) - suffix]
    new_mid = new_tokens[prefix : len(new_tokens) - suffix]
    m = len(old_mid)
    n = len(new_mid)

    if m and n and m * n <= MAX_DP_CELLS:
        # dp[i][j] stores the length of the LCS of old_mid[:i] and new_mid[:j].
        dp: list[list[int]] = [[0] * (n + 1) for _ in range(m + 1)]

        for i in range(1, m + 1):
            for j in range(1, n + 1):
                if old_mid[i - 1] == new_mid[j - 1]:
                    dp[i][j] = dp[i - 1][j - 1] + 1
                else:
                    dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

        middle: list[tuple[int, int]] = []
        i, j = m, n
        while i > 0 and j > 0:
            if old_mid[i - 1] == new_mid[j - 1]:
                middle.append((prefix + i - 1, prefix + j - 1))
                i -= 1
                j -= 1
            elif dp[i - 1][j] >= dp[i][j - 1]:
                i -= 1
            else:
                j -= 1
        middle.reverse()
        pairs.extend(middle)

    old_tail = len(old_tokens) - suffix
    new_tail = len(new_tokens) - suffix
    pairs.extend((old_tail + k, new_tail + k) for k in range(suffix))
    return pairs
