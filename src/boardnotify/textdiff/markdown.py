"""Word-level text diff rendered as chat markdown.

:class:`MarkdownDiffer` is the default text-diff capability of the
engine.  It tokenises both texts into words, whitespace runs and single
punctuation characters, matches them with :func:`lcs_match`, and renders
the result:

* unchanged text is kept as is (optionally trimmed to a context window),
* inserted text is kept as is,
* deleted text is struck through as ``~~`text`~~``.

An empty string means there is no meaningful difference: identical
texts, or edits that only touch whitespace.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .lcs_matcher import lcs_match

_TOKEN_RE = re.compile(r"\s+|\w+|[^\w\s]")

_ELLIPSIS = "..."


def tokenize(text: str) -> list[str]:
    """Split *text* into word, whitespace and punctuation tokens.

    The concatenation of the tokens always equals *text*.
    """
    return _TOKEN_RE.findall(text)


@dataclass
class Hunk:
    """A run of the diff: either unchanged text or a change.

    For an unchanged run ``deleted`` and ``inserted`` are both empty and
    ``equal`` holds the text.
    """

    equal: str = ""
    deleted: str = ""
    inserted: str = ""

    @property
    def is_change(self) -> bool:
        return bool(self.deleted or self.inserted)

    @property
    def is_meaningful(self) -> bool:
        return bool(self.deleted.strip() or self.inserted.strip())


def compute_hunks(old: str, new: str) -> list[Hunk]:
    """Return the alternating unchanged/changed runs that turn *old* into *new*.

    Whitespace-only unchanged runs sandwiched between two changes are
    folded into a single change, so ``"quick brown" -> "slow red"`` reads
    as one replacement rather than two.
    """
    old_tokens = tokenize(old)
    new_tokens = tokenize(new)
    pairs = lcs_match(old_tokens, new_tokens)

    raw: list[Hunk] = []

    def push_change(deleted: str, inserted: str) -> None:
        if not deleted and not inserted:
            return
        if raw and raw[-1].is_change:
            raw[-1].deleted += deleted
            raw[-1].inserted += inserted
        else:
            raw.append(Hunk(deleted=deleted, inserted=inserted))

    def push_equal(text: str) -> None:
        if raw and not raw[-1].is_change:
            raw[-1].equal += text
        else:
            raw.append(Hunk(equal=text))

    oi = ni = 0
    for o_idx, n_idx in pairs:
        push_change("".join(old_tokens[oi:o_idx]), "".join(new_tokens[ni:n_idx]))
        push_equal(old_tokens[o_idx])
        oi, ni = o_idx + 1, n_idx + 1
    push_change("".join(old_tokens[oi:]), "".join(new_tokens[ni:]))

    hunks: list[Hunk] = []
    for idx, hunk in enumerate(raw):
        sandwiched = (
            not hunk.is_change
            and not hunk.equal.strip()
            and 0 < idx < len(raw) - 1
        )
        if sandwiched and hunks and hunks[-1].is_change:
            hunks[-1].deleted += hunk.equal
            hunks[-1].inserted += hunk.equal
            continue
        if hunk.is_change and hunks and hunks[-1].is_change:
            hunks[-1].deleted += hunk.deleted
            hunks[-1].inserted += hunk.inserted
            continue
        hunks.append(Hunk(hunk.equal, hunk.deleted, hunk.inserted))
    return hunks


class MarkdownDiffer:
    """Default text differ.

    Parameters
    ----------
    context_chars:
        Characters of unchanged text kept on each side of an edit.  Longer
        unchanged runs are elided with ``...``.  ``0`` keeps everything.
    """

    def __init__(self, context_chars: int = 0) -> None:
        if context_chars < 0:
            raise ValueError(f"context_chars must be >= 0, got {context_chars}")
        self._context = context_chars

    def diff_to_markdown(self, old_text: str, new_text: str) -> str:
        """Render the difference between *old_text* and *new_text*.

        Returns ``""`` when nothing but whitespace changed.
        """
        old_text = old_text.strip()
        new_text = new_text.strip()
        if old_text == new_text:
            return ""

        hunks = compute_hunks(old_text, new_text)
        if not any(h.is_meaningful for h in hunks):
            return ""

        out: list[str] = []
        last = len(hunks) - 1
        for idx, hunk in enumerate(hunks):
            if not hunk.is_change:
                out.append(self._trim_equal(hunk.equal, first=idx == 0, last=idx == last))
                continue
            deleted = hunk.deleted.strip()
            if deleted:
                if out and out[-1] and not out[-1][-1].isspace():
                    out.append(" ")
                out.append(f"~~`{deleted}`~~ ")
            out.append(hunk.inserted.lstrip() if deleted else hunk.inserted)
        return "".join(out).strip()

    def _trim_equal(self, text: str, *, first: bool, last: bool) -> str:
        n = self._context
        if n == 0:
            return text
        if first and last:
            return text
        if first:
            return text if len(text) <= n else _ELLIPSIS + text[-n:]
        if last:
            return text if len(text) <= n else text[:n] + _ELLIPSIS
        if len(text) <= 2 * n:
            return text
        return text[:n] + _ELLIPSIS + text[-n:]
