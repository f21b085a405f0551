"""Author attribution and newline normalisation helpers.

Both functions are bound into the template namespace (as the
``print_authors`` and ``strip_newlines`` filters) and used directly by the
field generators.
"""

from __future__ import annotations

from collections.abc import Iterable

NEWLINE_GLYPH = "¶ "


def make_authors_list(authors: Iterable[str], empty: str) -> str:
    """Render *authors* as ``@a, @b`` or return *empty* when there are none.

    Order follows the iteration order of *authors*; :class:`Diff` keeps
    them in first-seen order, so output is deterministic.

    Examples
    --------
    >>> make_authors_list(("alice", " bob "), "someone")
    '@alice, @bob'
    >>> make_authors_list((), "someone")
    'someone'
    """
    names = [f"@{name.strip()}" for name in authors]
    if not names:
        return empty
    return ", ".join(names)


def strip_newlines(text: str, glyph: str = NEWLINE_GLYPH) -> str:
    """Replace each newline in *text* with *glyph* and trim the ends."""
    return text.replace("\n", glyph).strip()
