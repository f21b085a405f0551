"""Text-diff capability used for content (description) changes.

Exports
-------
TextDiffer
    Protocol: ``diff_to_markdown(old_text, new_text) -> str``.
MarkdownDiffer
    Default word-level implementation.
lcs_match
    Token LCS matcher backing :class:`MarkdownDiffer`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .lcs_matcher import lcs_match
from .markdown import Hunk, MarkdownDiffer, compute_hunks, tokenize


@runtime_checkable
class TextDiffer(Protocol):
    """Turns two strings into a markdown description of their difference.

    An empty return value signals "no meaningful difference".
    """

    def diff_to_markdown(self, old_text: str, new_text: str) -> str:
        ...


__all__ = [
    "Hunk",
    "MarkdownDiffer",
    "TextDiffer",
    "compute_hunks",
    "lcs_match",
    "tokenize",
]
