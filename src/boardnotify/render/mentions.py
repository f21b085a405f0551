"""Mention filter.

Mentions are delivered to the mentioned user through a separate path,
so a content change that contains a mention token is dropped from the
channel attachment entirely rather than redacted.
"""

from __future__ import annotations

import re
import threading

from boardnotify.config import MENTION_PATTERN


class MentionFilter:
    """Recognises mention tokens and decides whether a field may be emitted.

    Parameters
    ----------
    pattern:
        Regular expression for a mention token.

    Attributes
    ----------
    suppressed:
        Number of fields rejected by :meth:`allows` over the lifetime of
        this filter.
    """

    def __init__(self, pattern: str = MENTION_PATTERN) -> None:
        self._pattern = re.compile(pattern)
        self._lock = threading.Lock()
        self.suppressed = 0

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    def matches(self, text: str) -> bool:
        """Return ``True`` if *text* contains a mention anywhere."""
        return self._pattern.search(text) is not None

    def allows(self, *texts: str) -> bool:
        """Return ``False`` (and count it) if any of *texts* mentions someone."""
        if any(self.matches(t) for t in texts if t):
            with self._lock:
                self.suppressed += 1
            return False
        return True


def extract_mentions(text: str, pattern: str = MENTION_PATTERN) -> list[str]:
    """Return the usernames mentioned in *text*, unique, in first-seen order.

    >>> extract_mentions("ping @bob and @alice, again @bob")
    ['bob', 'alice']
    """
    names = (m.group(0)[1:] for m in re.finditer(pattern, text))
    return list(dict.fromkeys(names))
