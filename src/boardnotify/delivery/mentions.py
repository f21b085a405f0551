"""Mention notifications.

When a card description or comment mentions someone, the mentioned user
is told directly with a short message quoting the surrounding text.  This
is the path that makes the engine drop mention-bearing content from
channel attachments.
"""

from __future__ import annotations

import mistune

from boardnotify.config import MENTION_PATTERN
from boardnotify.models import BlockType
from boardnotify.render.mentions import extract_mentions

DEFAULT_EXTRACT_LIMIT = 150

_COMMENT_TEMPLATE = (
    "@{author} mentioned @{mentioned} in a comment on card [{card}]({link}) "
    "(board: [{board}]({board_link}))\n> {extract}"
)
_DESCRIPTION_TEMPLATE = (
    "@{author} mentioned @{mentioned} on card [{card}]({link}) "
    "(board: [{board}]({board_link}))\n> {extract}"
)

_ELLIPSIS = "..."

_parser = mistune.create_markdown(renderer="ast", plugins=["strikethrough", "table"])


def _collect_text(tokens: list[dict], out: list[str]) -> None:
    for tok in tokens:
        tok_type = tok.get("type")
        if tok_type in ("softbreak", "linebreak", "blank_line", "thematic_break"):
            out.append(" ")
            continue
        raw = tok.get("raw")
        children = tok.get("children")
        if children:
            _collect_text(children, out)
            if tok_type in ("paragraph", "heading", "block_quote", "list_item", "block_text"):
                out.append(" ")
        elif isinstance(raw, str):
            out.append(raw)


def markdown_to_text(markdown: str) -> str:
    """Flatten *markdown* to a single line of plain text."""
    tokens = _parser(markdown)
    if isinstance(tokens, str):
        return " ".join(tokens.split())
    parts: list[str] = []
    _collect_text(tokens, parts)
    return " ".join("".join(parts).split())


def make_extract(text: str, mention: str, limit: int = DEFAULT_EXTRACT_LIMIT) -> str:
    """Return at most *limit* characters of *text* around ``@mention``.

    *text* is markdown; it is flattened to plain text first.  Elided ends
    are marked with ``...``.
    """
    plain = markdown_to_text(text)
    if len(plain) <= limit:
        return plain

    idx = plain.find("@" + mention)
    if idx < 0:
        idx = 0
    half = limit // 2
    start = max(0, min(idx - half, len(plain) - limit))
    end = start + limit

    extract = plain[start:end].strip()
    if start > 0:
        extract = _ELLIPSIS + extract
    if end < len(plain):
        extract = extract + _ELLIPSIS
    return extract


def format_mention_message(
    author: str,
    mentioned: str,
    extract: str,
    card_title: str,
    card_link: str,
    block_type: BlockType | str,
    board_title: str,
    board_link: str,
) -> str:
    """Render the direct message sent to a mentioned user."""
    template = _DESCRIPTION_TEMPLATE
    if BlockType.parse(block_type) is BlockType.COMMENT:
        template = _COMMENT_TEMPLATE
    return template.format(
        author=author,
        mentioned=mentioned,
        card=card_title,
        link=card_link,
        board=board_title,
        board_link=board_link,
        extract=extract,
    )


def mention_messages(
    author: str,
    text: str,
    card_title: str,
    card_link: str,
    block_type: BlockType | str,
    board_title: str,
    board_link: str,
    *,
    limit: int = DEFAULT_EXTRACT_LIMIT,
    pattern: str = MENTION_PATTERN,
) -> dict[str, str]:
    """Build one direct message per user mentioned in *text*.

    Keys are the mentioned usernames in first-seen order; each message
    quotes the extract around that user's mention.
    """
    return {
        mentioned: format_mention_message(
            author=author,
            mentioned=mentioned,
            extract=make_extract(text, mentioned, limit),
            card_title=card_title,
            card_link=card_link,
            block_type=block_type,
            board_title=board_title,
            board_link=board_link,
        )
        for mentioned in extract_mentions(text, pattern)
    }
