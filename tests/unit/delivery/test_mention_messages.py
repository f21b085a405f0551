"""Tests for delivery/mentions.py"""

from boardnotify.delivery.mentions import (
    format_mention_message,
    make_extract,
    markdown_to_text,
    mention_messages,
)
from boardnotify.models import BlockType


class TestMarkdownToText:
    def test_strips_formatting(self):
        assert markdown_to_text("**Hello** _there_ `code`") == "Hello there code"

    def test_joins_blocks(self):
        assert markdown_to_text("# Title\n\nFirst para\nsecond line") == "Title First para second line"

    def test_links_keep_text(self):
        assert markdown_to_text("see [docs](https://example.com) @bob") == "see docs @bob"


class TestMakeExtract:
    def test_short_text_unchanged(self):
        assert make_extract("hi @bob", "bob") == "hi @bob"

    def test_long_text_centered_on_mention(self):
        text = "a" * 200 + " @bob " + "b" * 200
        extract = make_extract(text, "bob", limit=40)
        assert "@bob" in extract
        assert extract.startswith("...")
        assert extract.endswith("...")
        assert len(extract) <= 46

    def test_mention_near_start(self):
        text = "@bob " + "x" * 300
        extract = make_extract(text, "bob", limit=20)
        assert extract.startswith("@bob")
        assert extract.endswith("...")

    def test_missing_mention_uses_start(self):
        extract = make_extract("y" * 100, "nobody", limit=10)
        assert extract == "y" * 10 + "..."


class TestFormatMentionMessage:
    ARGS = dict(
        author="alice",
        mentioned="bob",
        extract="hi @bob",
        card_title="Fix bug",
        card_link="https://x/c",
        board_title="Roadmap",
        board_link="https://x/b",
    )

    def test_description(self):
        msg = format_mention_message(block_type=BlockType.TEXT, **self.ARGS)
        assert msg == (
            "@alice mentioned @bob on card [Fix bug](https://x/c) "
            "(board: [Roadmap](https://x/b))\n> hi @bob"
        )

    def test_comment(self):
        msg = format_mention_message(block_type="comment", **self.ARGS)
        assert msg.startswith("@alice mentioned @bob in a comment on card [Fix bug]")


class TestMentionMessages:
    def test_one_message_per_mentioned_user(self):
        messages = mention_messages(
            author="alice",
            text="**ping** @bob and @carol, again @bob",
            card_title="Fix bug",
            card_link="https://x/c",
            block_type=BlockType.COMMENT,
            board_title="Roadmap",
            board_link="https://x/b",
        )
        assert list(messages) == ["bob", "carol"]
        assert messages["carol"] == (
            "@alice mentioned @carol in a comment on card [Fix bug](https://x/c) "
            "(board: [Roadmap](https://x/b))\n> ping @bob and @carol, again @bob"
        )

    def test_extract_centred_per_user(self):
        text = "@bob " + "x " * 200 + "@carol"
        messages = mention_messages("alice", text, "T", "l", "text", "B", "bl", limit=20)
        assert messages["bob"].split("\n> ")[1].startswith("@bob")
        assert messages["carol"].split("\n> ")[1].endswith("@carol")

    def test_no_mentions(self):
        assert mention_messages("alice", "plain text", "T", "l", "text", "B", "bl") == {}
