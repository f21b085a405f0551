"""Batch conversion of diffs into attachments.

:class:`DiffConverter` is the engine: it owns the template cache, wires
the link builder, text differ and mention filter into the generators,
and converts a list of diffs sequentially.  Only card diffs are
rendered.  A failure on one diff is recorded and the batch continues.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterable
from typing import Any

from boardnotify.config import NotifyConfig
from boardnotify.errors import BoardNotifyError, MultiError, RenderError
from boardnotify.links import LinkBuilder, PlainLinkBuilder
from boardnotify.models import Attachment, BatchResult, BlockType, Diff
from boardnotify.observability import NoopMetricsHook, get_logger
from boardnotify.textdiff import MarkdownDiffer, TextDiffer

from .attachments import AttachmentBuilder
from .authors import make_authors_list, strip_newlines
from .fields import RenderContext
from .mentions import MentionFilter
from .templates import TemplateCache


def _code_name(exc: BoardNotifyError) -> str:
    return getattr(exc.code, "value", str(exc.code))


def _template_helpers(links: LinkBuilder, config: NotifyConfig) -> dict[str, Any]:
    """Named helpers bound into every card template."""

    def make_link(diff: Diff) -> str:
        return links.card_link(diff.new_block or diff.old_block, diff.board, diff.card)

    def make_board_link(diff: Diff) -> str:
        return links.board_link(diff.board)

    def board_description(diff: Diff) -> str:
        return diff.board.description if diff.board is not None else ""

    def print_authors(authors: Iterable[str], empty: str = config.unknown_author) -> str:
        return make_authors_list(authors, empty)

    def newline_filter(text: str) -> str:
        return strip_newlines(text, config.newline_glyph)

    return {
        "make_link": make_link,
        "make_board_link": make_board_link,
        "board_description": board_description,
        "print_authors": print_authors,
        "strip_newlines": newline_filter,
    }


class DiffConverter:
    """Convert diffs into chat attachments.

    Parameters
    ----------
    config:
        Engine configuration.  Defaults to ``NotifyConfig()``.
    links:
        Link builder.  Defaults to :class:`PlainLinkBuilder`.
    differ:
        Text differ for content changes.  Defaults to
        :class:`MarkdownDiffer` with ``config.diff_context_chars``.
    logger:
        Logger for debug/trace events.  Defaults to ``config.logger`` or
        the structured ``boardnotify.render`` logger.

    Examples
    --------
    >>> from boardnotify.models import Block, BlockType, Diff
    >>> card = Block(id="c1", type=BlockType.CARD, title="Fix bug")
    >>> converter = DiffConverter()
    >>> result = converter.convert([Diff(BlockType.CARD, new_block=card, card=card)])
    >>> result.attachments[0].pretext
    'unknown user added card [Fix bug](`Fix bug`)'
    """

    def __init__(
        self,
        config: NotifyConfig | None = None,
        *,
        links: LinkBuilder | None = None,
        differ: TextDiffer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config if config is not None else NotifyConfig()
        self._links = links if links is not None else PlainLinkBuilder()
        self._metrics = self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        if logger is None:
            logger = self._config.logger if self._config.logger is not None else get_logger("boardnotify.render")
        self._log = logger

        self._ctx = RenderContext(
            config=self._config,
            differ=differ if differ is not None else MarkdownDiffer(self._config.diff_context_chars),
            mention_filter=MentionFilter(self._config.mention_pattern),
            logger=self._log,
            metrics=self._metrics,
        )
        self._cache = TemplateCache(
            helpers=_template_helpers(self._links, self._config),
            metrics=self._metrics,
        )
        self._builder = AttachmentBuilder(self._ctx, self._cache, self._links)

    @property
    def config(self) -> NotifyConfig:
        return self._config

    @property
    def links(self) -> LinkBuilder:
        return self._links

    @property
    def cache(self) -> TemplateCache:
        return self._cache

    @property
    def builder(self) -> AttachmentBuilder:
        return self._builder

    @property
    def mention_filter(self) -> MentionFilter:
        return self._ctx.mention_filter

    def convert_one(self, card_diff: Diff) -> Attachment | None:
        """Render a single card diff; errors propagate."""
        return self._builder.build(card_diff)

    def convert(self, diffs: Iterable[Diff]) -> BatchResult:
        """Convert *diffs* into attachments.

        Non-card diffs are ignored.  Diffs that render to nothing are
        dropped.  Errors are collected per diff and never abort the batch;
        inspect :attr:`BatchResult.error` for the aggregate.
        """
        t0 = time.monotonic()
        attachments: list[Attachment] = []
        errors = MultiError()

        for diff in diffs:
            if diff.block_type is not BlockType.CARD:
                continue
            try:
                attachment = self._builder.build(diff)
            except BoardNotifyError as exc:
                self._record_failure(errors, diff, exc)
                continue
            except Exception as exc:  # noqa: BLE001
                self._record_failure(
                    errors,
                    diff,
                    RenderError(
                        message=f"cannot render notification for card {diff.block_id}: {exc}",
                        context={"card_id": diff.block_id},
                        cause=exc,
                    ),
                )
                continue
            if attachment is None:
                continue
            attachments.append(attachment)

        result = BatchResult(attachments=attachments, errors=errors.errors)

        self._metrics.increment("boardnotify.attachments_total", value=len(result.attachments))
        self._metrics.timing("boardnotify.batch_duration_ms", (time.monotonic() - t0) * 1000)

        if self._config.debug_dump_attachments:
            from boardnotify.utils.redact import redact

            safe = redact({"attachments": [a.to_dict() for a in result.attachments]})
            print(
                "[boardnotify] Attachments payload:",
                json.dumps(safe["attachments"], indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        return result

    def _record_failure(self, errors: MultiError, diff: Diff, exc: BoardNotifyError) -> None:
        errors.append(exc)
        self._metrics.increment("boardnotify.render_errors_total", tags={"code": _code_name(exc)})
        self._log.warning(
            "Diff conversion failed",
            extra={
                "extra_fields": {
                    "op": "convert",
                    "card_id": diff.block_id,
                    "code": _code_name(exc),
                    "error": exc.message,
                }
            },
        )


def diffs_to_attachments(
    diffs: Iterable[Diff],
    config: NotifyConfig | None = None,
    *,
    links: LinkBuilder | None = None,
    differ: TextDiffer | None = None,
) -> tuple[list[Attachment], BoardNotifyError | None]:
    """One-shot conversion returning ``(attachments, error_or_none)``.

    Builds a fresh :class:`DiffConverter` (and therefore a fresh template
    cache) per call; keep a converter around to reuse compiled templates.
    """
    result = DiffConverter(config, links=links, differ=differ).convert(diffs)
    return result.attachments, result.error
