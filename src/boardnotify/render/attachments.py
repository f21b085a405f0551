"""Per-card attachment builder.

:class:`AttachmentBuilder` classifies a top-level card diff and renders
it into an :class:`Attachment`:

* ``SKIP`` -- neither side present; no attachment, no error.
* ``ADDED`` / ``DELETED`` -- a single templated sentence, no fields.
  Always emitted.
* ``MODIFIED`` -- templated pretext plus the fields produced by the
  generator pipeline.  Discarded (``None``) when no field survives.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from boardnotify.errors import TemplateExecutionError
from boardnotify.links import LinkBuilder
from boardnotify.models import Attachment, AttachmentField, ChangeKind, Diff, classify

from .fields import DEFAULT_PIPELINE, FieldGenerator, RenderContext, append_comment_changes
from .templates import TemplateCache

ADD_CARD_TEMPLATE = "AddCardNotify"
MODIFY_CARD_TEMPLATE = "ModifyCardNotify"
DELETE_CARD_TEMPLATE = "DeleteCardNotify"


class AttachmentBuilder:
    """Render one card diff into an attachment.

    Parameters
    ----------
    ctx:
        Shared render collaborators (config, differ, mention filter,
        logger, metrics).
    cache:
        The engine's template cache.
    links:
        Link builder used for the attachment ``title_link``.
    pipeline:
        Field generators run for modified cards, in order.  Defaults to
        title, property, attachment and content changes, plus comment
        changes when :attr:`NotifyConfig.include_comment_changes` is set.
    """

    def __init__(
        self,
        ctx: RenderContext,
        cache: TemplateCache,
        links: LinkBuilder,
        pipeline: Sequence[FieldGenerator] | None = None,
    ) -> None:
        self._ctx = ctx
        self._cache = cache
        self._links = links
        if pipeline is None:
            pipeline = list(DEFAULT_PIPELINE)
            if ctx.config.include_comment_changes:
                # comments go right after property changes
                pipeline.insert(2, append_comment_changes)
        self._pipeline: tuple[FieldGenerator, ...] = tuple(pipeline)

    @property
    def pipeline(self) -> tuple[FieldGenerator, ...]:
        return self._pipeline

    def template_data(self, card_diff: Diff) -> dict[str, Any]:
        """The variables every card template is rendered with."""
        return {
            "diff": card_diff,
            "card": card_diff.card or card_diff.new_block or card_diff.old_block,
            "board": card_diff.board,
            "unknown_author": self._ctx.config.unknown_author,
        }

    def _render(self, name: str, source: str, card_diff: Diff) -> str:
        return self._cache.render(
            name, self._ctx.config.language, source, self.template_data(card_diff),
        )

    def _title_link(self, card_diff: Diff) -> str:
        card = card_diff.card or card_diff.new_block or card_diff.old_block
        return self._links.card_link(card, card_diff.board, card)

    def build(self, card_diff: Diff) -> Attachment | None:
        """Return the attachment for *card_diff*, or ``None`` if there is nothing to say.

        Raises
        ------
        TemplateCompileError
            If a card template does not compile.
        TemplateExecutionError
            If a card template fails while rendering.
        """
        kind = classify(card_diff)
        cfg = self._ctx.config

        if kind is ChangeKind.SKIP:
            return None

        if kind is ChangeKind.ADDED:
            pretext = self._render(ADD_CARD_TEMPLATE, cfg.add_card_template, card_diff)
            return Attachment(pretext=pretext, fallback=pretext, title_link=self._title_link(card_diff))

        if kind is ChangeKind.DELETED:
            pretext = self._render(DELETE_CARD_TEMPLATE, cfg.delete_card_template, card_diff)
            return Attachment(pretext=pretext, fallback=pretext, title_link=self._title_link(card_diff))

        self._ctx.logger.debug(
            "cardDiff2Attachment",
            extra={
                "extra_fields": {
                    "board_id": card_diff.board.id if card_diff.board is not None else "",
                    "card_id": card_diff.card.id if card_diff.card is not None else "",
                    "new_block_id": card_diff.new_block.id,
                    "old_block_id": card_diff.old_block.id,
                    "child_diffs": len(card_diff.diffs),
                }
            },
        )

        try:
            pretext = self._render(MODIFY_CARD_TEMPLATE, cfg.modify_card_template, card_diff)
        except TemplateExecutionError as exc:
            raise TemplateExecutionError(
                message=f"cannot write notification for card {card_diff.new_block.id}: {exc.message}",
                context={"template": MODIFY_CARD_TEMPLATE, "card_id": card_diff.new_block.id},
                cause=exc,
            ) from exc

        attachment = Attachment(
            pretext=pretext,
            fallback=pretext,
            title_link=self._title_link(card_diff),
        )

        fields: list[AttachmentField] = []
        for generator in self._pipeline:
            fields = generator(fields, card_diff, self._ctx)

        if not fields:
            return None
        attachment.fields = fields
        return attachment
