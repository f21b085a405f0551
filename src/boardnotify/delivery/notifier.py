"""Convert-then-post orchestration."""

from __future__ import annotations

from collections.abc import Iterable

from boardnotify.models import BatchResult, Diff
from boardnotify.render.converter import DiffConverter

from .webhook import WebhookDelivery


class Notifier:
    """Render diffs and post the surviving attachments as one message.

    Rendering errors are reported on the returned :class:`BatchResult`;
    delivery errors propagate.
    """

    def __init__(self, converter: DiffConverter, delivery: WebhookDelivery) -> None:
        self._converter = converter
        self._delivery = delivery

    def notify(self, diffs: Iterable[Diff]) -> BatchResult:
        result = self._converter.convert(diffs)
        if result.attachments:
            self._delivery.post(result.attachments)
        return result
