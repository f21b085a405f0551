"""Tests for delivery/webhook.py and delivery/notifier.py"""

from __future__ import annotations

import json

import httpx
import pytest
from conftest import make_board, make_card

from boardnotify.config import NotifyConfig
from boardnotify.delivery import Notifier, WebhookDelivery, build_payload
from boardnotify.errors import (
    DeliveryAuthError,
    DeliveryNetworkError,
    DeliveryNotFoundError,
    DeliveryServerError,
    DeliveryValidationError,
)
from boardnotify.models import Attachment, AttachmentField, BlockType, Diff
from boardnotify.observability import get_null_logger
from boardnotify.render.converter import DiffConverter

HOOK = "https://chat.example.com/hooks/abcdef123456"


def _config(**kwargs) -> NotifyConfig:
    return NotifyConfig(webhook_url=HOOK, logger=get_null_logger(), **kwargs)


def _delivery(handler, **kwargs) -> WebhookDelivery:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return WebhookDelivery(_config(**kwargs), client=client)


def _attachment() -> Attachment:
    return Attachment(pretext="p", fallback="p", title_link="l", fields=[AttachmentField("T", "V")])


class TestBuildPayload:
    def test_minimal(self):
        payload = build_payload([_attachment()], _config())
        assert payload == {"attachments": [_attachment().to_dict()]}

    def test_overrides(self):
        payload = build_payload([], _config(webhook_username="boards", webhook_channel="town"), text="hi")
        assert payload["username"] == "boards"
        assert payload["channel"] == "town"
        assert payload["text"] == "hi"


class TestWebhookDelivery:
    def test_requires_url(self):
        with pytest.raises(ValueError):
            WebhookDelivery(NotifyConfig())

    def test_posts_json(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="ok")

        with _delivery(handler) as delivery:
            delivery.post([_attachment()])

        assert len(seen) == 1
        assert str(seen[0].url) == HOOK
        assert seen[0].method == "POST"
        body = json.loads(seen[0].content)
        assert body["attachments"][0]["fields"][0] == {"title": "T", "value": "V", "short": False}

    @pytest.mark.parametrize("status,exc_type", [
        (400, DeliveryValidationError),
        (401, DeliveryAuthError),
        (403, DeliveryAuthError),
        (404, DeliveryNotFoundError),
        (422, DeliveryValidationError),
        (500, DeliveryServerError),
        (503, DeliveryServerError),
    ])
    def test_status_errors(self, status, exc_type):
        delivery = _delivery(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(exc_type) as exc_info:
            delivery.post([_attachment()])
        assert exc_info.value.context["status_code"] == status
        assert "abcdef123456" not in exc_info.value.context["url"]

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        delivery = _delivery(handler)
        with pytest.raises(DeliveryNetworkError) as exc_info:
            delivery.post([_attachment()])
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_sent_once_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502)

        with pytest.raises(DeliveryServerError):
            _delivery(handler).post([_attachment()])
        assert len(calls) == 1

    def test_debug_dump_redacts_url(self, capsys):
        delivery = _delivery(lambda request: httpx.Response(200), debug_dump_attachments=True)
        delivery.post([_attachment()])
        err = capsys.readouterr().err
        assert "abcdef123456" not in err
        assert "request_body" in err


class TestNotifier:
    def _added(self) -> Diff:
        card = make_card("Ship it")
        return Diff(BlockType.CARD, new_block=card, card=card, board=make_board())

    def test_posts_when_attachments(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200)

        delivery = _delivery(handler)
        result = Notifier(DiffConverter(_config()), delivery).notify([self._added()])
        assert len(result.attachments) == 1
        assert bodies[0]["attachments"][0]["pretext"].endswith("added card [Ship it](`Ship it`)")

    def test_skips_post_when_nothing_rendered(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        result = Notifier(DiffConverter(_config()), _delivery(handler)).notify([Diff(BlockType.CARD)])
        assert result.attachments == []
        assert calls == []

    def test_delivery_error_propagates(self):
        delivery = _delivery(lambda request: httpx.Response(404))
        with pytest.raises(DeliveryNotFoundError):
            Notifier(DiffConverter(_config()), delivery).notify([self._added()])
