"""Incoming-webhook delivery of rendered attachments.

:class:`WebhookDelivery` posts one message carrying a list of
attachments to a Slack-compatible incoming webhook.  Requests are sent
once; there is no retry or rate limiting.

* ``2xx`` -- success.
* ``401`` / ``403`` -- :class:`DeliveryAuthError`.
* ``404`` -- :class:`DeliveryNotFoundError`.
* other ``4xx`` -- :class:`DeliveryValidationError`.
* ``5xx`` -- :class:`DeliveryServerError`.
* timeout / connection failure -- :class:`DeliveryNetworkError`.
"""

from __future__ import annotations

import json as _json
import sys
import time
from collections.abc import Sequence
from typing import Any

import httpx

from boardnotify.config import NotifyConfig
from boardnotify.errors import (
    DeliveryAuthError,
    DeliveryNetworkError,
    DeliveryNotFoundError,
    DeliveryServerError,
    DeliveryValidationError,
)
from boardnotify.models import Attachment
from boardnotify.observability import NoopMetricsHook, get_logger
from boardnotify.utils.redact import redact, redact_url

log = get_logger("boardnotify.delivery")


def _raise_for_status(response: httpx.Response, url: str) -> None:
    """Raise the matching :class:`DeliveryError` for a non-2xx *response*."""
    status = response.status_code
    body = response.text[:500]
    context = {"status_code": status, "body": body, "url": redact_url(url)}

    if status in (401, 403):
        raise DeliveryAuthError(
            message=f"Webhook rejected credentials ({status}): {body}",
            context=context,
        )
    if status == 404:
        raise DeliveryNotFoundError(
            message=f"Webhook not found: {body}",
            context=context,
        )
    if status >= 500:
        raise DeliveryServerError(
            message=f"Webhook server error {status}: {body}",
            context=context,
        )
    raise DeliveryValidationError(
        message=f"Webhook rejected payload ({status}): {body}",
        context=context,
    )


def build_payload(
    attachments: Sequence[Attachment],
    config: NotifyConfig,
    text: str | None = None,
) -> dict[str, Any]:
    """Assemble the JSON body for one webhook post."""
    payload: dict[str, Any] = {"attachments": [a.to_dict() for a in attachments]}
    if text:
        payload["text"] = text
    if config.webhook_username:
        payload["username"] = config.webhook_username
    if config.webhook_channel:
        payload["channel"] = config.webhook_channel
    return payload


class WebhookDelivery:
    """Synchronous webhook poster.

    Parameters
    ----------
    config:
        Must carry a non-empty ``webhook_url``.
    client:
        Optional pre-built :class:`httpx.Client` (e.g. with a mock
        transport).  When omitted one is created from the config and
        closed by :meth:`close`.
    """

    def __init__(self, config: NotifyConfig, client: httpx.Client | None = None) -> None:
        if not config.webhook_url:
            raise ValueError("webhook_url must be set to deliver notifications")
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                headers={"Content-Type": "application/json"},
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=config.http_proxy,
            )
        self._client = client

    def post(self, attachments: Sequence[Attachment], text: str | None = None) -> None:
        """Post *attachments* (and optional *text*) as one message.

        Raises
        ------
        DeliveryError
            Any subclass, depending on the failure.
        """
        url = self._config.webhook_url
        payload = build_payload(attachments, self._config, text)

        if self._config.debug_dump_attachments:
            print(
                _json.dumps(redact({"url": url, "request_body": payload}, url), indent=2, default=str),
                file=sys.stderr,
            )

        t0 = time.monotonic()
        try:
            response = self._client.post(url, json=payload)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            self._metrics.increment("boardnotify.deliveries_total", tags={"status": "error"})
            log.warning(
                "Webhook network error",
                extra={"extra_fields": {"op": "post", "url": redact_url(url), "error": str(exc)}},
            )
            raise DeliveryNetworkError(
                message=f"Network error posting to webhook: {exc}",
                context={"url": redact_url(url)},
                cause=exc,
            ) from exc

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.increment(
            "boardnotify.deliveries_total", tags={"status": str(response.status_code)},
        )
        self._metrics.timing(
            "boardnotify.delivery_duration_ms", elapsed_ms, tags={"status": str(response.status_code)},
        )

        if not 200 <= response.status_code < 300:
            _raise_for_status(response, url)

        log.debug(
            "Webhook post complete",
            extra={
                "extra_fields": {
                    "op": "post",
                    "attachments": len(attachments),
                    "status": response.status_code,
                    "duration_ms": round(elapsed_ms, 2),
                }
            },
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> WebhookDelivery:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
