"""Secret redaction for safe logging.

Incoming-webhook URLs embed the hook secret in their path, so they must
never reach logs or debug dumps verbatim.  :func:`redact_url` masks the
path of such a URL and :func:`redact` applies the same treatment to an
arbitrary payload tree:

* Values under **sensitive keys** (``webhook_url``, ``token``, ...) are
  masked.
* Any occurrence of an explicit **secret** string is replaced by a
  placeholder showing only its last four characters.
* Anything that looks like a webhook URL (``.../hooks/<id>``) is masked.
"""

from __future__ import annotations

import copy
import re
from typing import Any

_HOOK_URL_RE = re.compile(r"(https?://[^\s/]+/(?:[^\s/]+/)*hooks/)([^\s/?#]+)")

# Substrings: if any of these appear in a key name (case-insensitive), the
# value is redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "webhook_url",
    "api_key",
})


def _placeholder(secret: str) -> str:
    suffix = secret[-4:] if len(secret) >= 4 else "****"
    placeholder = f"<redacted:...{suffix}>"
    if secret in placeholder:
        placeholder = "<redacted>"
    return placeholder


def redact_url(url: str) -> str:
    """Mask the hook identifier of a webhook URL.

    Examples
    --------
    >>> redact_url("https://chat.example.com/hooks/abcdefgh1234")
    'https://chat.example.com/hooks/<redacted:...1234>'

    URLs without a ``hooks/`` segment are returned unchanged.
    """
    return _HOOK_URL_RE.sub(lambda m: m.group(1) + _placeholder(m.group(2)), url)


def _redact_value(value: Any, secret: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, secret)
    if isinstance(value, list):
        return [_redact_value(item, secret) for item in value]
    if isinstance(value, str):
        if secret and secret in value:
            value = value.replace(secret, _placeholder(secret))
        return redact_url(value)
    return value


def _redact_dict(d: dict, secret: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str) and value:
                result[key] = redact_url(value) if _HOOK_URL_RE.search(value) else _placeholder(value)
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, secret)
    return result


def redact(payload: dict, secret: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        The dictionary to sanitize (typically a webhook request body).
    secret:
        If supplied, every occurrence of this exact string anywhere in the
        payload is replaced.

    Returns
    -------
    dict
        A new dictionary; the original *payload* is never mutated.
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, secret)
