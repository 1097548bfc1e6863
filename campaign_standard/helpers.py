"""Request option, interceptor and error helpers shared by every API call."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from campaign_standard.logging import get_logger

logger = get_logger()

UNREADABLE_BODY = "<unreadable body>"

_REDACTED_HEADERS = {"authorization", "x-api-key"}


class DebugLogger(Protocol):
    """Anything that accepts a preformatted debug message."""

    def debug(self, msg: str, /, *args: Any, **kwargs: Any) -> Any: ...


def create_request_options(
    *,
    tenant_id: str,
    api_key: str,
    access_token: str,
    body: Any = None,
) -> dict[str, Any]:
    """Build the security and server-variable envelope for one API call."""

    return {
        "requestBody": {} if body is None else body,
        "securities": {
            "authorized": {
                "BearerAuth": {"value": access_token},
                "ApiKeyAuth": {"value": api_key},
            }
        },
        "serverVariables": {
            "ORGANIZATION": tenant_id,
        },
    }


def _headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: ("***" if key.lower() in _REDACTED_HEADERS else value)
        for key, value in headers.items()
    }


def _describe(payload: Any) -> Any:
    if isinstance(payload, httpx.Request):
        return {
            "method": payload.method,
            "url": str(payload.url),
            "headers": _headers(payload.headers),
            "body": payload.content.decode("utf-8", errors="replace"),
        }
    if isinstance(payload, httpx.Response):
        return {
            "status": payload.status_code,
            "statusText": payload.reason_phrase,
            "ok": payload.is_success,
            "url": str(payload.request.url),
            "headers": _headers(payload.headers),
        }
    return payload


def _serialize(payload: Any) -> str:
    try:
        return json.dumps(_describe(payload), indent=2, default=str)
    except Exception:
        logger.debug("Unable to serialize payload for debug log", exc_info=True)
        return object.__repr__(payload)


def _is_ok(res: Any) -> bool:
    if isinstance(res, httpx.Response):
        return res.is_success
    if isinstance(res, Mapping):
        return bool(res.get("ok"))
    try:
        return bool(getattr(res, "ok", False))
    except Exception:
        return False


def _body_text(res: Any) -> str:
    if isinstance(res, httpx.Response):
        raw = res.content
    elif isinstance(res, Mapping):
        raw = res.get("text")
    else:
        raw = getattr(res, "text", None)
    if callable(raw):
        raw = raw()
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8")
    if raw is None:
        raise ValueError("response has no body text")
    return str(raw)


def _debug_enabled(log: DebugLogger) -> bool:
    is_enabled_for = getattr(log, "isEnabledFor", None)
    if is_enabled_for is None:
        return True
    return bool(is_enabled_for(logging.DEBUG))


def request_interceptor(req: Any, *, log: DebugLogger | None = None) -> Any:
    """Log an outbound request and hand it back untouched."""

    log = logger if log is None else log
    if _debug_enabled(log):
        log.debug(f"REQUEST:\n {_serialize(req)}")
    return req


def response_interceptor(res: Any, *, log: DebugLogger | None = None) -> Any:
    """Log a received response and, when it succeeded, its decoded payload.

    The payload log is best effort: a body that cannot be read, decoded or
    parsed is logged as raw text (or ``UNREADABLE_BODY`` when it could not be
    read or decoded) and the response is returned regardless.
    """

    log = logger if log is None else log
    if not _debug_enabled(log):
        return res

    log.debug(f"RESPONSE:\n {_serialize(res)}")
    if _is_ok(res):
        text = UNREADABLE_BODY
        try:
            text = _body_text(res)
            log.debug(f"DATA\n {json.dumps(json.loads(text), indent=2)}")
        except Exception:
            log.debug(f"DATA\n {text}")
    return res


def _truthy(value: Any) -> bool:
    # Empty containers count as present; only scalar "empty" values are missing.
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and value == value
    if isinstance(value, str):
        return value != ""
    return True


def _field(source: Any, *names: str) -> Any:
    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


def _response_body(response: Any) -> Any:
    if isinstance(response, httpx.Response):
        try:
            return response.json()
        except ValueError:
            stripped = response.text.strip()
            return stripped or None
        except RuntimeError:
            # Streamed response whose body was never read.
            return None
    return _field(response, "body")


def reduce_error(error: Any = None) -> Any:
    """Reduce an error carrying an HTTP response to a short string.

    Returns ``"<status> - <statusText> (<json body>)"`` when the error's
    ``response`` exposes a status, a status text and a body; otherwise the
    error itself is returned unchanged.
    """

    if error is None:
        error = {}

    response = _field(error, "response")
    if response is not None:
        status = _field(response, "status", "status_code")
        status_text = _field(response, "statusText", "status_text", "reason_phrase")
        body = _response_body(response)
        if _truthy(status) and _truthy(status_text) and _truthy(body):
            serialized = json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)
            return f"{status} - {status_text} ({serialized})"

    return error


__all__ = [
    "UNREADABLE_BODY",
    "create_request_options",
    "reduce_error",
    "request_interceptor",
    "response_interceptor",
]
