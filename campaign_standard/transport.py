"""HTTP transport wiring: server URL, authentication and interceptor hooks."""

from __future__ import annotations

from typing import Any

import httpx

from campaign_standard.core.config import ApiConfig
from campaign_standard.helpers import request_interceptor, response_interceptor
from campaign_standard.logging import get_logger

logger = get_logger("transport")


def resolve_server_url(config: ApiConfig, request_options: dict[str, Any]) -> str:
    """Fill the server URL template from the request's server variables."""

    server = config.server
    values = {name: variable.default for name, variable in server.variables.items()}
    values.update(request_options.get("serverVariables") or {})
    url = server.url
    for name, value in values.items():
        url = url.replace("{" + name + "}", str(value))
    return url.rstrip("/")


def build_auth(
    config: ApiConfig, request_options: dict[str, Any]
) -> tuple[dict[str, str], dict[str, str]]:
    """Translate the authorized security schemes into headers and query params."""

    headers: dict[str, str] = {}
    params: dict[str, str] = {}
    authorized = (request_options.get("securities") or {}).get("authorized") or {}

    for scheme_name, credential in authorized.items():
        scheme = config.security_schemes.get(scheme_name)
        if scheme is None:
            logger.warning(
                "Skipping unknown security scheme", extra={"scheme": scheme_name}
            )
            continue

        value = str(credential.get("value", ""))
        if scheme.type == "http" and (scheme.scheme or "").lower() == "bearer":
            headers["Authorization"] = f"Bearer {value}"
        elif scheme.type == "apiKey" and scheme.name:
            if scheme.location == "query":
                params[scheme.name] = value
            else:
                headers[scheme.name] = value
        else:
            logger.warning(
                "Skipping unsupported security scheme",
                extra={"scheme": scheme_name, "scheme_type": scheme.type},
            )

    return headers, params


async def _on_request(request: httpx.Request) -> None:
    request_interceptor(request)


async def _on_response(response: httpx.Response) -> None:
    await response.aread()
    response_interceptor(response)


def build_async_client(
    config: ApiConfig,
    request_options: dict[str, Any],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` for a single API call."""

    headers, params = build_auth(config, request_options)
    headers.setdefault("Accept", "application/json")

    return httpx.AsyncClient(
        base_url=resolve_server_url(config, request_options),
        headers=headers,
        params=params,
        timeout=config.timeout,
        transport=transport,
        event_hooks={"request": [_on_request], "response": [_on_response]},
    )


__all__ = ["build_async_client", "build_auth", "resolve_server_url"]
