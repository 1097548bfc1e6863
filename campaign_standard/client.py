"""Campaign Standard REST API client."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

import httpx

from campaign_standard.core.config import ApiConfig, load_config
from campaign_standard.core.exceptions import CampaignStandardError, SdkInitializationError
from campaign_standard.helpers import create_request_options, reduce_error
from campaign_standard.logging import get_logger, reset_request_id, set_request_id
from campaign_standard.transport import build_async_client

logger = get_logger("client")

WORKFLOW_COMMANDS = ("START", "PAUSE", "RESUME", "STOP")


def _profile_root(has_custom_resource: bool) -> str:
    return "/profileAndServicesExt" if has_custom_resource else "/profileAndServices"


def _with_filters(path: str, filters: Sequence[str] | None) -> str:
    if not filters:
        return path
    return "/".join([path, *(str(f).strip("/") for f in filters)])


class CampaignStandardClient:
    """Async client for the Campaign Standard profile, workflow and privacy APIs.

    Every method performs exactly one HTTP call and returns the decoded JSON
    payload (``None`` for an empty body). Failures surface as
    ``CampaignStandardError`` carrying a per-operation code.
    """

    def __init__(
        self,
        tenant_id: str,
        api_key: str,
        access_token: str,
        *,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.tenant_id = tenant_id
        self.api_key = api_key
        self.access_token = access_token
        self._config = config or load_config()
        self._transport = transport

    # --- profiles ---

    async def get_all_profiles(
        self,
        filters: Sequence[str] | None = None,
        has_custom_resource: bool = False,
        params: dict[str, Any] | None = None,
    ) -> Any:
        path = _with_filters(f"{_profile_root(has_custom_resource)}/profile", filters)
        return await self._call(
            "GET",
            path,
            code="ERROR_GET_ALL_PROFILES",
            params=params,
            details={"filters": filters, "hasCustomResource": has_custom_resource},
        )

    async def create_profile(self, profile: dict[str, Any], has_custom_resource: bool = False) -> Any:
        return await self._call(
            "POST",
            f"{_profile_root(has_custom_resource)}/profile",
            code="ERROR_CREATE_PROFILE",
            body=profile,
            details={"profile": profile, "hasCustomResource": has_custom_resource},
        )

    async def update_profile(
        self,
        profile_pkey: str,
        profile: dict[str, Any],
        has_custom_resource: bool = False,
    ) -> Any:
        return await self._call(
            "PATCH",
            f"{_profile_root(has_custom_resource)}/profile/{profile_pkey}",
            code="ERROR_UPDATE_PROFILE",
            body=profile,
            details={"profilePKey": profile_pkey, "profile": profile},
        )

    async def get_profile(self, profile_pkey: str, has_custom_resource: bool = False) -> Any:
        return await self._call(
            "GET",
            f"{_profile_root(has_custom_resource)}/profile/{profile_pkey}",
            code="ERROR_GET_PROFILE",
            details={"profilePKey": profile_pkey},
        )

    async def get_history_of_profile(self, profile_pkey: str) -> Any:
        return await self._call(
            "GET",
            f"/profileAndServices/history/{profile_pkey}",
            code="ERROR_GET_HISTORY_OF_PROFILE",
            details={"profilePKey": profile_pkey},
        )

    # --- services ---

    async def get_all_services(
        self,
        filters: Sequence[str] | None = None,
        has_custom_resource: bool = False,
        params: dict[str, Any] | None = None,
    ) -> Any:
        path = _with_filters(f"{_profile_root(has_custom_resource)}/service", filters)
        return await self._call(
            "GET",
            path,
            code="ERROR_GET_ALL_SERVICES",
            params=params,
            details={"filters": filters, "hasCustomResource": has_custom_resource},
        )

    async def create_service(self, service: dict[str, Any], has_custom_resource: bool = False) -> Any:
        return await self._call(
            "POST",
            f"{_profile_root(has_custom_resource)}/service",
            code="ERROR_CREATE_SERVICE",
            body=service,
            details={"service": service, "hasCustomResource": has_custom_resource},
        )

    async def get_service(self, service_pkey: str, has_custom_resource: bool = False) -> Any:
        return await self._call(
            "GET",
            f"{_profile_root(has_custom_resource)}/service/{service_pkey}",
            code="ERROR_GET_SERVICE",
            details={"servicePKey": service_pkey},
        )

    # --- metadata and organizational units ---

    async def get_metadata_for_resource(self, resource: str) -> Any:
        return await self._call(
            "GET",
            f"/profileAndServices/resourceType/{resource}",
            code="ERROR_GET_METADATA_FOR_RESOURCE",
            details={"resource": resource},
        )

    async def get_custom_resources(self) -> Any:
        return await self._call(
            "GET",
            "/profileAndServicesExt/resourceType/index",
            code="ERROR_GET_CUSTOM_RESOURCES",
        )

    async def get_all_org_units(self, params: dict[str, Any] | None = None) -> Any:
        return await self._call(
            "GET",
            "/profileAndServicesExt/orgUnitBase",
            code="ERROR_GET_ALL_ORG_UNITS",
            params=params,
        )

    # --- transactional messages ---

    async def send_transactional_event(
        self, event_id: str, event: dict[str, Any], namespace: str = "mc"
    ) -> Any:
        return await self._call(
            "POST",
            f"/{namespace}/{event_id}",
            code="ERROR_SEND_TRANSACTIONAL_EVENT",
            body=event,
            details={"eventId": event_id, "namespace": namespace},
        )

    async def get_transactional_event(
        self, event_id: str, event_pkey: str, namespace: str = "mc"
    ) -> Any:
        return await self._call(
            "GET",
            f"/{namespace}/{event_id}/{event_pkey}",
            code="ERROR_GET_TRANSACTIONAL_EVENT",
            details={"eventId": event_id, "eventPKey": event_pkey, "namespace": namespace},
        )

    # --- workflows ---

    async def get_workflow(self, workflow_id: str) -> Any:
        return await self._call(
            "GET",
            f"/workflow/execution/{workflow_id}",
            code="ERROR_GET_WORKFLOW",
            details={"workflowId": workflow_id},
        )

    async def trigger_signal_activity(
        self, trigger_url: str, parameters: dict[str, Any] | None = None
    ) -> Any:
        return await self._call(
            "POST",
            trigger_url,
            code="ERROR_TRIGGER_SIGNAL_ACTIVITY",
            body=parameters,
            details={"workflowTriggerUrl": trigger_url},
        )

    async def control_workflow(self, workflow_id: str, command: str) -> Any:
        method = (command or "").upper()
        if method not in WORKFLOW_COMMANDS:
            raise CampaignStandardError(
                "ERROR_CONTROL_WORKFLOW",
                message=f"Unknown workflow command {command!r}, expected one of {', '.join(WORKFLOW_COMMANDS)}",
                sdk_details={"workflowId": workflow_id, "command": command},
            )
        return await self._call(
            "POST",
            f"/workflow/execution/{workflow_id}/commands",
            code="ERROR_CONTROL_WORKFLOW",
            body={"method": method},
            details={"workflowId": workflow_id, "command": command},
        )

    # --- deliveries ---

    async def get_all_deliveries(self, params: dict[str, Any] | None = None) -> Any:
        return await self._call(
            "GET",
            "/profileAndServices/delivery",
            code="ERROR_GET_ALL_DELIVERIES",
            params=params,
        )

    async def get_delivery(self, delivery_pkey: str) -> Any:
        return await self._call(
            "GET",
            f"/profileAndServices/delivery/{delivery_pkey}",
            code="ERROR_GET_DELIVERY",
            details={"deliveryPKey": delivery_pkey},
        )

    # --- privacy ---

    async def create_gdpr_request(self, request: dict[str, Any]) -> Any:
        return await self._call(
            "POST",
            "/privacy/privacyTool",
            code="ERROR_CREATE_GDPR_REQUEST",
            body=request,
            details={"request": request},
        )

    async def get_gdpr_requests(self, params: dict[str, Any] | None = None) -> Any:
        return await self._call(
            "GET",
            "/privacy/privacyTool",
            code="ERROR_GET_GDPR_REQUEST",
            params=params,
        )

    async def get_data_from_relative_url(self, relative_url: str) -> Any:
        return await self._call(
            "GET",
            relative_url,
            code="ERROR_GET_DATA_FROM_RELATIVE_URL",
            details={"relativeUrl": relative_url},
        )

    # --- transport ---

    async def _call(
        self,
        method: str,
        path: str,
        *,
        code: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> Any:
        options = create_request_options(
            tenant_id=self.tenant_id,
            api_key=self.api_key,
            access_token=self.access_token,
            body=body,
        )
        token = set_request_id(uuid.uuid4().hex)
        try:
            async with build_async_client(
                self._config, options, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=options["requestBody"] if method in {"POST", "PUT", "PATCH"} else None,
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            reduced = reduce_error(exc)
            logger.info(
                "Campaign Standard call failed",
                extra={"code": code, "method": method, "path": path},
            )
            raise CampaignStandardError(
                code,
                message=str(reduced),
                sdk_details=details,
            ) from exc
        finally:
            reset_request_id(token)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise CampaignStandardError(
                code, message="Unexpected response format", sdk_details=details
            ) from exc


def init(
    tenant_id: str,
    api_key: str,
    access_token: str,
    *,
    config: ApiConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CampaignStandardClient:
    """Validate the credentials and return a ready client."""

    missing = [
        name
        for name, value in (
            ("tenantId", tenant_id),
            ("apiKey", api_key),
            ("accessToken", access_token),
        )
        if not value
    ]
    if missing:
        raise SdkInitializationError(missing)

    return CampaignStandardClient(
        tenant_id, api_key, access_token, config=config, transport=transport
    )


__all__ = ["CampaignStandardClient", "WORKFLOW_COMMANDS", "init"]
