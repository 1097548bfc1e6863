"""Custom exception types."""

from __future__ import annotations

from typing import Any


class CampaignStandardError(Exception):
    """Raised when a Campaign Standard API call fails."""

    def __init__(
        self,
        code: str,
        message: str = "Campaign Standard request failed",
        sdk_details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.sdk_details = sdk_details or {}


class SdkInitializationError(CampaignStandardError):
    """Raised when the client is created without its required credentials."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            "ERROR_SDK_INITIALIZATION",
            message=f"SDK initialization error(s). Missing arguments: {', '.join(missing)}",
        )
        self.missing = missing
