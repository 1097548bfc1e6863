"""Python client for the Adobe Campaign Standard REST API."""

from __future__ import annotations

from campaign_standard.logging import configure_logging

configure_logging()

from campaign_standard.client import CampaignStandardClient, init  # noqa: E402
from campaign_standard.core.exceptions import (  # noqa: E402
    CampaignStandardError,
    SdkInitializationError,
)
from campaign_standard.helpers import (  # noqa: E402
    create_request_options,
    reduce_error,
    request_interceptor,
    response_interceptor,
)

__version__ = "0.1.0"

__all__ = [
    "CampaignStandardClient",
    "CampaignStandardError",
    "SdkInitializationError",
    "create_request_options",
    "init",
    "reduce_error",
    "request_interceptor",
    "response_interceptor",
]
