"""
HTTP client shared by external practice-management adapters.

Wraps ``httpx.Client`` so every transport failure, timeout, non-2xx status
or non-JSON body surfaces as ``ExternalAdapterError`` (or
``BookingConflictError`` for 409 on writes).
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.exceptions import BookingConflictError, ExternalAdapterError
from models.clinic import ManagementConfig

logger = logging.getLogger(__name__)


class ExternalApiClient:
    """JSON-over-HTTP client for one external system and one clinic."""

    def __init__(
        self,
        system: str,
        config: ManagementConfig,
        transport: Optional[httpx.BaseTransport] = None,
        auth_header: str = "Authorization",
        auth_prefix: str = "Bearer "
    ):
        if not config.base_url:
            raise ValueError(f"{system} requires management_config.base_url")
        self.system = system
        headers = {"Accept": "application/json"}
        if config.api_key:
            headers[auth_header] = f"{auth_prefix}{config.api_key}"
        self._client = httpx.Client(
            base_url=config.base_url,
            headers=headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        conflict_on_409: bool = False
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None for empty bodies).

        Raises:
            ExternalAdapterError: On network errors, timeouts, error statuses
                or undecodable bodies
            BookingConflictError: On 409 when ``conflict_on_409`` is set
        """
        try:
            response = self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if conflict_on_409 and status_code == 409:
                logger.warning(f"{self.system} rejected booking with 409: {e.response.text}")
                raise BookingConflictError(f"{self.system}: slot is no longer available")
            logger.warning(f"{self.system} API error {status_code} on {method} {path}: {e.response.text}")
            raise ExternalAdapterError(self.system, f"HTTP {status_code} from {method} {path}", status_code)
        except httpx.TimeoutException as e:
            logger.warning(f"{self.system} API timeout on {method} {path}: {e}")
            raise ExternalAdapterError(self.system, f"timeout on {method} {path}")
        except httpx.HTTPError as e:
            logger.warning(f"{self.system} API request failed on {method} {path}: {e}")
            raise ExternalAdapterError(self.system, f"request failed on {method} {path}: {e}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise ExternalAdapterError(self.system, f"invalid JSON from {method} {path}")

    def close(self) -> None:
        self._client.close()
