"""Xero accounting API connector.

Purpose
- Issue one authenticated, read-only GET against a Xero resource endpoint.
- Surface non-success responses as `UpstreamQueryFailed` with the raw body.

This module is intentionally independent of FastAPI.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from src.backend.common.config.app_config import config
from src.backend.integrations.xero_auth import XeroTokenContext
from src.backend.integrations.xero_errors import MissingEndpoint, UpstreamQueryFailed

logger = logging.getLogger(__name__)

TENANT_HEADER = "xero-tenant-id"
DEFAULT_API_BASE_URL = "https://api.xero.com/api.xro/2.0"


class XeroClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout_seconds: float = 30,
        debug: bool = False,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._debug = debug

    @classmethod
    def from_env(cls) -> "XeroClient":
        return cls(
            base_url=config.XERO_API_BASE_URL,
            timeout_seconds=config.XERO_HTTP_TIMEOUT_SECONDS,
            debug=config.XERO_DEBUG,
        )

    @staticmethod
    def _clean_params(params: Mapping[str, Any] | None) -> dict[str, str]:
        # JSON booleans go out as `true`, not Python's `True`.
        return {
            k: ("true" if v is True else str(v)) for k, v in (params or {}).items() if v
        }

    def resolve_endpoint(self, endpoint: str) -> str:
        """Absolute URLs pass through; `Invoices` becomes `<base>/Invoices`."""

        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def get(
        self,
        endpoint: str,
        *,
        token: XeroTokenContext,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET `endpoint` and return the decoded response envelope."""

        if not endpoint:
            raise MissingEndpoint()

        query = self._clean_params(params)
        resp = requests.request(
            "GET",
            self.resolve_endpoint(endpoint),
            headers={
                "Authorization": f"Bearer {token.access_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                TENANT_HEADER: token.tenant_id,
            },
            params=query or None,
            timeout=self._timeout_seconds,
        )

        # Prints only URL/params, never tokens.
        if self._debug:
            logger.info(f"[XERO_DEBUG] GET {resp.url}")

        if resp.status_code >= 400:
            raise UpstreamQueryFailed(resp.status_code, resp.reason or "", resp.text)

        data = resp.json()
        return data if isinstance(data, dict) else {}
