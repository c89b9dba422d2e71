"""Xero Custom Connection authentication.

Purpose
- Exchange client credentials for a bearer token (client_credentials grant).
- Resolve the organisation (tenant) the Custom Connection is attached to.

Nothing is cached: every call performs the full two-step exchange, and the
client secret is never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from src.backend.common.config.app_config import config
from src.backend.integrations.xero_errors import (
    ConnectionsRequestFailed,
    InvalidCredentials,
    NoOrganizationConnected,
    TokenRequestFailed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class XeroCredentials:
    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class XeroTokenContext:
    access_token: str = field(repr=False)
    tenant_id: str


class XeroAuthenticator:
    def __init__(
        self,
        *,
        identity_url: str,
        connections_url: str,
        timeout_seconds: float = 30,
    ) -> None:
        self._identity_url = identity_url
        self._connections_url = connections_url
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_env(cls) -> "XeroAuthenticator":
        return cls(
            identity_url=config.XERO_IDENTITY_URL,
            connections_url=config.XERO_CONNECTIONS_URL,
            timeout_seconds=config.XERO_HTTP_TIMEOUT_SECONDS,
        )

    def _request_token(self, credentials: XeroCredentials) -> dict[str, Any]:
        resp = requests.request(
            "POST",
            self._identity_url,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={
                "grant_type": "client_credentials",
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
            },
            timeout=self._timeout_seconds,
        )
        if resp.status_code >= 400:
            logger.warning(f"Xero token request rejected: HTTP {resp.status_code}")
            raise TokenRequestFailed(resp.status_code, resp.text)
        return resp.json()

    def _list_connections(self, access_token: str) -> list[dict[str, Any]]:
        resp = requests.request(
            "GET",
            self._connections_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout_seconds,
        )
        if resp.status_code >= 400:
            logger.warning(f"Xero connections request rejected: HTTP {resp.status_code}")
            raise ConnectionsRequestFailed(resp.status_code, resp.text)
        connections = resp.json()
        return connections if isinstance(connections, list) else []

    def authenticate(self, client_id: str, client_secret: str) -> XeroTokenContext:
        """Return a fresh bearer token and the tenant id it should be used with.

        Custom Connections are single-organisation, so the first connection is
        used without further disambiguation.
        """

        if not client_id or not client_secret:
            raise InvalidCredentials()

        credentials = XeroCredentials(client_id=client_id, client_secret=client_secret)
        token_data = self._request_token(credentials)
        access_token = token_data.get("access_token") or ""

        connections = self._list_connections(access_token)
        if not connections:
            raise NoOrganizationConnected()

        tenant_id = connections[0].get("tenantId") or ""
        logger.info(
            f"Authenticated Xero client {client_id[:4]}*** against tenant "
            f"{connections[0].get('tenantName') or tenant_id}"
        )
        return XeroTokenContext(access_token=access_token, tenant_id=tenant_id)
