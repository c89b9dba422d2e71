"""Error taxonomy for the Xero query pipeline.

Every error carries the HTTP status the API layer should answer with and,
where the failure came from Xero, the upstream body verbatim in `details`.
"""

from __future__ import annotations


class XeroQueryError(RuntimeError):
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidCredentials(XeroQueryError):
    status_code = 400

    def __init__(self, message: str = "Client ID and Client Secret are required") -> None:
        super().__init__(message)


class MissingEndpoint(XeroQueryError):
    status_code = 400

    def __init__(self, message: str = "Endpoint is required") -> None:
        super().__init__(message)


class TokenRequestFailed(XeroQueryError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            f"Failed to get access token: {status}",
            status_code=status,
            details=body,
        )
        self.upstream_status = status


class ConnectionsRequestFailed(XeroQueryError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            f"Failed to get connections: {status}",
            status_code=status,
            details=body,
        )
        self.upstream_status = status


class NoOrganizationConnected(XeroQueryError):
    def __init__(self) -> None:
        super().__init__(
            "No Xero organizations found. Please ensure your Custom Connection "
            "has access to at least one organization."
        )


class UpstreamQueryFailed(XeroQueryError):
    def __init__(self, status: int, reason: str, body: str) -> None:
        super().__init__(
            f"Xero API error: {status} {reason}".rstrip(),
            status_code=status,
            details=body,
        )
        self.upstream_status = status
        self.reason = reason


class ScenarioNotFound(XeroQueryError):
    status_code = 404

    def __init__(self, scenario_id: str) -> None:
        super().__init__(f"Unknown scenario: {scenario_id}")
        self.scenario_id = scenario_id


class NoDataToExport(XeroQueryError):
    status_code = 400

    def __init__(self) -> None:
        super().__init__("No data to export")
