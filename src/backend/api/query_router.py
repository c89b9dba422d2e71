"""Xero query API router.

Endpoints
- GET  /api/scenarios                    catalog listing
- POST /api/xero-query                   single authenticated query, raw envelope back
- POST /api/scenarios/{id}/run           full scenario pipeline, tabular result
- POST /api/scenarios/{id}/export        same, as a CSV download

Credentials travel in the request body and live only for that request.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from src.backend.common.config.app_config import config
from src.backend.integrations.xero_auth import XeroCredentials
from src.backend.integrations.xero_errors import (
    InvalidCredentials,
    MissingEndpoint,
    XeroQueryError,
)
from src.backend.use_cases.csv_export import export_csv, export_filename
from src.backend.use_cases.results_table import SortState, summarize
from src.backend.use_cases.scenario_catalog import ScenarioCatalog, load_scenario_catalog
from src.backend.use_cases.scenario_runner import ScenarioRunner

logger = logging.getLogger(__name__)

query_router = APIRouter(prefix="/api", tags=["Xero Query"])


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------


class _CredentialsBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: Optional[str] = Field(default=None, alias="clientId")
    client_secret: Optional[str] = Field(default=None, alias="clientSecret")

    def credentials(self) -> XeroCredentials:
        if not self.client_id or not self.client_secret:
            raise InvalidCredentials()
        return XeroCredentials(client_id=self.client_id, client_secret=self.client_secret)


class XeroQueryRequest(_CredentialsBody):
    endpoint: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class ScenarioRunRequest(_CredentialsBody):
    parameters: Optional[Dict[str, str]] = None
    sort_column: Optional[str] = Field(default=None, alias="sortColumn")
    sort_direction: Optional[Literal["asc", "desc"]] = Field(default=None, alias="sortDirection")

    def sort_state(self) -> SortState:
        if not self.sort_column or not self.sort_direction:
            return SortState()
        return SortState(column=self.sort_column, direction=self.sort_direction)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_catalog() -> ScenarioCatalog:
    return load_scenario_catalog(config.XERO_SCENARIOS_PATH)


def get_runner() -> ScenarioRunner:
    return ScenarioRunner.from_env()


def _error_response(e: XeroQueryError) -> JSONResponse:
    return JSONResponse(e.to_payload(), status_code=e.status_code)


def _unexpected_error(e: Exception) -> JSONResponse:
    logger.exception(f"Error querying Xero API: {e}")
    return JSONResponse(
        {"error": "Failed to query Xero API", "details": str(e)},
        status_code=500,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@query_router.get("/scenarios")
async def list_scenarios(catalog: ScenarioCatalog = Depends(get_catalog)):
    return [s.model_dump(by_alias=True, exclude_none=True) for s in catalog]


@query_router.post("/xero-query")
def xero_query(body: XeroQueryRequest, runner: ScenarioRunner = Depends(get_runner)):
    """Run one authenticated GET and return Xero's envelope unchanged."""

    try:
        credentials = body.credentials()
        if not body.endpoint:
            raise MissingEndpoint()
        return runner.execute_query(credentials, body.endpoint, body.parameters)
    except XeroQueryError as e:
        return _error_response(e)
    except Exception as e:
        return _unexpected_error(e)


@query_router.post("/scenarios/{scenario_id}/run")
def run_scenario(
    scenario_id: str,
    body: ScenarioRunRequest,
    catalog: ScenarioCatalog = Depends(get_catalog),
    runner: ScenarioRunner = Depends(get_runner),
):
    try:
        scenario = catalog.get(scenario_id)
        result = runner.run(
            scenario,
            body.credentials(),
            body.parameters,
            sort=body.sort_state(),
        )
    except XeroQueryError as e:
        return _error_response(e)
    except Exception as e:
        return _unexpected_error(e)

    payload = result.to_payload()
    payload["scenario"] = {"id": scenario.id, "name": scenario.name}
    payload["summary"] = summarize(result.count)
    return payload


@query_router.post("/scenarios/{scenario_id}/export")
def export_scenario(
    scenario_id: str,
    body: ScenarioRunRequest,
    catalog: ScenarioCatalog = Depends(get_catalog),
    runner: ScenarioRunner = Depends(get_runner),
):
    try:
        scenario = catalog.get(scenario_id)
        result = runner.run(
            scenario,
            body.credentials(),
            body.parameters,
            sort=body.sort_state(),
        )
        content = export_csv(result.data, scenario.display_fields)
    except XeroQueryError as e:
        return _error_response(e)
    except Exception as e:
        return _unexpected_error(e)

    filename = export_filename(scenario.name)
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
