"""Catalog endpoints: the dashboard's tables, filters and edit forms."""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_catalog, get_dashboard
from src.catalog.catalog import Catalog
from src.catalog.models import CatalogStats, Team, TeamSummary
from src.changes.submitter import ChangeRequest
from src.core.errors import NotFoundError
from src.core.models import ChangeAction, ValidValueKind
from src.core.utils.logging import log_structured
from src.dashboard.context import DashboardContext

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Catalog"])


class ReassignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_name: str = Field(alias="teamName")


class ValidValueRequest(BaseModel):
    value: str


class ChangeRequestInfo(BaseModel):
    action: str
    sink: str
    repository: str
    number: int | None = None
    url: str | None = None


class EditResponse(BaseModel):
    """What the dashboard shows after an edit: the record and where the change request went."""

    message: str
    record: dict[str, Any] | None = None
    change_request: ChangeRequestInfo | None = None


def _edit_response(subject: str, record: dict[str, Any] | None, change: ChangeRequest | None) -> EditResponse:
    if change is None:
        message = f"{subject}. No backing repository; the change is only local."
        return EditResponse(message=message, record=record)

    where = f"issue #{change.number}" if change.number else f"a {change.sink.value} event"
    return EditResponse(
        message=f"{subject}. Submitted as {where} on {change.repository} for approval.",
        record=record,
        change_request=ChangeRequestInfo(
            action=change.action.value,
            sink=change.sink.value,
            repository=change.repository,
            number=change.number,
            url=change.url,
        ),
    )


# --- APIs ---


@router.get("/apis", summary="List APIs, optionally filtered by team and search term")
async def list_apis(
    search: str | None = Query(default=None, description="Case-insensitive substring over every field"),
    team: str | None = Query(default=None, description="Exact team name"),
    catalog: Catalog = Depends(get_catalog),
) -> list[dict[str, Any]]:
    return [api.to_document() for api in catalog.query(term=search, team_name=team)]


@router.get("/apis/{asset_id}", summary="Get one API")
async def get_api(asset_id: str, catalog: Catalog = Depends(get_catalog)) -> dict[str, Any]:
    return catalog.get_api(asset_id).to_document()


@router.put("/apis", response_model=EditResponse, summary="Add an API or update it in place")
async def upsert_api(
    payload: dict[str, Any] = Body(...),
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    api = catalog.upsert_api(payload)
    record = api.to_document()
    change = await dashboard.submit_change(ChangeAction.UPDATE_API, record)
    return _edit_response(f"API '{api.asset_id}' saved", record, change)


@router.post("/apis/{asset_id}/reassign", response_model=EditResponse, summary="Move an API to another team")
async def reassign_api(
    asset_id: str,
    request: ReassignRequest,
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    previous_team = catalog.get_api(asset_id).team_name
    api = catalog.reassign_api(asset_id, request.team_name)
    record = api.to_document()
    change = await dashboard.submit_change(
        ChangeAction.ASSIGN_API_TO_TEAM,
        {"assetId": asset_id, "previousTeamName": previous_team, "newTeamName": api.team_name, "apiData": record},
    )
    return _edit_response(f"API '{asset_id}' assigned to '{api.team_name}'", record, change)


@router.delete("/apis/{asset_id}", response_model=EditResponse, summary="Delete an API")
async def delete_api(
    asset_id: str,
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    # delete_api is silent about missing ids, so report absence here
    if catalog.find_api(asset_id) is None:
        raise NotFoundError(f"API '{asset_id}' does not exist", details={"assetId": asset_id})
    api = catalog.delete_api(asset_id)
    record = api.to_document() if api else None
    change = await dashboard.submit_change(ChangeAction.DELETE_API, {"assetId": asset_id, "apiData": record})
    return _edit_response(f"API '{asset_id}' deleted", record, change)


# --- Teams ---


@router.get("/teams", response_model=list[TeamSummary], summary="Teams with their API counts")
async def list_teams(catalog: Catalog = Depends(get_catalog)) -> list[TeamSummary]:
    return catalog.team_summary()


@router.post("/teams", response_model=EditResponse, status_code=status.HTTP_201_CREATED, summary="Add a team")
async def add_team(
    payload: dict[str, Any] = Body(...),
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    team = catalog.add_team(payload)
    record = team.model_dump(by_alias=True)
    change = await dashboard.submit_change(ChangeAction.ADD_TEAM, record)
    return _edit_response(f"Team '{team.name}' added", record, change)


@router.delete("/teams/{team_name}", response_model=EditResponse, summary="Delete a team that owns no APIs")
async def delete_team(
    team_name: str,
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    team: Team = catalog.delete_team(team_name)
    record = team.model_dump(by_alias=True)
    change = await dashboard.submit_change(ChangeAction.DELETE_TEAM, {"teamName": team.name})
    return _edit_response(f"Team '{team.name}' deleted", record, change)


# --- Valid values ---


@router.get("/valid-values", summary="The valid-values document")
async def get_valid_values(catalog: Catalog = Depends(get_catalog)) -> dict[str, Any]:
    return catalog.valid_values.to_document()


@router.post(
    "/valid-values/{kind}",
    response_model=EditResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a team name, CMDB group or business group",
)
async def add_valid_value(
    kind: ValidValueKind,
    request: ValidValueRequest,
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    value = catalog.add_valid_value(kind, request.value)
    payload = {"arrayType": kind.value, "value": value}
    change = await dashboard.submit_change(ChangeAction.ADD_VALUE, payload)
    return _edit_response(f"'{value}' added to {kind.value}", payload, change)


@router.delete(
    "/valid-values/{kind}/{value}",
    response_model=EditResponse,
    summary="Remove a team name, CMDB group or business group",
)
async def remove_valid_value(
    kind: ValidValueKind,
    value: str,
    catalog: Catalog = Depends(get_catalog),
    dashboard: DashboardContext = Depends(get_dashboard),
) -> EditResponse:
    removed = catalog.remove_valid_value(kind, value)
    payload = {"arrayType": kind.value, "value": removed}
    change = await dashboard.submit_change(ChangeAction.DELETE_VALUE, payload)
    return _edit_response(f"'{removed}' removed from {kind.value}", payload, change)


# --- Overview ---


@router.get("/stats", response_model=CatalogStats, summary="API totals and MUnit exemption counts")
async def get_stats(catalog: Catalog = Depends(get_catalog)) -> CatalogStats:
    return catalog.stats()


@router.post("/reload", summary="Discard local edits and reload every document")
async def reload_catalog(dashboard: DashboardContext = Depends(get_dashboard)) -> dict[str, Any]:
    catalog = await dashboard.reload()
    log_structured(logger, "catalog_reloaded", source=dashboard.loader.source, apis=len(catalog.apis))
    return {"status": "reloaded", "teams": len(catalog.team_names), "apis": len(catalog.apis)}
