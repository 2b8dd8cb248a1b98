"""
In-memory catalog of teams and their APIs.

Every mutating operation validates first and commits second, so a rejected
edit leaves the catalog exactly as it was. The catalog is never the system
of record: callers submit a change request for each accepted edit and may
reload from the content store at any time.
"""

import re
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from src.catalog.models import ApiListDocument, ApiRecord, CatalogStats, Team, TeamSummary, ValidValues
from src.core.errors import ConflictError, DecodeError, NoOpError, NotFoundError, ValidationError
from src.core.models import ValidValueKind

logger = structlog.get_logger(__name__)

ASSET_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

REQUIRED_API_FIELDS = {
    "apiName": "api_name",
    "assetId": "asset_id",
    "apiOwner": "api_owner",
    "apiOwnerEmail": "api_owner_email",
    "teamName": "team_name",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_api(record: ApiRecord | dict[str, Any]) -> ApiRecord:
    if isinstance(record, ApiRecord):
        return record.model_copy(deep=True)
    try:
        return ApiRecord.model_validate(record)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "record"
        raise ValidationError(field, f"Invalid value for '{field}': {first['msg']}") from e


def _searchable(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    return str(value)


class Catalog:
    """Teams, valid values and every team's API list, held in memory."""

    def __init__(self, valid_values: ValidValues, team_documents: dict[str, ApiListDocument] | None = None):
        self._valid_values = valid_values.model_copy(deep=True)
        self._team_apis: dict[str, list[ApiRecord]] = {}
        for team_name in valid_values.team_names:
            document = (team_documents or {}).get(team_name) or ApiListDocument.empty(team_name)
            self._team_apis[team_name] = [self._claim(api, team_name) for api in document.apis]
        self.loaded = True

    @classmethod
    def from_export(cls, data: dict[str, Any]) -> "Catalog":
        """Rebuild a catalog from the ``{teams, apis}`` JSON export."""
        try:
            valid_values = ValidValues.model_validate(data.get("teams") or {})
            documents = [ApiListDocument.model_validate(doc) for doc in (data.get("apis") or {}).values()]
        except (AttributeError, PydanticValidationError) as e:
            raise DecodeError(f"Malformed catalog export: {e}") from e
        return cls(valid_values, {document.team_name: document for document in documents})

    @staticmethod
    def _claim(api: ApiRecord, team_name: str) -> ApiRecord:
        # A record belongs to the document it was loaded from
        if api.team_name != team_name:
            if api.team_name:
                logger.warning("api_team_mismatch", asset_id=api.asset_id, declared=api.team_name, owner=team_name)
            return api.model_copy(update={"team_name": team_name})
        return api

    # --- Read access ---

    @property
    def valid_values(self) -> ValidValues:
        return self._valid_values

    @property
    def teams(self) -> list[Team]:
        return list(self._valid_values.teams)

    @property
    def team_names(self) -> list[str]:
        return self._valid_values.team_names

    @property
    def apis(self) -> list[ApiRecord]:
        return [api for apis in self._team_apis.values() for api in apis]

    def get_team(self, team_name: str) -> Team:
        for team in self._valid_values.teams:
            if team.name == team_name:
                return team
        raise NotFoundError(f"Team '{team_name}' does not exist", details={"teamName": team_name})

    def apis_for_team(self, team_name: str) -> list[ApiRecord]:
        if team_name not in self._team_apis:
            raise NotFoundError(f"Team '{team_name}' does not exist", details={"teamName": team_name})
        return list(self._team_apis[team_name])

    def find_api(self, asset_id: str) -> ApiRecord | None:
        for apis in self._team_apis.values():
            for api in apis:
                if api.asset_id == asset_id:
                    return api
        return None

    def get_api(self, asset_id: str) -> ApiRecord:
        api = self.find_api(asset_id)
        if api is None:
            raise NotFoundError(f"API '{asset_id}' does not exist", details={"assetId": asset_id})
        return api

    def team_document(self, team_name: str) -> ApiListDocument:
        return ApiListDocument(team_name=team_name, apis=self.apis_for_team(team_name))

    def team_documents(self) -> dict[str, ApiListDocument]:
        return {name: ApiListDocument(team_name=name, apis=list(apis)) for name, apis in self._team_apis.items()}

    # --- Queries ---

    def search(self, term: str | None) -> list[ApiRecord]:
        """Case-insensitive substring match over the string form of every field."""
        return self._search(self.apis, term)

    def filter_by_team(self, team_name: str | None) -> list[ApiRecord]:
        if not team_name:
            return self.apis
        return [api for api in self.apis if api.team_name == team_name]

    def query(self, term: str | None = None, team_name: str | None = None) -> list[ApiRecord]:
        """Team filter first, then search, as the dashboard table applies them."""
        return self._search(self.filter_by_team(team_name), term)

    @staticmethod
    def _search(apis: list[ApiRecord], term: str | None) -> list[ApiRecord]:
        if not term:
            return list(apis)
        needle = term.lower()
        return [
            api
            for api in apis
            if any(
                needle in _searchable(value).lower()
                for value in api.to_document().values()
            )
        ]

    def stats(self) -> CatalogStats:
        apis = self.apis
        exempt = sum(1 for api in apis if api.munit_exempt)
        return CatalogStats(total=len(apis), munit_required=len(apis) - exempt, munit_exempt=exempt)

    def team_summary(self) -> list[TeamSummary]:
        return [
            TeamSummary(name=team.name, owner=team.owner or None, api_count=len(self._team_apis.get(team.name, [])))
            for team in self._valid_values.teams
        ]

    # --- API mutations ---

    def validate_api(self, record: ApiRecord | dict[str, Any]) -> ApiRecord:
        """Check a record against every catalog invariant without touching the catalog."""
        api = _coerce_api(record)

        for alias, attribute in REQUIRED_API_FIELDS.items():
            if not str(getattr(api, attribute) or "").strip():
                raise ValidationError(alias, f"'{alias}' is required")

        if not ASSET_ID_PATTERN.fullmatch(api.asset_id):
            raise ValidationError(
                "assetId", "Asset ID can only contain alphanumeric characters, hyphens, and underscores"
            )

        if api.munit_exempt:
            if api.custom_coverage is None:
                raise ValidationError("customCoverage", "Custom coverage is required when MUnit testing is exempt")
            if not 0 <= api.custom_coverage <= 100:
                raise ValidationError(
                    "customCoverage", "Custom coverage must be between 0 and 100 when MUnit testing is exempt"
                )
        else:
            api.custom_coverage = None

        if api.team_name not in self._team_apis:
            raise ValidationError("teamName", f"Team '{api.team_name}' is not a valid team")

        if not api.business_groups:
            raise ValidationError("businessGroups", "At least one business group is required")
        unknown = [group for group in api.business_groups if group not in self._valid_values.business_groups]
        if unknown:
            raise ValidationError("businessGroups", f"Unknown business groups: {', '.join(unknown)}")

        existing = self.find_api(api.asset_id)
        if existing is not None and existing.team_name != api.team_name:
            raise ValidationError("assetId", f"Asset ID '{api.asset_id}' already exists in team '{existing.team_name}'")

        return api

    def upsert_api(self, record: ApiRecord | dict[str, Any]) -> ApiRecord:
        """Insert a new API or overwrite the one with the same asset id in its team."""
        api = self.validate_api(record)
        api.last_updated = _utcnow()

        apis = self._team_apis[api.team_name]
        for index, existing in enumerate(apis):
            if existing.asset_id == api.asset_id:
                apis[index] = api
                logger.info("api_updated", asset_id=api.asset_id, team=api.team_name)
                return api

        apis.append(api)
        logger.info("api_added", asset_id=api.asset_id, team=api.team_name)
        return api

    def reassign_api(self, asset_id: str, new_team_name: str) -> ApiRecord:
        """Move an API to another team in a single commit."""
        api = self.get_api(asset_id)
        old_team_name = api.team_name
        if new_team_name == old_team_name:
            raise NoOpError(
                f"API '{asset_id}' is already assigned to team '{new_team_name}'",
                details={"assetId": asset_id, "teamName": new_team_name},
            )
        if new_team_name not in self._team_apis:
            raise ValidationError("teamName", f"Team '{new_team_name}' is not a valid team")

        moved = api.model_copy(update={"team_name": new_team_name, "last_updated": _utcnow()})
        old_list = [item for item in self._team_apis[old_team_name] if item.asset_id != asset_id]
        new_list = [*self._team_apis[new_team_name], moved]
        self._team_apis.update({old_team_name: old_list, new_team_name: new_list})

        logger.info("api_reassigned", asset_id=asset_id, old_team=old_team_name, new_team=new_team_name)
        return moved

    def delete_api(self, asset_id: str) -> ApiRecord | None:
        """Remove the first API with this asset id. Absent ids are a silent no-op."""
        for team_name, apis in self._team_apis.items():
            for index, api in enumerate(apis):
                if api.asset_id == asset_id:
                    del apis[index]
                    logger.info("api_deleted", asset_id=asset_id, team=team_name)
                    return api
        logger.debug("api_delete_missing", asset_id=asset_id)
        return None

    # --- Team and valid-value mutations ---

    def add_team(self, team: Team | dict[str, Any] | str) -> Team:
        try:
            new_team = Team.normalize(team)
        except PydanticValidationError as e:
            raise ValidationError("name", "Team name is required") from e

        if not new_team.name.strip():
            raise ValidationError("name", "Team name is required")
        if not isinstance(team, str):
            # Full team records need their CMDB group and business groups; bare names do not
            if not new_team.cmdb_assignment_group.strip():
                raise ValidationError("cmdbAssignmentGroup", "A CMDB assignment group is required")
            if not new_team.business_groups:
                raise ValidationError("businessGroups", "At least one business group is required")
        if new_team.name in self._team_apis:
            raise ConflictError(f"Team '{new_team.name}' already exists", details={"teamName": new_team.name})

        self._valid_values.teams.append(new_team)
        group = new_team.cmdb_assignment_group
        if group and group not in self._valid_values.cmdb_assignment_groups:
            self._valid_values.cmdb_assignment_groups.append(group)
        for business_group in new_team.business_groups:
            if business_group not in self._valid_values.business_groups:
                self._valid_values.business_groups.append(business_group)
        self._team_apis[new_team.name] = []

        logger.info("team_added", team=new_team.name)
        return new_team

    def delete_team(self, team_name: str) -> Team:
        """Remove a team that owns no APIs."""
        team = self.get_team(team_name)
        api_count = len(self._team_apis.get(team_name, []))
        if api_count:
            raise ConflictError(
                f"Team '{team_name}' still owns {api_count} API(s); reassign them first",
                details={"teamName": team_name, "apiCount": api_count},
            )

        self._valid_values.teams = [item for item in self._valid_values.teams if item.name != team_name]
        self._team_apis.pop(team_name, None)
        logger.info("team_deleted", team=team_name)
        return team

    def _values_for(self, kind: ValidValueKind) -> list[str]:
        if kind is ValidValueKind.CMDB_GROUP:
            return self._valid_values.cmdb_assignment_groups
        return self._valid_values.business_groups

    def add_valid_value(self, kind: ValidValueKind, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValidationError("value", "A value is required")
        if kind is ValidValueKind.TEAM_NAME:
            return self.add_team(value).name

        values = self._values_for(kind)
        if value in values:
            raise ConflictError(f"Value '{value}' already exists in {kind.value}", details={"kind": kind.value})
        values.append(value)
        logger.info("valid_value_added", kind=kind.value, value=value)
        return value

    def remove_valid_value(self, kind: ValidValueKind, value: str) -> str:
        if kind is ValidValueKind.TEAM_NAME:
            return self.delete_team(value).name

        values = self._values_for(kind)
        if value not in values:
            raise NotFoundError(f"Value '{value}' does not exist in {kind.value}", details={"kind": kind.value})
        if kind is ValidValueKind.BUSINESS_GROUP:
            users = [api.asset_id for api in self.apis if value in api.business_groups]
            if users:
                raise ConflictError(
                    f"Business group '{value}' is still used by {len(users)} API(s)",
                    details={"kind": kind.value, "assetIds": users},
                )
        if kind is ValidValueKind.CMDB_GROUP:
            teams = [team.name for team in self._valid_values.teams if team.cmdb_assignment_group == value]
            if teams:
                raise ConflictError(
                    f"CMDB group '{value}' is still assigned to {len(teams)} team(s)",
                    details={"kind": kind.value, "teamNames": teams},
                )
        values.remove(value)
        logger.info("valid_value_removed", kind=kind.value, value=value)
        return value
