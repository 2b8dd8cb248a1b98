from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CatalogModel(BaseModel):
    """Base for documents stored with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Team(CatalogModel):
    """A team entry of the valid-values document, normalized to one shape."""

    name: str = Field(validation_alias=AliasChoices("name", "teamName"))
    owner: str = ""
    owner_email: str = Field(default="", alias="ownerEmail")
    cmdb_assignment_group: str = Field(
        default="",
        alias="cmdbAssignmentGroup",
        validation_alias=AliasChoices("cmdbAssignmentGroup", "cmdbTeamName", "cmdb_assignment_group"),
    )
    business_groups: list[str] = Field(default_factory=list, alias="businessGroups")

    @classmethod
    def normalize(cls, entry: Any) -> "Team":
        """Accept either a bare team name or a team object."""
        if isinstance(entry, Team):
            return entry
        if isinstance(entry, str):
            return cls(name=entry)
        return cls.model_validate(entry)

    @property
    def has_metadata(self) -> bool:
        return bool(self.owner or self.owner_email or self.cmdb_assignment_group or self.business_groups)

    def to_document(self) -> str | dict[str, Any]:
        """Bare name when the team carries no metadata, the full object otherwise."""
        if not self.has_metadata:
            return self.name
        return self.model_dump(by_alias=True)


class ApiRecord(CatalogModel):
    """One API entry of a per-team document."""

    api_name: str = Field(default="", alias="apiName")
    asset_id: str = Field(default="", alias="assetId")
    api_owner: str = Field(default="", alias="apiOwner")
    api_owner_email: str = Field(default="", alias="apiOwnerEmail")
    team_name: str = Field(default="", alias="teamName")
    munit_exempt: bool = Field(default=False, alias="munitExempt")
    custom_coverage: int | None = Field(default=None, alias="customCoverage")
    business_groups: list[str] = Field(default_factory=list, alias="businessGroups")
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")

    @field_validator("custom_coverage", mode="before")
    @classmethod
    def _blank_coverage(cls, value: Any) -> Any:
        # Form posts send an empty string when the coverage box is hidden
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ValidValues(CatalogModel):
    """The shared document enumerating valid teams, CMDB groups and business groups."""

    teams: list[Team] = Field(default_factory=list, alias="validTeamNames")
    cmdb_assignment_groups: list[str] = Field(
        default_factory=list,
        alias="validCmdbAssignmentGroups",
        validation_alias=AliasChoices("validCmdbAssignmentGroups", "validCmdbTeamNames"),
    )
    business_groups: list[str] = Field(default_factory=list, alias="validBusinessGroups")

    @field_validator("teams", mode="before")
    @classmethod
    def _normalize_teams(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [Team.normalize(entry) for entry in value]

    @property
    def team_names(self) -> list[str]:
        return [team.name for team in self.teams]

    def to_document(self) -> dict[str, Any]:
        return {
            "validTeamNames": [team.to_document() for team in self.teams],
            "validCmdbAssignmentGroups": list(self.cmdb_assignment_groups),
            "validBusinessGroups": list(self.business_groups),
        }


class ApiListDocument(CatalogModel):
    """A per-team document: ``{teamName, apis}``."""

    team_name: str = Field(alias="teamName")
    apis: list[ApiRecord] = Field(default_factory=list)

    @classmethod
    def empty(cls, team_name: str) -> "ApiListDocument":
        return cls(team_name=team_name, apis=[])

    def to_document(self) -> dict[str, Any]:
        return {"teamName": self.team_name, "apis": [api.to_document() for api in self.apis]}


class CatalogStats(BaseModel):
    total: int = 0
    munit_required: int = 0
    munit_exempt: int = 0


class TeamSummary(BaseModel):
    name: str
    owner: str | None = None
    api_count: int = 0
