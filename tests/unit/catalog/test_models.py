from datetime import datetime, timezone

from src.catalog.models import ApiListDocument, ApiRecord, Team, ValidValues


class TestTeam:
    def test_bare_name(self) -> None:
        team = Team.normalize("Platform")
        assert team.name == "Platform"
        assert team.has_metadata is False
        assert team.to_document() == "Platform"

    def test_object_with_legacy_keys(self) -> None:
        team = Team.normalize({"teamName": "Data", "cmdbTeamName": "DATA_TEAM"})
        assert team.name == "Data"
        assert team.cmdb_assignment_group == "DATA_TEAM"
        assert team.to_document() == {
            "name": "Data",
            "owner": "",
            "ownerEmail": "",
            "cmdbAssignmentGroup": "DATA_TEAM",
            "businessGroups": [],
        }


class TestValidValues:
    def test_mixed_team_entries_and_legacy_cmdb_key(self) -> None:
        values = ValidValues.model_validate(
            {
                "validTeamNames": ["Platform", {"name": "Data", "owner": "Ada"}],
                "validCmdbTeamNames": ["DATA_TEAM"],
            }
        )

        assert values.team_names == ["Platform", "Data"]
        assert values.cmdb_assignment_groups == ["DATA_TEAM"]
        assert values.business_groups == []

    def test_round_trips_to_the_stored_shape(self) -> None:
        document = {
            "validTeamNames": ["Platform"],
            "validCmdbAssignmentGroups": ["PLATFORM_TEAM"],
            "validBusinessGroups": ["Finance"],
        }
        assert ValidValues.model_validate(document).to_document() == document

    def test_null_team_list(self) -> None:
        assert ValidValues.model_validate({"validTeamNames": None}).teams == []


class TestApiRecord:
    def test_camel_case_document(self) -> None:
        api = ApiRecord.model_validate(
            {
                "apiName": "Ledger",
                "assetId": "abc-123",
                "teamName": "Data",
                "munitExempt": True,
                "customCoverage": 80,
                "businessGroups": ["Finance"],
                "lastUpdated": "2024-05-01T12:00:00Z",
                "somethingElse": "ignored",
            }
        )

        assert api.last_updated == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        document = api.to_document()
        assert document["customCoverage"] == 80
        assert document["lastUpdated"] == "2024-05-01T12:00:00Z"
        assert "somethingElse" not in document

    def test_blank_coverage_is_none(self) -> None:
        assert ApiRecord.model_validate({"customCoverage": "  "}).custom_coverage is None


def test_api_list_document() -> None:
    document = ApiListDocument.model_validate({"teamName": "Data", "apis": [{"assetId": "abc-123"}]})
    assert document.to_document()["apis"][0]["assetId"] == "abc-123"
    assert ApiListDocument.empty("Platform").to_document() == {"teamName": "Platform", "apis": []}
