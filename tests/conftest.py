"""
Shared catalog fixtures. The project root reaches sys.path through the pytest
`pythonpath` setting in pyproject.toml.
"""

import pytest

from src.catalog.catalog import Catalog
from src.catalog.models import ApiListDocument, ValidValues


@pytest.fixture
def valid_values() -> ValidValues:
    return ValidValues.model_validate(
        {
            "validTeamNames": [
                "Platform",
                {
                    "name": "Data",
                    "owner": "Ada Admin",
                    "ownerEmail": "ada@example.com",
                    "cmdbAssignmentGroup": "DATA_TEAM",
                    "businessGroups": ["Finance"],
                },
            ],
            "validCmdbAssignmentGroups": ["PLATFORM_TEAM", "DATA_TEAM"],
            "validBusinessGroups": ["Finance", "Operations"],
        }
    )


@pytest.fixture
def api_record() -> dict:
    return {
        "apiName": "Ledger API",
        "assetId": "abc-123",
        "apiOwner": "Ada Admin",
        "apiOwnerEmail": "ada@example.com",
        "teamName": "Data",
        "munitExempt": False,
        "businessGroups": ["Finance"],
        "lastUpdated": "2024-05-01T12:00:00Z",
    }


@pytest.fixture
def catalog(valid_values: ValidValues, api_record: dict) -> Catalog:
    """Team "Platform" with no APIs and team "Data" with one API, abc-123."""
    documents = {
        "Data": ApiListDocument.model_validate({"teamName": "Data", "apis": [api_record]}),
    }
    return Catalog(valid_values, documents)
