"""CSV and JSON exports of the catalog."""

import csv
import io
import json
from typing import Any

from src.catalog.catalog import Catalog
from src.catalog.models import ApiRecord
from src.core.errors import DecodeError

CSV_HEADERS = [
    "API Name",
    "Asset ID",
    "Team",
    "Owner",
    "Owner Email",
    "MUnit Exempt",
    "Custom Coverage",
    "Business Groups",
    "Last Updated",
]


def _csv_row(api: ApiRecord) -> list[str]:
    return [
        api.api_name,
        api.asset_id,
        api.team_name,
        api.api_owner,
        api.api_owner_email,
        "Yes" if api.munit_exempt else "No",
        str(api.custom_coverage) if api.munit_exempt and api.custom_coverage is not None else "N/A",
        "; ".join(api.business_groups),
        api.last_updated.date().isoformat() if api.last_updated else "",
    ]


def export_csv(catalog: Catalog) -> str:
    """Every API as one row, every value double-quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for api in catalog.apis:
        writer.writerow(_csv_row(api))
    return buffer.getvalue()


def export_document(catalog: Catalog) -> dict[str, Any]:
    return {
        "teams": catalog.valid_values.to_document(),
        "apis": {name: document.to_document() for name, document in catalog.team_documents().items()},
    }


def export_json(catalog: Catalog) -> str:
    return json.dumps(export_document(catalog), indent=2)


def import_json(payload: str) -> Catalog:
    """Parse a JSON export back into a catalog."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Catalog export is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError("Catalog export must be a JSON object")
    return Catalog.from_export(data)
