from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from src.api.dependencies import get_catalog
from src.catalog.catalog import Catalog
from src.catalog.export import export_csv, export_document

router = APIRouter(prefix="/export", tags=["Export"])

CSV_FILENAME = "api-management-data.csv"
JSON_FILENAME = "api-management-data.json"


@router.get("/csv", summary="Download every API as CSV")
async def download_csv(catalog: Catalog = Depends(get_catalog)) -> Response:
    return Response(
        content=export_csv(catalog),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@router.get("/json", summary="Download the teams and API documents as JSON")
async def download_json(catalog: Catalog = Depends(get_catalog)) -> JSONResponse:
    return JSONResponse(
        content=export_document(catalog),
        headers={"Content-Disposition": f'attachment; filename="{JSON_FILENAME}"'},
    )
