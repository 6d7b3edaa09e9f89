from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from mt940_converter.core.config import settings
from mt940_converter.core.storage import LatestResultStore, get_result_store
from mt940_converter.schemas.statement import ConvertResponse
from mt940_converter.services import statement_service
from mt940_converter.services.export_service import XLSX_MEDIA_TYPE

router = APIRouter(prefix=settings.API_PREFIX, tags=["Convert"])


@router.post("/convert", response_model=ConvertResponse)
async def convert_statement(
    file: Optional[UploadFile] = File(None, description="MT940 statement (.940, .mt940, .sta, .fin, .txt)"),
    mt940_file: Optional[UploadFile] = File(None, alias="mt940File", description="Same as file, field name used by the web client"),
    store: LatestResultStore = Depends(get_result_store),
):
    """
    Upload an MT940 statement and parse it.

    Process:
    1. Validate extension and size
    2. Decode as UTF-8 text
    3. Parse :25: / :61: / :86: tags into transactions
    4. Keep the result for /download/csv and /download/excel

    Returns display rows (DD-MM-YYYY date, signed amount, description)
    plus any parse warnings. Malformed lines never fail the request.
    """
    upload = file if file is not None else mt940_file
    return statement_service.process_upload(file=upload, store=store, config=settings)


@router.get("/download/csv")
def download_csv(store: LatestResultStore = Depends(get_result_store)):
    """
    Download the last parsed statement as masterbalance.nl-style CSV.

    400 if nothing has been uploaded yet.
    """
    result = statement_service.get_latest_result(store)
    csv_text = statement_service.render_csv(result, config=settings)

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


@router.get("/download/excel")
def download_excel(store: LatestResultStore = Depends(get_result_store)):
    """
    Download the last parsed statement as an .xlsx workbook.

    400 if nothing has been uploaded yet.
    """
    result = statement_service.get_latest_result(store)
    content = statement_service.render_excel(result, config=settings)

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="statement.xlsx"'},
    )
