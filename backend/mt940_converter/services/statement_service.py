# mt940_converter/services/statement_service.py

import logging
import os
import re
from typing import List, Optional, Tuple

from fastapi import HTTPException, UploadFile

from mt940_converter.core.config import Settings, settings as default_settings
from mt940_converter.core.storage import LatestResultStore
from mt940_converter.schemas.statement import ConvertResponse, ParseResult
from mt940_converter.schemas.transactions import CreditDebit, Transaction, TransactionView
from mt940_converter.services.export_service import build_workbook
from mt940_converter.utils.formatters import build_spreadsheet_rows, format_csv
from mt940_converter.utils.mt940_parser import parse_mt940

logger = logging.getLogger(__name__)

NO_DATA_DETAIL = "No transactions available for download"


# -------------------------
# Upload helpers
# -------------------------

def sanitize_filename(filename: str) -> str:
    """Return a safe filename for logging/storage (remove path + dangerous chars)."""
    safe = os.path.basename(filename.replace("\\", "/"))
    return re.sub(r"[^a-zA-Z0-9._-]", "_", safe)


def read_upload(file: Optional[UploadFile], config: Settings = default_settings) -> Tuple[bytes, str]:
    """Validate the uploaded statement and return (content, safe filename)."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    safe_filename = sanitize_filename(file.filename)
    extension = os.path.splitext(safe_filename)[1].lower()
    allowed = config.allowed_extensions_list
    if extension not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Allowed: {', '.join(allowed)}",
        )

    file_content = file.file.read()

    max_size_mb = config.MAX_UPLOAD_SIZE_MB
    if len(file_content) > max_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {max_size_mb}MB",
        )

    return file_content, safe_filename


def decode_statement(file_content: bytes) -> str:
    """Decode an uploaded statement as UTF-8 (a leading BOM is dropped)."""
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=422,
            detail=f"File is not valid UTF-8 text: {e.reason} at byte {e.start}",
        )


# -------------------------
# Conversion pipeline
# -------------------------

def convert_statement(text: str, config: Settings = default_settings) -> ParseResult:
    """Parse decoded MT940 text with the configured C/D and century policies."""
    return parse_mt940(
        text,
        default_flag=CreditDebit(config.DEFAULT_CREDIT_DEBIT_FLAG),
        century_pivot=config.CENTURY_PIVOT,
    )


def to_transaction_views(transactions: List[Transaction]) -> List[TransactionView]:
    """Simplified rows for the UI: display date and signed amount (debit < 0)."""
    return [
        TransactionView(
            date=tx.value_date.display,
            amount=tx.signed_amount,
            description=tx.description,
        )
        for tx in transactions
    ]


def process_upload(
    file: Optional[UploadFile],
    store: LatestResultStore,
    config: Settings = default_settings,
) -> ConvertResponse:
    """
    Validate, decode and parse an uploaded statement, then keep the result
    in the store for the download endpoints.

    Returns:
        ConvertResponse with display rows, warnings and account numbers
    """
    file_content, safe_filename = read_upload(file, config)
    text = decode_statement(file_content)

    result = convert_statement(text, config)
    store.set(result)

    logger.info(
        "Converted %s: %d transaction(s), %d warning(s)",
        safe_filename, len(result.transactions), len(result.warnings),
    )

    return ConvertResponse(
        transactions=to_transaction_views(result.transactions),
        transaction_count=len(result.transactions),
        account_numbers=result.account_numbers,
        warnings=result.warnings,
    )


# -------------------------
# Downloads
# -------------------------

def get_latest_result(store: LatestResultStore) -> ParseResult:
    """
    Return the last parsed statement.

    A parse that produced zero transactions is still a result (header-only
    downloads); only "never parsed" is an error.
    """
    result = store.get()
    if result is None:
        raise HTTPException(status_code=400, detail=NO_DATA_DETAIL)
    return result


def render_csv(result: ParseResult, config: Settings = default_settings) -> str:
    return format_csv(result.transactions, amount_prefix=config.AMOUNT_PREFIX)


def render_excel(result: ParseResult, config: Settings = default_settings) -> bytes:
    rows = build_spreadsheet_rows(result.transactions, amount_prefix=config.AMOUNT_PREFIX)
    try:
        return build_workbook(rows)
    except Exception as e:
        logger.exception("Error generating Excel file")
        raise HTTPException(
            status_code=500,
            detail=f"Error generating Excel file: {str(e)}",
        )
