from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import List

from mt940_converter.schemas.transactions import Transaction, TransactionView


class WarningCode(str, Enum):
    """Codes for recoverable problems found while parsing a statement"""
    INVALID_DATE = "INVALID_DATE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    MISSING_CD_FLAG = "MISSING_CD_FLAG"
    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"


class ParseWarning(BaseModel):
    """A degraded field in the statement. The transaction is still emitted."""
    line_number: int  # 1-based line in the uploaded file
    code: WarningCode
    message: str
    line: str

    model_config = ConfigDict(frozen=True)


class ParseResult(BaseModel):
    """
    Output of one parse call.

    Returned to the caller instead of kept in module state; the HTTP layer
    stores it in the latest-result slot for the download endpoints.
    """
    transactions: List[Transaction] = []
    warnings: List[ParseWarning] = []

    @property
    def account_numbers(self) -> List[str]:
        seen: List[str] = []
        for tx in self.transactions:
            if tx.account_number not in seen:
                seen.append(tx.account_number)
        return seen


class ConvertResponse(BaseModel):
    """Response of POST /api/convert (output)"""
    transactions: List[TransactionView]
    transaction_count: int
    account_numbers: List[str] = []
    warnings: List[ParseWarning] = []

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "transactions": [
                    {"date": "30-05-2024", "amount": "82.73", "description": "PAYMENT FOR INVOICE 123"}
                ],
                "transaction_count": 1,
                "account_numbers": ["GB29NWBK60161331926819"],
                "warnings": []
            }
        }
    )
