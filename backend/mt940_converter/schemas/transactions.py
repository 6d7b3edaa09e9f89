from pydantic import BaseModel, ConfigDict, Field
from datetime import date as DateType
from typing import Optional
from decimal import Decimal
from enum import Enum


UNKNOWN_ACCOUNT = "UNKNOWN"  # account_number when the statement has no usable :25: tag


class CreditDebit(str, Enum):
    """Credit/debit mark of a :61: statement line"""
    CREDIT = "C"
    DEBIT = "D"


class ValueDate(BaseModel):
    """
    Value date decoded from the YYMMDD block of a :61: line.

    Month and day are kept verbatim (no calendar validation), so an invalid
    date such as 02-30 is carried through to the CSV exactly as the bank wrote it.
    """
    short: str  # "240530"
    year: int   # 2024 (after century expansion)
    month: str  # "05"
    day: str    # "30"

    model_config = ConfigDict(frozen=True)

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month}-{self.day}"

    @property
    def display(self) -> str:
        return f"{self.day}-{self.month}-{self.year:04d}"

    def as_date(self) -> Optional[DateType]:
        """Return a real calendar date, or None when month/day don't form one."""
        try:
            return DateType(self.year, int(self.month), int(self.day))
        except ValueError:
            return None


def _format_amount(amount: Decimal, separator: str, prefix: str) -> str:
    return prefix + f"{amount:.2f}".replace(".", separator)


class Transaction(BaseModel):
    """
    One finalized :61: entry (plus its :86: description).

    amount is always positive; direction lives in credit_debit.
    """
    account_number: str
    value_date: ValueDate
    credit_debit: CreditDebit
    amount: Decimal = Field(ge=0)
    description: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def signed_amount(self) -> Decimal:
        if self.credit_debit == CreditDebit.DEBIT:
            return Decimal(0) - self.amount  # 0 - x keeps 0.00 unsigned
        return self.amount

    def amount_dot(self, prefix: str = "") -> str:
        return _format_amount(self.amount, ".", prefix)

    def amount_comma(self, prefix: str = "") -> str:
        return _format_amount(self.amount, ",", prefix)


class TransactionView(BaseModel):
    """Simplified transaction returned by POST /api/convert (output)"""
    date: str  # "30-05-2024"
    amount: Decimal  # Signed (neg=debit, pos=credit)
    description: str

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "date": "30-05-2024",
                "amount": "-82.73",
                "description": "PAYMENT FOR INVOICE 123"
            }
        }
    )
