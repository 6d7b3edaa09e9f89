"""
CSV and spreadsheet renderings of parsed transactions.

The CSV layout byte-matches the masterbalance.nl converter: every field
double-quoted, ';' between fields, '\\n' between rows, no trailing newline
after the last row. Keep column order and date padding as they are.
"""
from decimal import Decimal
from typing import Dict, List, NamedTuple, Sequence, Union

from mt940_converter.schemas.transactions import Transaction

CSV_DELIMITER = ";"
CSV_HEADER = [
    "Account Number",
    "YYMMDD",
    "YYYY-MM-DD",
    "DD-MM-YYYY",
    "Amount (Dot)",
    "Amount (Comma)",
    "C/D",
    "Description",
]


class SpreadsheetColumn(NamedTuple):
    header: str
    key: str
    width: int


SPREADSHEET_COLUMNS: List[SpreadsheetColumn] = [
    SpreadsheetColumn("Account", "account_number", 25),
    SpreadsheetColumn("Date (YYMMDD)", "short_value_date", 15),
    SpreadsheetColumn("Date (ISO)", "iso_value_date", 15),
    SpreadsheetColumn("Date", "display_date", 15),
    SpreadsheetColumn("Amount", "amount_dot", 15),
    SpreadsheetColumn("Amount (comma)", "amount_comma", 15),
    SpreadsheetColumn("D/C", "cd_indicator", 5),
    SpreadsheetColumn("Description", "description", 70),
]

Cell = Union[str, Decimal]


def _quote(value: str) -> str:
    return f'"{value}"'


def _escape(value: str) -> str:
    return value.replace('"', '""')


def transaction_to_csv_fields(tx: Transaction, amount_prefix: str = "") -> List[str]:
    """Return the 8 CSV field values of a transaction, unquoted."""
    return [
        _escape(tx.account_number),
        tx.value_date.short,
        tx.value_date.iso,
        tx.value_date.display,
        tx.amount_dot(amount_prefix),
        tx.amount_comma(amount_prefix),
        tx.credit_debit.value,
        tx.description,  # already escaped by build_description
    ]


def format_csv(transactions: Sequence[Transaction], amount_prefix: str = "") -> str:
    """
    Render transactions as masterbalance.nl-style CSV.

    An empty sequence gives the header row followed by a single newline.
    """
    header = CSV_DELIMITER.join(_quote(field) for field in CSV_HEADER) + "\n"

    rows = "\n".join(
        CSV_DELIMITER.join(_quote(field) for field in transaction_to_csv_fields(tx, amount_prefix))
        for tx in transactions
    )

    return header + rows


def build_spreadsheet_rows(
    transactions: Sequence[Transaction],
    amount_prefix: str = "",
) -> List[Dict[str, Cell]]:
    """
    One row dict per transaction, keyed by SPREADSHEET_COLUMNS keys.

    amount_dot is a numeric cell unless a prefix is configured (then it
    has to stay text, like the CSV). Text cells carry the same quote-doubled
    values as the CSV fields, so both exports show identical text.
    """
    rows: List[Dict[str, Cell]] = []
    for tx in transactions:
        amount_dot: Cell = tx.amount_dot(amount_prefix) if amount_prefix else tx.amount
        rows.append({
            "account_number": _escape(tx.account_number),
            "short_value_date": tx.value_date.short,
            "iso_value_date": tx.value_date.iso,
            "display_date": tx.value_date.display,
            "amount_dot": amount_dot,
            "amount_comma": tx.amount_comma(amount_prefix),
            "cd_indicator": tx.credit_debit.value,
            "description": tx.description,
        })
    return rows
