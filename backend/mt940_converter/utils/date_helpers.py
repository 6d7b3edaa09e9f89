"""Date parsing utilities for MT940 statements."""
import re
from typing import Optional

from mt940_converter.schemas.transactions import ValueDate

CENTURY_PIVOT = 30

YYMMDD_RE = re.compile(r'^\d{6}$')

# Placeholder for a :61: line whose first 6 characters are not a YYMMDD date
INVALID_VALUE_DATE = ValueDate(short="000000", year=0, month="00", day="00")


def expand_year(yy: int, pivot: int = CENTURY_PIVOT) -> int:
    """
    Expand a two-digit MT940 year to four digits.

    Examples:
        >>> expand_year(24)
        2024
        >>> expand_year(30)
        2030
        >>> expand_year(31)
        1931
    """
    if yy <= pivot:
        return 2000 + yy
    return 1900 + yy


def parse_value_date(yymmdd: str, pivot: int = CENTURY_PIVOT) -> Optional[ValueDate]:
    """
    Decode a YYMMDD block (e.g. '240530') into a ValueDate.

    Month and day are taken verbatim; '240230' gives 30-02-2024 on purpose.

    Args:
        yymmdd: The first 6 characters of a :61: tag body
        pivot: Two-digit years up to and including this value are 20YY

    Returns:
        ValueDate, or None if the block is not six digits
    """
    if not yymmdd or not YYMMDD_RE.match(yymmdd):
        return None

    return ValueDate(
        short=yymmdd,
        year=expand_year(int(yymmdd[0:2]), pivot),
        month=yymmdd[2:4],
        day=yymmdd[4:6],
    )
