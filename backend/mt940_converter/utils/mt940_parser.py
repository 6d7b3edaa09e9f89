import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, Tuple

from mt940_converter.schemas.statement import ParseResult, ParseWarning, WarningCode
from mt940_converter.schemas.transactions import UNKNOWN_ACCOUNT, CreditDebit, Transaction
from mt940_converter.utils.account_resolver import resolve_account
from mt940_converter.utils.date_helpers import CENTURY_PIVOT, INVALID_VALUE_DATE, parse_value_date

logger = logging.getLogger(__name__)

TAG_ACCOUNT = ":25:"
TAG_STATEMENT_LINE = ":61:"
TAG_DESCRIPTION = ":86:"

# Used when a :61: line carries no C/D mark. Observed exports disagree on
# this (some default to D), so it is a policy, overridable per call.
DEFAULT_CREDIT_DEBIT_FLAG = CreditDebit.CREDIT

# Compile patterns once (performance + clarity)
BOOKING_DATE_RE = re.compile(r'^\d{4}(?![\d.,])')
CD_MARK_RE = re.compile(r'^R?([CD])')
LEADING_AMOUNT_RE = re.compile(r'^(?:[A-Z]{3}|[A-Z])?(\d+(?:[.,]\d*)?)')
DECIMAL_AMOUNT_RE = re.compile(r'\d+[.,]\d*')
VALID_AMOUNT_RE = re.compile(r'^\d+\.?\d{0,2}$')
WHITESPACE_RE = re.compile(r'\s+')

ZERO_AMOUNT = Decimal("0.00")
CENTS = Decimal("0.01")


def split_lines(content: str) -> List[str]:
    """
    Split raw statement text into trimmed lines.

    Handles \\n, \\r\\n and bare \\r endings and a leading BOM. Blank lines are
    kept so callers can report real line numbers.
    """
    content = content.lstrip('\ufeff')
    normalized = content.replace('\r\n', '\n').replace('\r', '\n')
    return [line.strip() for line in normalized.split('\n')]


def build_description(lines: Sequence[str]) -> str:
    """
    Collapse the lines of a :86: block into one CSV-safe description.

    Slashes become spaces, whitespace runs collapse, and double quotes are
    doubled here (not in the CSV writer) because the same text feeds both
    the CSV and the spreadsheet export. The formatters double quotes in the
    account number too, so every text field follows one rule in both sinks.

    Example:
        >>> build_description(['PAYMENT FOR/INVOICE 123'])
        'PAYMENT FOR INVOICE 123'
    """
    full_text = ' '.join(lines).replace('/', ' ')
    return WHITESPACE_RE.sub(' ', full_text).strip().replace('"', '""')


def _extract_amount(rest: str) -> Optional[str]:
    """
    Find the amount text after the C/D mark.

    MT940 amounts always carry a decimal comma, so a separator-carrying run
    inside the first word beats a bare integer at the start.
    """
    first_word = rest.split(None, 1)[0] if rest.strip() else ''

    leading = LEADING_AMOUNT_RE.match(first_word)
    if leading and re.search(r'[.,]', leading.group(1)):
        return leading.group(1)

    with_decimals = DECIMAL_AMOUNT_RE.search(first_word)
    if with_decimals:
        return with_decimals.group(0)

    if leading:
        return leading.group(1)
    return None


def parse_transaction_line(
    body: str,
    account_number: str,
    *,
    default_flag: CreditDebit = DEFAULT_CREDIT_DEBIT_FLAG,
    century_pivot: int = CENTURY_PIVOT,
    line_number: int = 0,
) -> Tuple[Transaction, List[ParseWarning]]:
    """
    Parse the body of a :61: statement line into a Transaction.

    Layout: YYMMDD [MMDD] [R]C|D [currency] amount N... (reference)

    Never raises: an unreadable date becomes INVALID_VALUE_DATE and an
    unreadable amount becomes 0.00, each with a ParseWarning.

    Args:
        body: Tag value without the ':61:' prefix (e.g. '2405301234C0RN82,73')
        account_number: Account from the last :25: tag
        default_flag: C/D used when the line has no mark
        century_pivot: Two-digit years up to this value are 20YY
        line_number: Position in the file, for warnings

    Returns:
        (transaction with empty description, warnings)
    """
    raw_line = TAG_STATEMENT_LINE + body
    warnings: List[ParseWarning] = []

    def warn(code: WarningCode, message: str) -> None:
        logger.warning("Line %d: %s (%r)", line_number, message, raw_line)
        warnings.append(ParseWarning(line_number=line_number, code=code, message=message, line=raw_line))

    # Value date
    value_date = parse_value_date(body[:6], century_pivot)
    if value_date is None:
        warn(WarningCode.INVALID_DATE, f"Unreadable value date {body[:6]!r}")
        value_date = INVALID_VALUE_DATE

    rest = body[6:]

    # Optional booking date (MMDD)
    booking = BOOKING_DATE_RE.match(rest)
    if booking:
        rest = rest[booking.end():]

    # Credit/debit mark
    mark = CD_MARK_RE.match(rest)
    if mark:
        credit_debit = CreditDebit(mark.group(1))
        rest = rest[mark.end():]
    else:
        credit_debit = default_flag
        warn(WarningCode.MISSING_CD_FLAG, f"No C/D mark, using {default_flag.value}")

    # Amount
    amount_str = _extract_amount(rest)
    if amount_str is not None:
        amount_str = amount_str.replace(',', '.')

    amount: Optional[Decimal] = None
    if amount_str is not None and VALID_AMOUNT_RE.match(amount_str):
        try:
            amount = Decimal(amount_str).quantize(CENTS)
        except InvalidOperation:
            # more digits than the decimal context can hold
            amount = None

    if amount is None:
        warn(WarningCode.INVALID_AMOUNT, f"Unreadable amount in {rest!r}, using 0.00")
        amount = ZERO_AMOUNT

    transaction = Transaction(
        account_number=account_number,
        value_date=value_date,
        credit_debit=credit_debit,
        amount=amount,
    )
    return transaction, warnings


def _finalize(transaction: Transaction, description_lines: List[str]) -> Transaction:
    if description_lines:
        return transaction.model_copy(update={"description": build_description(description_lines)})
    return transaction


def parse_mt940(
    content: str,
    *,
    default_flag: CreditDebit = DEFAULT_CREDIT_DEBIT_FLAG,
    century_pivot: int = CENTURY_PIVOT,
) -> ParseResult:
    """
    Parse the full text of an MT940/STA file.

    Line dispatch:
        :25:  -> new current account (applies to every following :61:)
        :61:  -> close the open transaction, start a new one
        :86:  -> open/extend the description of the open transaction
        text  -> continuation of an open :86: block
        other tags (:20:, :60F:, :62F:, ...) end continuation and are ignored

    A transaction is emitted when the next :61: starts or at end of input,
    in the order the :61: lines appear. Malformed lines never abort the
    batch; problems are collected in ParseResult.warnings.

    Args:
        content: Decoded file text
        default_flag: C/D used for :61: lines without a mark
        century_pivot: Two-digit years up to this value are 20YY

    Returns:
        ParseResult with transactions and warnings (both empty for empty input)
    """
    transactions: List[Transaction] = []
    warnings: List[ParseWarning] = []

    current_account: Optional[str] = None
    current: Optional[Transaction] = None
    description_lines: List[str] = []  # :86: lines of the open transaction
    in_description = False  # continuation lines extend the description
    unknown_account_reported = False

    for line_number, line in enumerate(split_lines(content), start=1):
        if not line:
            continue

        if line.startswith(TAG_ACCOUNT):
            in_description = False
            current_account = resolve_account(line[len(TAG_ACCOUNT):])
            if not current_account:
                current_account = UNKNOWN_ACCOUNT
                message = "Empty account in :25: tag"
                logger.warning("Line %d: %s", line_number, message)
                warnings.append(ParseWarning(
                    line_number=line_number, code=WarningCode.UNKNOWN_ACCOUNT, message=message, line=line
                ))

        elif line.startswith(TAG_STATEMENT_LINE):
            if current is not None:
                transactions.append(_finalize(current, description_lines))
            description_lines = []
            in_description = False

            if current_account is None and not unknown_account_reported:
                unknown_account_reported = True
                message = f"No :25: tag before first :61:, using {UNKNOWN_ACCOUNT}"
                logger.warning("Line %d: %s", line_number, message)
                warnings.append(ParseWarning(
                    line_number=line_number, code=WarningCode.UNKNOWN_ACCOUNT, message=message, line=line
                ))

            current, line_warnings = parse_transaction_line(
                line[len(TAG_STATEMENT_LINE):],
                current_account or UNKNOWN_ACCOUNT,
                default_flag=default_flag,
                century_pivot=century_pivot,
                line_number=line_number,
            )
            warnings.extend(line_warnings)

        elif line.startswith(TAG_DESCRIPTION):
            if current is not None:
                in_description = True
                description_lines.append(line[len(TAG_DESCRIPTION):])

        elif line.startswith(':'):
            # stop appending, the collected lines stay with the open transaction
            in_description = False

        elif current is not None and in_description:
            description_lines.append(line)

    # Don't forget the last transaction
    if current is not None:
        transactions.append(_finalize(current, description_lines))

    logger.info("Parsed %d transaction(s) with %d warning(s)", len(transactions), len(warnings))
    return ParseResult(transactions=transactions, warnings=warnings)


if __name__ == "__main__":
    """
    Smoke test runner for the MT940 parser.

    Usage:
        python -m mt940_converter.utils.mt940_parser <path_to_sta>
    """
    import sys

    from mt940_converter.utils.formatters import format_csv

    if len(sys.argv) < 2:
        print("Usage: python -m mt940_converter.utils.mt940_parser <path_to_sta>")
        sys.exit(1)

    with open(sys.argv[1], encoding="utf-8-sig") as f:
        result = parse_mt940(f.read())

    print(format_csv(result.transactions))
    print(f"Transactions: {len(result.transactions)}")
    print(f"Warnings: {len(result.warnings)}")
    for w in result.warnings:
        print(f"  line {w.line_number}: {w.code.value} {w.message}")
