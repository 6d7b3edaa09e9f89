"""Account number cleanup for :25: tags."""
import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

DELIMITER_RE = re.compile(r'[/\s,;:\-]+')
IBAN_RE = re.compile(r'^[A-Z]{2}\d{2}[A-Z0-9]{1,30}$')

CURRENCY_CODES = (
    'EUR', 'USD', 'GBP', 'CHF', 'JPY', 'AUD',
    'CAD', 'NOK', 'SEK', 'DKK', 'NZD', 'ZAR',
)
CURRENCY_PREFIX_RE = re.compile(r'^(?:' + '|'.join(CURRENCY_CODES) + r')', re.IGNORECASE)
CURRENCY_SUFFIX_RE = re.compile(r'(?:' + '|'.join(CURRENCY_CODES) + r')$', re.IGNORECASE)


def split_account_field(raw: str) -> List[str]:
    """Split a :25: value on / whitespace , ; - : and drop empty parts."""
    return [part for part in DELIMITER_RE.split(raw) if part]


def iban_checksum_ok(iban: str) -> bool:
    """ISO 13616 mod-97 check ('GB29NWBK60161331926819' -> True)."""
    rearranged = iban[4:] + iban[:4]
    digits = ''.join(str(int(ch, 36)) for ch in rearranged)
    return int(digits) % 97 == 1


def _first_iban(parts: List[str]) -> Optional[str]:
    for part in parts:
        candidate = part.upper()
        if not IBAN_RE.match(candidate):
            continue

        # 'NL91ABNA0417164300EUR' is IBAN-shaped too; only drop the
        # currency when that turns a bad checksum into a good one
        suffix = CURRENCY_SUFFIX_RE.search(candidate)
        if suffix and not iban_checksum_ok(candidate):
            trimmed = candidate[:suffix.start()]
            if IBAN_RE.match(trimmed) and iban_checksum_ok(trimmed):
                return trimmed

        return candidate
    return None


def resolve_account(raw: str) -> str:
    """
    Extract an IBAN-like account identifier from a :25: tag value.

    Strategy:
    1. First delimiter-separated part shaped like an IBAN (a glued currency
       suffix is dropped when the checksum says it isn't part of the IBAN)
    2. Strip a currency code glued to the start/end of the field and retry
       (e.g. 'EURNL91ABNA0417164300')
    3. Fall back to the longest part (first one wins ties)

    Args:
        raw: Tag value without the ':25:' prefix

    Returns:
        Uppercased IBAN, best-effort fallback, or '' for empty input
    """
    logger.debug("Raw account number: %r", raw)

    parts = split_account_field(raw)
    iban = _first_iban(parts)
    if iban:
        logger.debug("Cleaned IBAN found: %s", iban)
        return iban

    stripped = raw.strip()
    cleaned = CURRENCY_PREFIX_RE.sub('', stripped, count=1)
    if cleaned == stripped:
        cleaned = CURRENCY_SUFFIX_RE.sub('', stripped, count=1)

    if cleaned != stripped:
        iban = _first_iban(split_account_field(cleaned))
        if iban:
            logger.debug("Cleaned IBAN after removing currency code: %s", iban)
            return iban

    fallback = ''
    for part in parts:
        if len(part) > len(fallback):
            fallback = part

    logger.debug("No clear IBAN format found, using fallback: %r", fallback)
    return fallback
