"""Date token extraction with a fall back to today's date."""

from collections.abc import Iterable
from datetime import date, datetime
import logging
import re

logger = logging.getLogger(__name__)

# Ordered date shapes and the format used to parse what they capture
DATE_TOKEN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d{1,2}/\d{1,2}/\d{4})"), "%m/%d/%Y"),  # MM/DD/YYYY
    (re.compile(r"(\d{1,2}-\d{1,2}-\d{4})"), "%m-%d-%Y"),  # MM-DD-YYYY
    (re.compile(r"(\d{4}-\d{1,2}-\d{1,2})"), "%Y-%m-%d"),  # YYYY-MM-DD
    (re.compile(r"(\d{1,2}/\d{1,2}/\d{2})"), "%m/%d/%y"),  # MM/DD/YY
    (re.compile(r"(\d{1,2}-\d{1,2}-\d{2})"), "%m-%d-%y"),  # MM-DD-YY
)

# Whole-value formats tried before pattern scanning (CSV date columns)
DIRECT_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",  # ISO format: 2024-01-15
    "%m/%d/%Y",  # US format: 1/15/2024, 01/15/2024
    "%m-%d-%Y",  # Alternative: 1-15-2024
    "%Y/%m/%d",  # Alternative ISO: 2024/01/15
    "%m/%d/%y",  # Short year: 01/15/24
    "%b %d, %Y",  # Jan 15, 2024
    "%B %d, %Y",  # January 15, 2024
    "%d %b %Y",  # 15 Jan 2024
)


def _today() -> date:
    return date.today()


def match_date_token(text: str) -> date | None:
    """Find the first date-shaped substring that is also a real calendar date.

    Args:
        text: Free text, typically a single line

    Returns:
        Parsed date or None if no pattern yields a valid date
    """
    for pattern, date_format in DATE_TOKEN_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return datetime.strptime(match.group(1), date_format).date()
        except ValueError:
            logger.debug(f"Date-shaped token '{match.group(1)}' is not a valid date")
            continue
    return None


def parse_date_token(text: str) -> date:
    """Parse the first date in ``text``, or return today's date."""
    return match_date_token(text) or _today()


def find_first_date(lines: Iterable[str]) -> date:
    """Return the date of the first line that holds a valid date, else today."""
    for line in lines:
        parsed = match_date_token(line)
        if parsed is not None:
            return parsed
    return _today()


def parse_date_value(value: str) -> date | None:
    """Parse a whole field value as a date (ISO timestamps and common US formats)."""
    candidate = value.strip()
    if not candidate:
        return None

    # First try fromisoformat for strict ISO, including timestamps
    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for date_format in DIRECT_DATE_FORMATS:
        try:
            return datetime.strptime(candidate, date_format).date()
        except ValueError:
            continue
    return None


def parse_flexible_date(value: str) -> date:
    """Parse a field value directly, then by date-shape scanning, then fall back to today."""
    return parse_date_value(value) or parse_date_token(value)
