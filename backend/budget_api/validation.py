"""
Request parameter validation.

Dates are checked as text first (ASCII digits in the exact shape) and then
as calendar values, so `2024-1` and `2024-13` are both rejected.
"""

import re
from datetime import date, datetime
from typing import Optional, Tuple

from budget_api.errors import InvalidParameterError

MONTH_RE = re.compile(r"[0-9]{4}-[0-9]{2}")
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def is_month(value: Optional[str]) -> bool:
    if not value or not MONTH_RE.fullmatch(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m")
    except ValueError:
        return False
    return True


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD, returning None for anything else."""
    if not value or not DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def validate_month(month: str) -> str:
    if not is_month(month):
        raise InvalidParameterError("Invalid month format. Use YYYY-MM.")
    return month


def validate_cutoff(cutoff: Optional[str]) -> Optional[date]:
    if cutoff is None:
        return None
    parsed = parse_date(cutoff)
    if parsed is None:
        raise InvalidParameterError("Invalid cutoff date format. Use YYYY-MM-DD.")
    return parsed


def require_date_range(start_date: Optional[str], end_date: Optional[str]) -> Tuple[date, date]:
    if not start_date or not end_date:
        raise InvalidParameterError("Missing required query parameters: startDate and endDate.")
    start, end = parse_date(start_date), parse_date(end_date)
    if start is None or end is None:
        raise InvalidParameterError("Invalid date format. Use YYYY-MM-DD for startDate and endDate.")
    return start, end
