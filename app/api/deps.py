"""
Request parameter parsing shared by the routers.

Query parameters are read as raw strings so malformed values can be
clamped (limit / offset) or rejected with an InvalidArgument before any
database access.
"""
import re
from typing import Optional

from fastapi import Path, Query

from app.core.exceptions import InvalidArgument
from app.schemas.employee import MAX_EMP_NO

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
TRUE_VALUES = ("1", "true")

_POSITIVE_INT = re.compile(r"[0-9]+")


def _to_int(value: Optional[str], default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def clamp_limit(value: Optional[str], default: int = DEFAULT_LIMIT) -> int:
    """Parse limit; non-numeric falls back to the default, result kept in [1, 100]."""
    return min(max(_to_int(value, default), 1), MAX_LIMIT)


def clamp_offset(value: Optional[str]) -> int:
    return max(_to_int(value, 0), 0)


def is_true(value: Optional[str]) -> bool:
    """Only the literal strings "1" and "true" count as true."""
    return value in TRUE_VALUES


def parse_emp_no(value: str) -> int:
    value = (value or "").strip()
    if not _POSITIVE_INT.fullmatch(value) or not 0 < int(value) <= MAX_EMP_NO:
        raise InvalidArgument("emp_no must be a positive integer")
    return int(value)


class Pagination:
    """limit / offset query parameters, clamped."""

    def __init__(
        self,
        limit: Optional[str] = Query(None, description="Page size, 1-100 (default 20)"),
        offset: Optional[str] = Query(None, description="Rows to skip (default 0)"),
    ):
        self.limit = clamp_limit(limit)
        self.offset = clamp_offset(offset)


def get_emp_no(emp_no: str = Path(..., description="Employee number")) -> int:
    """Path dependency: positive integer employee number."""
    return parse_emp_no(emp_no)


def get_current_flag(
    current: Optional[str] = Query(None, description='"1" or "true" for the current record only')
) -> bool:
    return is_true(current)
