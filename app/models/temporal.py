"""
Temporal Record Convention
==========================
Versioned tables (salaries, titles, dept_emp) keep one row per period.
The currently active row is the one whose ``to_date`` equals the sentinel
end-date 9999-01-01; the sentinel is used instead of NULL.

    current    -> WHERE to_date = '9999-01-01'
    historical -> all rows, ORDER BY from_date DESC
"""
from datetime import date

from sqlalchemy import Column, Date
from sqlalchemy.ext.hybrid import hybrid_property

SENTINEL_END_DATE = date(9999, 1, 1)

# Historical lookups never return more than this many rows
HISTORY_LIMIT = 100


class TemporalMixin:
    """Columns shared by every versioned table."""
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)

    @hybrid_property
    def is_current(self):
        return self.to_date == SENTINEL_END_DATE


def current_only(model):
    """Predicate selecting the open-ended row of a versioned table."""
    return model.to_date == SENTINEL_END_DATE


def newest_first(model):
    return model.from_date.desc()
