"""
Tests for app/models/temporal.py - the sentinel end-date convention.
"""
from datetime import date

from app.models import Salary, Title
from app.models.temporal import SENTINEL_END_DATE, current_only


class TestTemporalConvention:

    def test_is_current_on_instances(self):
        open_ended = Salary(emp_no=1, salary=1, from_date=date(2000, 1, 1), to_date=SENTINEL_END_DATE)
        closed = Salary(emp_no=1, salary=1, from_date=date(1999, 1, 1), to_date=date(2000, 1, 1))

        assert open_ended.is_current is True
        assert closed.is_current is False

    def test_is_current_in_queries(self, db_session):
        current = db_session.query(Title).filter(Title.is_current).order_by(Title.emp_no).all()

        assert [(t.emp_no, t.title) for t in current] == [(10001, "Senior Engineer"), (10002, "Staff")]

    def test_current_only_predicate(self, db_session):
        rows = db_session.query(Salary).filter(current_only(Salary), Salary.emp_no == 10003).all()

        assert rows == []
