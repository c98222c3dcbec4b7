"""
Temporal History Queries
========================
Current / historical lookups over the versioned tables (salaries, titles,
dept_emp). All three share one contract:

    current_only=True  -> rows whose to_date is the sentinel
    current_only=False -> up to HISTORY_LIMIT rows, newest from_date first
"""

from typing import List, Optional

from sqlalchemy.orm import Query, Session

from app.models import Department, DeptEmp, Salary, Title
from app.models.temporal import HISTORY_LIMIT, current_only as current_predicate, newest_first


def _history(query: Query, model, *, current_only: bool) -> Query:
    if current_only:
        query = query.filter(current_predicate(model))
    return query.order_by(newest_first(model)).limit(HISTORY_LIMIT)


def get_salary_history(db: Session, emp_no: int, *, current_only: bool = False) -> List[Salary]:
    """
    SQL equivalent:
        SELECT salary, from_date, to_date FROM salaries
        WHERE emp_no = ? [AND to_date = '9999-01-01']
        ORDER BY from_date DESC LIMIT 100
    """
    query = db.query(Salary).filter(Salary.emp_no == emp_no)
    return _history(query, Salary, current_only=current_only).all()


def get_current_salary(db: Session, emp_no: int) -> Optional[Salary]:
    rows = get_salary_history(db, emp_no, current_only=True)
    return rows[0] if rows else None


def get_title_history(db: Session, emp_no: int, *, current_only: bool = False) -> List[Title]:
    query = db.query(Title).filter(Title.emp_no == emp_no)
    return _history(query, Title, current_only=current_only).all()


def get_current_title(db: Session, emp_no: int) -> Optional[Title]:
    rows = get_title_history(db, emp_no, current_only=True)
    return rows[0] if rows else None


def get_department_history(db: Session, emp_no: int, *, current_only: bool = False) -> List[dict]:
    """
    Department memberships joined with the department name.

    SQL equivalent:
        SELECT d.dept_no, d.dept_name, de.from_date, de.to_date
        FROM dept_emp de JOIN departments d ON d.dept_no = de.dept_no
        WHERE de.emp_no = ? [AND de.to_date = '9999-01-01']
        ORDER BY de.from_date DESC LIMIT 100
    """
    query = (
        db.query(Department.dept_no, Department.dept_name, DeptEmp.from_date, DeptEmp.to_date)
        .join(DeptEmp, DeptEmp.dept_no == Department.dept_no)
        .filter(DeptEmp.emp_no == emp_no)
    )
    rows = _history(query, DeptEmp, current_only=current_only).all()
    return [
        {"dept_no": dept_no, "dept_name": dept_name, "from_date": from_date, "to_date": to_date}
        for dept_no, dept_name, from_date, to_date in rows
    ]
