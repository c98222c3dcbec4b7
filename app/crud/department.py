"""
Department CRUD Operations
===========================
Department catalog and current department rosters.
"""

from typing import List

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models import Department, DeptEmp, Employee
from app.models.temporal import current_only


class CRUDDepartment(CRUDBase[Department]):
    """
    Read-only operations for the Department catalog.
    """

    def get_catalog(self, db: Session) -> List[Department]:
        """SQL: SELECT dept_no, dept_name FROM departments ORDER BY dept_name"""
        return self.get_multi(db, order_by=Department.dept_name.asc())

    def get_current_employees(
        self,
        db: Session,
        *,
        dept_no: str,
        skip: int = 0,
        limit: int = 20
    ) -> List[Employee]:
        """
        Employees whose current membership is in ``dept_no``.

        SQL equivalent:
            SELECT e.* FROM employees e
            JOIN dept_emp de ON de.emp_no = e.emp_no
            WHERE de.dept_no = ? AND de.to_date = '9999-01-01'
            ORDER BY e.emp_no
            LIMIT ? OFFSET ?
        """
        return (
            db.query(Employee)
            .join(DeptEmp, DeptEmp.emp_no == Employee.emp_no)
            .filter(DeptEmp.dept_no == dept_no, current_only(DeptEmp))
            .order_by(Employee.emp_no.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )


department = CRUDDepartment(Department)
