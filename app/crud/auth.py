from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Employee, EmployeeAuth


def get_credential_by_email(db: Session, email: str) -> Optional[Tuple[EmployeeAuth, Employee]]:
    """
    Credential row and its employee, matched case-insensitively on email.

    SQL equivalent:
        SELECT ea.*, e.first_name, e.last_name
        FROM employee_auth ea JOIN employees e ON e.emp_no = ea.emp_no
        WHERE LOWER(ea.email) = ? LIMIT 1
    """
    row = (
        db.query(EmployeeAuth, Employee)
        .join(Employee, Employee.emp_no == EmployeeAuth.emp_no)
        .filter(func.lower(EmployeeAuth.email) == email.strip().lower())
        .first()
    )
    return tuple(row) if row else None
