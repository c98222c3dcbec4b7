"""
Department API Router
=====================
  GET /departments                     catalog ordered by name
  GET /departments/{dept_no}/employees current members, paginated
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import Pagination
from app.core.exceptions import InvalidArgument
from app.crud import department as crud_department
from app.database import get_db
from app.schemas.department import DepartmentResponse
from app.schemas.employee import EmployeeSummary

# Create router for department endpoints
router = APIRouter()


@router.get("", response_model=List[DepartmentResponse])
def list_departments(db: Session = Depends(get_db)):
    """
    Get all departments.

    Returns:
      List of {dept_no, dept_name} ordered by dept_name
    """
    return crud_department.get_catalog(db)


@router.get("/{dept_no}/employees", response_model=List[EmployeeSummary])
def list_department_employees(
    dept_no: str,
    page: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    """
    Employees currently assigned to a department.

    Path Parameters:
      dept_no: department code, case-insensitive (d005 == D005)

    Query Parameters:
      limit: clamped to 1-100 (default 20)
      offset: rows to skip (default 0)
    """
    code = dept_no.strip().upper()
    if not code:
        raise InvalidArgument("dept_no is required")

    return crud_department.get_current_employees(
        db, dept_no=code, skip=page.offset, limit=page.limit
    )
