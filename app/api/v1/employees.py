"""
Employee API Router
===================
Endpoints for listing, looking up and mutating employees.

  GET    /employees                      filtered, sorted, paginated listing
  GET    /employees/find                 alias of the listing
  GET    /employees/search?q=            quick name search
  GET    /employees/departments          department catalog (alias)
  GET    /employees/{dept_no}/employees  current department roster (alias)
  GET    /employees/{emp_no}             employee row
  GET    /employees/{emp_no}/full        employee + current salary/title/department
  GET    /employees/{emp_no}/salary      salary history (?current=1 for current)
  GET    /employees/{emp_no}/titles      title history
  GET    /employees/{emp_no}/departments department history
  POST   /employees                      create
  PUT    /employees/{emp_no}             full update
  DELETE /employees/{emp_no}             delete
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.deps import Pagination, clamp_limit, get_current_flag, get_emp_no
from app.core.config import settings
from app.core.exceptions import InvalidArgument, NotFound, validation_message
from app.crud import department as crud_department
from app.crud import employee as crud_employee
from app.crud import history as crud_history
from app.database import get_db
from app.schemas.department import DepartmentAssignment, DepartmentResponse
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeCreated,
    EmployeeDeleted,
    EmployeeFilter,
    EmployeeFull,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeSummary,
    EmployeeUpdate,
)
from app.schemas.salary import SalaryRecord
from app.schemas.title import TitleRecord

# Setup logger
logger = logging.getLogger(__name__)

# Create router for employee endpoints
router = APIRouter()

EMPLOYEE_NOT_FOUND = "Employee not found"


@router.get("", response_model=EmployeeListResponse)
@router.get("/find", response_model=EmployeeListResponse)
def list_employees(
    response: Response,
    first_name: Optional[str] = Query(None, description="Substring, case-insensitive"),
    last_name: Optional[str] = Query(None, description="Substring, case-insensitive"),
    gender: Optional[str] = Query(None, description="M or F"),
    birth_date: Optional[str] = Query(None, description="Exact date, YYYY-MM-DD"),
    hire_date: Optional[str] = Query(None, description="Exact date, YYYY-MM-DD"),
    order_by: Optional[str] = Query(
        None, alias="orderBy", description="emp_no, first_name, last_name, gender or hire_date"
    ),
    direction: Optional[str] = Query(None, description="asc (default) or desc"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    """
    List employees with filters and pagination.

    Query Parameters:
      first_name, last_name: substring match
      gender, birth_date, hire_date: exact match
      limit: page size, clamped to 1-100 (default 20)
      offset: rows to skip (default 0)
      orderBy / direction: sort key (secondary key is always emp_no asc)

    Returns:
      {rows, total, limit, offset}; total is the match count before paging.
      The X-Total-Count header carries the same total.
    """
    try:
        filters = EmployeeFilter(
            first_name=first_name,
            last_name=last_name,
            gender=gender,
            birth_date=birth_date,
            hire_date=hire_date,
        )
    except ValidationError as e:
        raise InvalidArgument(validation_message(e))

    rows, total = crud_employee.list_filtered(
        db,
        filters=filters,
        limit=page.limit,
        offset=page.offset,
        order_by=order_by,
        direction=direction,
    )
    response.headers["X-Total-Count"] = str(total)
    return EmployeeListResponse(
        rows=[EmployeeResponse.model_validate(row) for row in rows],
        total=total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/search", response_model=List[EmployeeSummary])
def search_employees(
    q: Optional[str] = Query(None, description="Text to look for in first/last/full name"),
    limit: Optional[str] = Query(None, description="Max results, 1-100 (default 20)"),
    db: Session = Depends(get_db)
):
    """
    Search employees by first name, last name or "first last".

    Example:
      GET /employees/search?q=Geor&limit=20
    """
    text = (q or "").strip()
    if not text:
        raise InvalidArgument("Parameter q is required")
    return crud_employee.search(db, q=text, limit=clamp_limit(limit))


@router.get("/departments", response_model=List[DepartmentResponse])
def list_departments_alias(db: Session = Depends(get_db)):
    """Department catalog (same as GET /departments)."""
    return crud_department.get_catalog(db)


@router.get("/{dept_no}/employees", response_model=List[EmployeeSummary])
def list_department_employees_alias(
    dept_no: str,
    page: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    """Current roster of a department (same as GET /departments/{dept_no}/employees)."""
    code = dept_no.strip().upper()
    if not code:
        raise InvalidArgument("dept_no is required")
    return crud_department.get_current_employees(
        db, dept_no=code, skip=page.offset, limit=page.limit
    )


@router.get("/{emp_no}", response_model=EmployeeResponse)
def get_employee(
    emp_no: int = Depends(get_emp_no),
    db: Session = Depends(get_db)
):
    """
    Get a single employee by emp_no.

    Returns:
      Employee data, 400 for a malformed emp_no, 404 if not found
    """
    employee = crud_employee.get(db, id=emp_no)
    if not employee:
        raise NotFound(EMPLOYEE_NOT_FOUND)
    return employee


@router.get("/{emp_no}/full", response_model=EmployeeFull)
def get_employee_full(
    emp_no: int = Depends(get_emp_no),
    db: Session = Depends(get_db)
):
    """
    Employee with current salary, title and department.

    Facets without a current (9999-01-01) row are null.
    """
    employee = crud_employee.get_full(db, emp_no)
    if employee is None:
        raise NotFound(EMPLOYEE_NOT_FOUND)
    return employee


@router.get("/{emp_no}/salary", response_model=Union[List[SalaryRecord], Optional[SalaryRecord]])
def get_employee_salary(
    emp_no: int = Depends(get_emp_no),
    current: bool = Depends(get_current_flag),
    db: Session = Depends(get_db)
):
    """
    Salary history, newest first (max 100 rows).

    With ?current=1 (or true) returns the current salary object, or null.
    """
    if current:
        salary = crud_history.get_current_salary(db, emp_no)
        return SalaryRecord.model_validate(salary) if salary else None
    return [SalaryRecord.model_validate(row) for row in crud_history.get_salary_history(db, emp_no)]


@router.get("/{emp_no}/titles", response_model=Union[List[TitleRecord], Optional[TitleRecord]])
def get_employee_titles(
    emp_no: int = Depends(get_emp_no),
    current: bool = Depends(get_current_flag),
    db: Session = Depends(get_db)
):
    """Title history, newest first; ?current=1 returns the current title or null."""
    if current:
        title = crud_history.get_current_title(db, emp_no)
        return TitleRecord.model_validate(title) if title else None
    return [TitleRecord.model_validate(row) for row in crud_history.get_title_history(db, emp_no)]


@router.get("/{emp_no}/departments", response_model=List[DepartmentAssignment])
def get_employee_departments(
    emp_no: int = Depends(get_emp_no),
    current: bool = Depends(get_current_flag),
    db: Session = Depends(get_db)
):
    """
    Department memberships with department names, newest first.

    Always an array; with ?current=1 it holds at most the current membership.
    """
    return crud_history.get_department_history(db, emp_no, current_only=current)


@router.post("", response_model=EmployeeCreated, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: EmployeeCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Create a new employee.

    Request Body:
      {
        "emp_no": 500000,            // optional, max(emp_no)+1 when omitted
        "birth_date": "1990-05-17",
        "first_name": "Mary",
        "last_name": "Reyes",
        "gender": "F",
        "hire_date": "2024-01-01"
      }

    Returns:
      201 with {ok, message, emp_no, data} and a Location header,
      409 if emp_no is already taken
    """
    logger.info(f"Creating employee: {employee_in.first_name} {employee_in.last_name}")
    employee = crud_employee.create(db, obj_in=employee_in)
    logger.info(f"Employee created: emp_no={employee.emp_no}")

    response.headers["Location"] = f"{settings.API_V1_STR}/employees/{employee.emp_no}"
    return EmployeeCreated(
        emp_no=employee.emp_no,
        data=EmployeeResponse.model_validate(employee),
    )


@router.put("/{emp_no}", response_model=EmployeeResponse)
def update_employee(
    employee_in: EmployeeUpdate,
    emp_no: int = Depends(get_emp_no),
    db: Session = Depends(get_db)
):
    """
    Replace every field of an employee.

    All fields are required; omitted fields are a validation error, never
    left unchanged.
    """
    employee = crud_employee.get(db, id=emp_no)
    if not employee:
        raise NotFound(EMPLOYEE_NOT_FOUND)

    employee = crud_employee.update(db, db_obj=employee, obj_in=employee_in)
    logger.info(f"Employee updated: emp_no={emp_no}")
    return employee


@router.delete("/{emp_no}", response_model=EmployeeDeleted)
def delete_employee(
    emp_no: int = Depends(get_emp_no),
    db: Session = Depends(get_db)
):
    """
    Delete an employee.

    Returns:
      {ok, deleted: 1}; 404 if not found; 409 while salaries, titles,
      department memberships or credentials still reference the employee
    """
    logger.info(f"Deleting employee: emp_no={emp_no}")

    if not crud_employee.exists(db, id=emp_no):
        logger.warning(f"Delete employee failed: emp_no={emp_no} not found")
        raise NotFound(EMPLOYEE_NOT_FOUND)

    deleted = crud_employee.remove(db, emp_no=emp_no)
    if not deleted:
        # removed by someone else between the check and the delete
        raise NotFound(EMPLOYEE_NOT_FOUND)

    logger.info(f"Employee deleted: emp_no={emp_no}")
    return EmployeeDeleted(deleted=deleted)
