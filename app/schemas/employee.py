"""
Employee Schemas
================
Pydantic models for request/response validation.

Input rules shared by create and update:
  - first_name / last_name: trimmed, non-empty
  - gender: normalized to upper case, must be M or F
  - birth_date / hire_date: literal YYYY-MM-DD, and a real calendar date
"""

import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
GENDERS = ("M", "F")

# employees.emp_no is a signed 32-bit INT
MAX_EMP_NO = 2**31 - 1


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_gender(value) -> str:
    gender = str(value if value is not None else "").strip().upper()
    if gender not in GENDERS:
        raise ValueError("gender must be M or F")
    return gender


def check_date_format(value, field_name: str):
    """Dates must be sent as literal YYYY-MM-DD strings."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError(f"{field_name} must be YYYY-MM-DD")
    return value


class EmployeeBase(BaseModel):
    birth_date: date = Field(..., description="Birth date (YYYY-MM-DD)")
    first_name: str = Field(..., max_length=14, description="First name")
    last_name: str = Field(..., max_length=16, description="Last name")
    gender: str = Field(..., description="M or F")
    hire_date: date = Field(..., description="Hire date (YYYY-MM-DD)")

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(f"Missing required field: {info.field_name}")
        return v.strip() if isinstance(v, str) else v

    @field_validator("gender", mode="before")
    @classmethod
    def validate_gender(cls, v):
        return normalize_gender(v)

    @field_validator("birth_date", "hire_date", mode="before")
    @classmethod
    def validate_date_format(cls, v, info):
        if v is None or v == "":
            raise ValueError(f"Missing required field: {info.field_name}")
        return check_date_format(v, info.field_name)


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee. emp_no is assigned when omitted."""
    emp_no: Optional[int] = Field(
        None, le=MAX_EMP_NO, description="Explicit employee number (positive)"
    )

    @field_validator("emp_no", mode="before")
    @classmethod
    def empty_emp_no(cls, v):
        if v == "" or v is None:
            return None
        if isinstance(v, bool):
            raise ValueError("emp_no must be a positive integer")
        return v

    @field_validator("emp_no")
    @classmethod
    def positive_emp_no(cls, v):
        if v is not None and v <= 0:
            raise ValueError("emp_no must be a positive integer")
        return v


class EmployeeUpdate(EmployeeBase):
    """Full-record replace: every field is required."""
    pass


class EmployeeResponse(BaseModel):
    """Schema for returning employee data from the API."""
    model_config = ConfigDict(from_attributes=True)

    emp_no: int
    birth_date: date
    first_name: str
    last_name: str
    gender: str
    hire_date: date


class EmployeeSummary(BaseModel):
    """Row shape of search and department rosters."""
    model_config = ConfigDict(from_attributes=True)

    emp_no: int
    first_name: str
    last_name: str
    gender: str
    hire_date: date


class EmployeeFull(EmployeeResponse):
    """Employee merged with its current salary, title and department."""
    current_salary: Optional[int] = None
    current_title: Optional[str] = None
    current_dept_no: Optional[str] = None
    current_dept_name: Optional[str] = None


class EmployeeFilter(BaseModel):
    """
    Filters of the employee listing. Empty strings count as absent.

    first_name / last_name: case-insensitive substring
    gender, birth_date, hire_date: exact match
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    hire_date: Optional[date] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("gender", mode="before")
    @classmethod
    def validate_gender(cls, v):
        if _is_blank(v):
            return None
        return normalize_gender(v)

    @field_validator("birth_date", "hire_date", mode="before")
    @classmethod
    def validate_date_format(cls, v, info):
        if _is_blank(v):
            return None
        return check_date_format(v, info.field_name)


class EmployeeListResponse(BaseModel):
    """One page of the listing; total is the pre-pagination match count."""
    rows: List[EmployeeResponse]
    total: int
    limit: int
    offset: int


class EmployeeCreated(BaseModel):
    ok: bool = True
    message: str = "Employee created"
    emp_no: int
    data: EmployeeResponse


class EmployeeDeleted(BaseModel):
    ok: bool = True
    deleted: int = 1
