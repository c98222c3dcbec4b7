"""
ORM models. Importing this package registers every table on Base.metadata.
"""
from app.models.employee import Employee
from app.models.department import Department, DeptEmp
from app.models.salary import Salary
from app.models.title import Title
from app.models.employee_auth import EmployeeAuth, ACCESS_ENABLED

__all__ = [
    "Employee",
    "Department",
    "DeptEmp",
    "Salary",
    "Title",
    "EmployeeAuth",
    "ACCESS_ENABLED",
]
