from datetime import date

from pydantic import BaseModel, ConfigDict


class DepartmentResponse(BaseModel):
    """Department catalog entry."""
    model_config = ConfigDict(from_attributes=True)

    dept_no: str
    dept_name: str


class DepartmentAssignment(DepartmentResponse):
    """Department membership period of an employee."""
    from_date: date
    to_date: date
