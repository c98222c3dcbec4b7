from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class SalaryRecord(BaseModel):
    """One salary period. to_date = 9999-01-01 marks the current salary."""
    model_config = ConfigDict(from_attributes=True)

    salary: int = Field(..., description="Salary amount")
    from_date: date = Field(..., description="Effective from date")
    to_date: date = Field(..., description="Effective to date (9999-01-01 if current)")
