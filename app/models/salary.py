from sqlalchemy import Column, Date, ForeignKey, Integer

from app.database import Base
from app.models.temporal import TemporalMixin


class Salary(TemporalMixin, Base):
    """Salary periods of an employee; the current one ends on the sentinel date."""
    __tablename__ = "salaries"

    emp_no = Column(ForeignKey("employees.emp_no"), primary_key=True)
    salary = Column(Integer, nullable=False)
    from_date = Column(Date, primary_key=True)
