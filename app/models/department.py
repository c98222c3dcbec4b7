from sqlalchemy import CHAR, Column, ForeignKey, String

from app.database import Base
from app.models.temporal import TemporalMixin


class Department(Base):
    """Static department catalog (no create/update/delete through the API)."""
    __tablename__ = "departments"

    dept_no = Column(CHAR(4), primary_key=True)
    dept_name = Column(String(40), nullable=False, unique=True)


class DeptEmp(TemporalMixin, Base):
    """Department membership of an employee over [from_date, to_date)."""
    __tablename__ = "dept_emp"

    emp_no = Column(ForeignKey("employees.emp_no"), primary_key=True)
    dept_no = Column(ForeignKey("departments.dept_no"), primary_key=True, index=True)
