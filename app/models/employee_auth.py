from sqlalchemy import CHAR, Column, ForeignKey, String

from app.database import Base

ACCESS_ENABLED = "Y"


class EmployeeAuth(Base):
    """
    Login credential of an employee (one-to-one).

    password_hash holds a bcrypt hash. access = 'Y' enables login,
    any other value disables it.
    """
    __tablename__ = "employee_auth"

    emp_no = Column(ForeignKey("employees.emp_no"), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    access = Column(CHAR(1), nullable=False, default=ACCESS_ENABLED)
