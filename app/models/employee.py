from sqlalchemy import Column, Date, Enum, Integer, String

from app.database import Base


class Employee(Base):
    """
    Employee Model
    Maps to the 'employees' table.

    emp_no is supplied by the API (explicitly or as max(emp_no)+1),
    never generated by the database.
    """
    __tablename__ = "employees"

    emp_no = Column(Integer, primary_key=True, autoincrement=False)
    birth_date = Column(Date, nullable=False)
    first_name = Column(String(14), nullable=False)
    last_name = Column(String(16), nullable=False)
    gender = Column(Enum("M", "F", name="employee_gender"), nullable=False)
    hire_date = Column(Date, nullable=False)

    def __repr__(self):
        return f"<Employee {self.emp_no} {self.first_name} {self.last_name}>"
