from sqlalchemy import Column, Date, ForeignKey, String

from app.database import Base
from app.models.temporal import TemporalMixin


class Title(TemporalMixin, Base):
    """Job title periods of an employee."""
    __tablename__ = "titles"

    emp_no = Column(ForeignKey("employees.emp_no"), primary_key=True)
    title = Column(String(50), primary_key=True)
    from_date = Column(Date, primary_key=True)
