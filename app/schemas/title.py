from datetime import date

from pydantic import BaseModel, ConfigDict


class TitleRecord(BaseModel):
    """One title period. to_date = 9999-01-01 marks the current title."""
    model_config = ConfigDict(from_attributes=True)

    title: str
    from_date: date
    to_date: date
