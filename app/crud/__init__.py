"""
CRUD singletons. ``from app.crud import employee`` yields the CRUDEmployee
instance, not the module.
"""
from app.crud.employee import employee
from app.crud.department import department
from app.crud import auth, history

__all__ = ["employee", "department", "auth", "history"]
