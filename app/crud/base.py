"""
Base CRUD Class
===============
Generic read helpers shared by the model-specific CRUD classes.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default read methods.

        Args:
            model: A SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """
        Get a single record by primary key.

        SQL equivalent: SELECT * FROM <table> WHERE <pk> = ?
        """
        return db.get(self.model, id)

    def exists(self, db: Session, id: Any) -> bool:
        return self.get(db, id) is not None

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
        order_by: Any = None
    ) -> List[ModelType]:
        """Get records in ``order_by`` order (primary key order by default)."""
        query = db.query(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()
