"""
Employee CRUD Operations
========================
Listing (filter + sort + paginate), lookups and mutations for employees.

The listing always runs exactly two reads built from the same predicate list:

    SELECT COUNT(*) FROM employees e WHERE <predicates>
    SELECT e.* FROM employees e WHERE <predicates>
    ORDER BY <orderBy> <direction>, e.emp_no ASC
    LIMIT ? OFFSET ?

The two reads are not wrapped in a transaction, so under concurrent writes
``total`` and the page may disagree.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Conflict, InvalidArgument
from app.crud.base import CRUDBase
from app.models import Department, DeptEmp, Employee, Salary, Title
from app.models.temporal import current_only
from app.schemas.employee import EmployeeCreate, EmployeeFilter, EmployeeUpdate

logger = logging.getLogger(__name__)

ORDERABLE_FIELDS = ("emp_no", "first_name", "last_name", "gender", "hire_date")
SORT_DIRECTIONS = ("asc", "desc")


def resolve_sort(order_by: Optional[str], direction: Optional[str]) -> Tuple[str, str]:
    """
    Validate orderBy against the allow-list and normalize direction.

    Unknown directions fall back to ascending.
    """
    order_by = (order_by or "emp_no").strip()
    if order_by not in ORDERABLE_FIELDS:
        raise InvalidArgument(
            f"Invalid orderBy. Use one of: {', '.join(ORDERABLE_FIELDS)}",
            allowed=list(ORDERABLE_FIELDS),
        )
    direction = (direction or "asc").strip().lower()
    if direction not in SORT_DIRECTIONS:
        direction = "asc"
    return order_by, direction


class CRUDEmployee(CRUDBase[Employee]):
    """
    CRUD operations for Employee model.
    Inherits get / exists from CRUDBase.
    """

    # ---------- Query engine ----------

    def build_filters(self, filters: EmployeeFilter) -> list:
        """
        Translate the listing filters into WHERE predicates.

        Every user value is bound as a parameter; only the fixed set of
        columns below can ever appear in the clause.
        """
        conditions = []
        if filters.first_name:
            conditions.append(Employee.first_name.ilike(f"%{filters.first_name}%"))
        if filters.last_name:
            conditions.append(Employee.last_name.ilike(f"%{filters.last_name}%"))
        if filters.gender:
            conditions.append(Employee.gender == filters.gender)
        if filters.birth_date:
            conditions.append(Employee.birth_date == filters.birth_date)
        if filters.hire_date:
            conditions.append(Employee.hire_date == filters.hire_date)
        return conditions

    def count(self, db: Session, conditions: list) -> int:
        """SQL: SELECT COUNT(*) FROM employees WHERE <conditions>"""
        return db.query(func.count(Employee.emp_no)).filter(*conditions).scalar() or 0

    def get_page(
        self,
        db: Session,
        conditions: list,
        *,
        limit: int,
        offset: int,
        order_by: str = "emp_no",
        direction: str = "asc"
    ) -> List[Employee]:
        sort_column = getattr(Employee, order_by)
        query = db.query(Employee).filter(*conditions)
        query = query.order_by(sort_column.desc() if direction == "desc" else sort_column.asc())
        if order_by != "emp_no":
            # tie-break keeps pages deterministic
            query = query.order_by(Employee.emp_no.asc())
        return query.offset(offset).limit(limit).all()

    def list_filtered(
        self,
        db: Session,
        *,
        filters: EmployeeFilter,
        limit: int,
        offset: int,
        order_by: Optional[str] = None,
        direction: Optional[str] = None
    ) -> Tuple[List[Employee], int]:
        """
        Filtered, sorted page of employees plus the total match count.

        Returns:
            (rows, total) where total ignores limit/offset
        """
        order_by, direction = resolve_sort(order_by, direction)
        conditions = self.build_filters(filters)
        total = self.count(db, conditions)
        rows = self.get_page(
            db, conditions, limit=limit, offset=offset, order_by=order_by, direction=direction
        )
        return rows, total

    def search(self, db: Session, *, q: str, limit: int) -> List[Employee]:
        """
        Quick search on first name, last name or "first last".

        SQL equivalent:
            SELECT * FROM employees e
            WHERE e.first_name LIKE ? OR e.last_name LIKE ?
               OR CONCAT(e.first_name, ' ', e.last_name) LIKE ?
            ORDER BY e.emp_no LIMIT ?
        """
        like = f"%{q}%"
        full_name = Employee.first_name + " " + Employee.last_name
        return (
            db.query(Employee)
            .filter(
                or_(
                    Employee.first_name.ilike(like),
                    Employee.last_name.ilike(like),
                    full_name.ilike(like),
                )
            )
            .order_by(Employee.emp_no.asc())
            .limit(limit)
            .all()
        )

    # ---------- Lookups ----------

    def get_full(self, db: Session, emp_no: int) -> Optional[dict]:
        """
        Employee plus current salary, title and department.

        Each facet is a LEFT JOIN restricted to the sentinel end-date, so an
        employee without a current row gets None for that facet.
        """
        row = (
            db.query(
                Employee,
                Salary.salary.label("current_salary"),
                Title.title.label("current_title"),
                Department.dept_no.label("current_dept_no"),
                Department.dept_name.label("current_dept_name"),
            )
            .outerjoin(Salary, and_(Salary.emp_no == Employee.emp_no, current_only(Salary)))
            .outerjoin(Title, and_(Title.emp_no == Employee.emp_no, current_only(Title)))
            .outerjoin(DeptEmp, and_(DeptEmp.emp_no == Employee.emp_no, current_only(DeptEmp)))
            .outerjoin(Department, Department.dept_no == DeptEmp.dept_no)
            .filter(Employee.emp_no == emp_no)
            .first()
        )
        if row is None:
            return None
        employee = row.Employee
        return {
            "emp_no": employee.emp_no,
            "birth_date": employee.birth_date,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "gender": employee.gender,
            "hire_date": employee.hire_date,
            "current_salary": row.current_salary,
            "current_title": row.current_title,
            "current_dept_no": row.current_dept_no,
            "current_dept_name": row.current_dept_name,
        }

    # ---------- Mutations ----------

    def next_emp_no(self, db: Session) -> int:
        """SQL: SELECT COALESCE(MAX(emp_no), 0) + 1 FROM employees"""
        max_id = db.query(func.coalesce(func.max(Employee.emp_no), 0)).scalar()
        return int(max_id) + 1

    def create(self, db: Session, *, obj_in: EmployeeCreate) -> Employee:
        """
        Insert a new employee.

        An explicit emp_no is used as-is; a duplicate raises Conflict.
        Without one, max(emp_no)+1 is allocated. The allocation is not a
        reservation: if a concurrent insert takes the same number the
        allocation is retried, up to EMP_NO_ALLOCATION_ATTEMPTS times.
        """
        data = obj_in.model_dump(exclude={"emp_no"})
        explicit = obj_in.emp_no
        attempts = 1 if explicit is not None else settings.EMP_NO_ALLOCATION_ATTEMPTS

        for attempt in range(1, attempts + 1):
            emp_no = explicit if explicit is not None else self.next_emp_no(db)
            db_obj = self.model(emp_no=emp_no, **data)
            db.add(db_obj)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning(f"Insert of emp_no={emp_no} collided (attempt {attempt}/{attempts})")
                if attempt == attempts:
                    extra = {"detail": str(e.orig)} if settings.DEBUG else {}
                    raise Conflict(f"emp_no {emp_no} already exists", **extra) from e
                continue
            db.refresh(db_obj)
            return db_obj

    def update(self, db: Session, *, db_obj: Employee, obj_in: EmployeeUpdate) -> Employee:
        """Full-record replace: every column is rewritten."""
        for field, value in obj_in.model_dump().items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, emp_no: int) -> int:
        """
        Delete an employee row.

        Salaries, titles, dept_emp and employee_auth reference employees
        without ON DELETE CASCADE, so the store refuses to delete an employee
        that still has dependent rows; that refusal becomes a Conflict.

        Returns:
            Number of deleted rows (0 or 1)
        """
        try:
            deleted = (
                db.query(Employee)
                .filter(Employee.emp_no == emp_no)
                .delete(synchronize_session=False)
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Delete of emp_no={emp_no} refused: row is referenced")
            raise Conflict("Cannot delete: employee has related records") from e
        return deleted


# Create a global instance to use throughout the app
employee = CRUDEmployee(Employee)
