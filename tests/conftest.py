"""
Shared fixtures: an in-memory SQLite database seeded with a small
employees dataset, and a TestClient whose requests each get their own
Session on that database.
"""
import os
from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite://"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.core.security import get_password_hash  # noqa: E402
from app.database import Base, create_db_engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Department, DeptEmp, Employee, EmployeeAuth, Salary, Title  # noqa: E402
from app.models.temporal import SENTINEL_END_DATE  # noqa: E402

ALICE_PASSWORD = "alice-secret"
BOB_PASSWORD = "bob-secret"
CARA_LEGACY_PASSWORD = "cara-plain"


def seed(session: Session) -> None:
    """
    10001 Alice: current salary, title and department, plus history
    10002 Bob:   moved from D001 to D004, login disabled
    10003 Cara:  only closed periods, legacy plaintext credential
    """
    session.add_all([
        Employee(emp_no=10001, birth_date=date(1960, 1, 15), first_name="Alice",
                 last_name="Anders", gender="F", hire_date=date(1986, 6, 26)),
        Employee(emp_no=10002, birth_date=date(1964, 6, 2), first_name="Bob",
                 last_name="Brown", gender="M", hire_date=date(1985, 11, 21)),
        Employee(emp_no=10003, birth_date=date(1959, 12, 3), first_name="Cara",
                 last_name="Cole", gender="F", hire_date=date(1986, 8, 28)),
        Department(dept_no="D001", dept_name="Marketing"),
        Department(dept_no="D004", dept_name="Production"),
        Department(dept_no="D005", dept_name="Development"),
    ])
    session.flush()
    session.add_all([
        DeptEmp(emp_no=10001, dept_no="D005", from_date=date(1986, 6, 26), to_date=SENTINEL_END_DATE),
        DeptEmp(emp_no=10002, dept_no="D001", from_date=date(1985, 11, 21), to_date=date(1990, 1, 1)),
        DeptEmp(emp_no=10002, dept_no="D004", from_date=date(1990, 1, 1), to_date=SENTINEL_END_DATE),
        DeptEmp(emp_no=10003, dept_no="D004", from_date=date(1986, 8, 28), to_date=date(1995, 1, 1)),
        Salary(emp_no=10001, salary=60117, from_date=date(1986, 6, 26), to_date=date(1987, 6, 26)),
        Salary(emp_no=10001, salary=62102, from_date=date(1987, 6, 26), to_date=SENTINEL_END_DATE),
        Salary(emp_no=10002, salary=65828, from_date=date(1996, 8, 3), to_date=SENTINEL_END_DATE),
        Salary(emp_no=10003, salary=40006, from_date=date(1995, 12, 3), to_date=date(2000, 1, 1)),
        Title(emp_no=10001, title="Engineer", from_date=date(1986, 6, 26), to_date=date(1995, 6, 26)),
        Title(emp_no=10001, title="Senior Engineer", from_date=date(1995, 6, 26), to_date=SENTINEL_END_DATE),
        Title(emp_no=10002, title="Staff", from_date=date(1996, 8, 3), to_date=SENTINEL_END_DATE),
        EmployeeAuth(emp_no=10001, email="alice@example.com",
                     password_hash=get_password_hash(ALICE_PASSWORD), access="Y"),
        EmployeeAuth(emp_no=10002, email="bob@example.com",
                     password_hash=get_password_hash(BOB_PASSWORD), access="N"),
        EmployeeAuth(emp_no=10003, email="cara@example.com",
                     password_hash=CARA_LEGACY_PASSWORD, access="Y"),
    ])
    session.commit()


@pytest.fixture()
def engine():
    test_engine = create_db_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    seed(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory, db_session) -> Generator[TestClient, None, None]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
