import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, InvalidArgument, Unauthorized
from app.core.security import burn_password_check, is_password_hash, verify_password
from app.crud import auth as crud_auth
from app.database import get_db
from app.models import ACCESS_ENABLED
from app.schemas.auth import LoginRequest, LoginResponse, LoginUser

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/login", response_model=LoginResponse)
def login(credentials: Optional[LoginRequest] = None, db: Session = Depends(get_db)):
    """
    Check an email/password pair against employee_auth.

    - Unknown email and wrong password get the same 401 response
    - A disabled account gets 403 before its password is checked
    - Only bcrypt hashes are accepted; legacy plaintext rows never match
    """
    credentials = credentials or LoginRequest()
    email = (credentials.email or "").strip()
    password = credentials.password or ""
    if not email or not password:
        raise InvalidArgument("email and password are required")

    found = crud_auth.get_credential_by_email(db, email)
    if not found:
        burn_password_check(password)
        raise Unauthorized(INVALID_CREDENTIALS)

    auth, employee = found
    if auth.access != ACCESS_ENABLED:
        logger.info(f"Login refused for emp_no={auth.emp_no}: access disabled")
        raise Forbidden("Access disabled")

    if not is_password_hash(auth.password_hash):
        logger.warning(f"Login rejected for emp_no={auth.emp_no}: stored credential is not hashed")
        burn_password_check(password)
        raise Unauthorized(INVALID_CREDENTIALS)

    if not verify_password(password, auth.password_hash):
        raise Unauthorized(INVALID_CREDENTIALS)

    logger.info(f"Login succeeded: emp_no={auth.emp_no}")
    return LoginResponse(
        user=LoginUser(
            emp_no=auth.emp_no,
            email=auth.email,
            name=f"{employee.first_name} {employee.last_name}",
        )
    )
