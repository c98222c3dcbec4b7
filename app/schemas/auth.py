from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Credentials. Both fields are checked for presence by the endpoint."""
    email: Optional[str] = None
    password: Optional[str] = None


class LoginUser(BaseModel):
    emp_no: int
    email: str
    name: str


class LoginResponse(BaseModel):
    ok: bool = True
    user: LoginUser
