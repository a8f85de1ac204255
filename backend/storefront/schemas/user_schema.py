from datetime import datetime
from typing import Optional

from storefront.schemas.base import CamelModel


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    created_at: datetime


class SignupIn(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
