import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from storefront.config import Settings
from storefront.errors import AlreadyExistsError, InvalidInputError, UnauthorizedError
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from storefront.utils.transactions import persisting

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class AuthService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)

    def signup(
        self, name: Optional[str], email: Optional[str], password: Optional[str]
    ) -> Tuple[str, User]:
        name = (name or "").strip()
        email = _normalize_email(email)
        if not name or not email or not password:
            raise InvalidInputError("Name, email, and password are required")
        if "@" not in email:
            raise InvalidInputError("Please provide a valid email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        with persisting(self.db, "auth.signup"):
            if self.users.get_by_email(email) is not None:
                raise AlreadyExistsError("User already exists with this email")
            user = self.users.add(
                User(name=name, email=email, password_hash=hash_password(password))
            )
        logger.info("Registered user id=%s", user.id)
        return self.issue_token(user), user

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        email = _normalize_email(email)
        if not email or not password:
            raise InvalidInputError("Email and password are required")
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login for email=%s", email)
            raise UnauthorizedError("Invalid email or password")
        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        return create_access_token(self.settings, user.id)

    def resolve(self, token: Optional[str]) -> User:
        """Map a bearer token to its user or raise UnauthorizedError."""
        if not token:
            raise UnauthorizedError("No token, authorization denied")
        user_id = decode_access_token(self.settings, token)
        if user_id is None:
            raise UnauthorizedError("Token is not valid")
        user = self.users.get(user_id)
        if user is None:
            raise UnauthorizedError("Token is not valid")
        return user
