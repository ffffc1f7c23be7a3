from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..models.user import User
from ..core.config import settings
from ..core.database import get_record
from ..core.exceptions import AuthenticationError, ConflictError, ValidationError
from ..core.security import (
    verify_password, get_password_hash, create_user_token,
    verify_token, Principal, UserRole
)
from ..schemas.auth import AuthResponse
from ..schemas.user import UserResponse

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
    ) -> AuthResponse:
        """Register a new user and issue a token."""
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")

        # Check if user already exists
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise ConflictError("Email already registered")

        user_role = UserRole.parse(role)
        if user_role is None:
            if role:
                logger.warning(f"Unrecognized role '{role}' for {email}, defaulting to patient")
            user_role = UserRole.PATIENT

        new_user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=user_role,
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise ConflictError("Email already registered")
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} as {user_role.value}")
        return self._auth_response(new_user)

    def authenticate_user(self, email: Optional[str], password: Optional[str]) -> AuthResponse:
        """Authenticate user and return a token."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.db.query(User).filter(User.email == email).first()

        # Same error either way so registered emails are not disclosed
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid email or password")

        logger.info(f"User {user.id} logged in")
        return self._auth_response(user)

    def authenticate(self, token: Optional[str]) -> Principal:
        """Resolve a bearer token to the principal it identifies."""
        if not token:
            raise AuthenticationError("Not authorized, token missing")

        token_payload = verify_token(token)
        if not token_payload or token_payload.token_type != "access":
            raise AuthenticationError("Not authorized, token invalid")

        try:
            user_id = int(token_payload.sub)
        except (TypeError, ValueError):
            raise AuthenticationError("Not authorized, token invalid")

        user = get_record(self.db, User, user_id)
        if not user:
            raise AuthenticationError("Not authorized, user not found")

        return Principal.model_validate(user)

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            **UserResponse.model_validate(user).model_dump(),
            token=create_user_token(user.id, user.role),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )
