from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError
from enum import Enum

from .config import settings
from .exceptions import AuthorizationError

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing headers are reported as 401 by get_current_user, not 403 by FastAPI
security = HTTPBearer(auto_error=False)

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserRole"]:
        """Return the matching role, or None for anything unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None

class Principal(BaseModel):
    """Authenticated identity used for every authorization decision."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    email: str
    role: UserRole

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None
    token_type: Optional[str] = None

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "token_type": "access"
    })

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt

def create_user_token(user_id: int, role: UserRole) -> str:
    """Issue an access token identifying a user."""
    # python-jose requires a string subject
    return create_access_token({"sub": str(user_id), "role": role.value})

def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        return TokenPayload(**payload)

    except (JWTError, PydanticValidationError):
        return None

# Role-based access control
def authorize(principal: Principal, *allowed_roles: UserRole) -> Principal:
    """Raise AuthorizationError unless the principal holds one of the roles."""
    if principal.role not in allowed_roles:
        raise AuthorizationError(
            f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
        )
    return principal
