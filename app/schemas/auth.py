from typing import Optional

from .common import CamelModel
from .user import UserResponse

class UserRegister(CamelModel):
    # Presence is checked by AuthService so every omission reports the same error
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class AuthResponse(UserResponse):
    """Public user view plus an issued access token."""
    token: str
    token_type: str = "bearer"
    expires_in: int
