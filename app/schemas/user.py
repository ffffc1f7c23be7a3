from datetime import datetime
from typing import List, Optional

from .common import CamelModel
from ..core.security import UserRole

class UserSummary(CamelModel):
    """Reduced view embedded in appointment and prescription responses."""
    id: int
    name: str
    email: str

class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None

class UserListResponse(CamelModel):
    users: List[UserResponse]
    page: int
    pages: int
    total: int
