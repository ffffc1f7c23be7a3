from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional, Union
import logging
import math

from ..models.user import User
from ..core.config import settings
from ..core.database import get_record
from ..core.exceptions import ConflictError, NotFoundError
from ..core.security import Principal
from ..schemas.user import UserResponse, UserListResponse

logger = logging.getLogger(__name__)

def parse_page_number(value: Optional[Union[int, str]]) -> int:
    """Read a 1-based page number, falling back to the first page."""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, principal: Principal) -> UserResponse:
        user = self._get_user(principal.id)
        return UserResponse.model_validate(user)

    def update_profile(
        self,
        principal: Principal,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserResponse:
        """Update name and email. Role and password are not editable here."""
        user = self._get_user(principal.id)

        if email and email != user.email:
            taken = self.db.query(User).filter(
                User.email == email, User.id != user.id
            ).first()
            if taken:
                raise ConflictError("Email already in use")

        user.name = name or user.name
        user.email = email or user.email
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Email already in use")
        self.db.refresh(user)

        logger.info(f"User {user.id} updated profile")
        return UserResponse.model_validate(user)

    def list_users(self, page: Optional[Union[int, str]] = 1) -> UserListResponse:
        """List users newest first, one fixed-size page at a time."""
        page = parse_page_number(page)
        page_size = settings.USERS_PAGE_SIZE

        query = self.db.query(User)
        total = query.count()
        offset = page_size * (page - 1)
        users = []
        if offset < total:
            users = (
                query.order_by(User.created_at.desc(), User.id.desc())
                .offset(offset)
                .limit(page_size)
                .all()
            )

        return UserListResponse(
            users=[UserResponse.model_validate(user) for user in users],
            page=page,
            pages=math.ceil(total / page_size),
            total=total,
        )

    def delete_user(self, user_id: int) -> None:
        """Delete a user. Their appointments and prescriptions are left in place."""
        user = self._get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User {user_id} removed")

    def _get_user(self, user_id: int) -> User:
        user = get_record(self.db, User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
