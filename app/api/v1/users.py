from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db
from ...core.security import Principal
from ...api.deps import RecordId, get_current_user, get_admin_user
from ...services.user_service import UserService
from ...schemas.user import UserResponse, ProfileUpdate, UserListResponse
from ...schemas.common import MessageResponse

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/profile", response_model=UserResponse)
def get_profile(
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the logged in user's profile."""
    return UserService(db).get_profile(current_user)

@router.put("/profile", response_model=UserResponse)
def update_profile(
    profile_data: ProfileUpdate,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update name and email of the logged in user."""
    return UserService(db).update_profile(
        current_user, name=profile_data.name, email=profile_data.email
    )

# Admin routes
@router.get("", response_model=UserListResponse)
def list_users(
    page_number: Optional[str] = Query(None, alias="pageNumber"),
    db: Session = Depends(get_db),
    _: Principal = Depends(get_admin_user)
):
    """List all users, ten per page (admin only)."""
    return UserService(db).list_users(page_number)

@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: RecordId,
    db: Session = Depends(get_db),
    _: Principal = Depends(get_admin_user)
):
    """Delete a user (admin only)."""
    UserService(db).delete_user(user_id)
    return MessageResponse(message="User removed")
