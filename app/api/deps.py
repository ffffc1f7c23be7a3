from fastapi import Depends, HTTPException, Path, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Annotated, Optional

from ..core.config import settings
from ..core.database import MAX_ID, get_db, get_redis
from ..core.security import security, authorize, Principal, UserRole
from ..services.auth_service import AuthService

# Record id taken from the URL path
RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Principal:
    """Resolve the bearer token in the Authorization header to a principal."""
    token = credentials.credentials if credentials else None
    return AuthService(db).authenticate(token)

# Role-based access control dependencies
def require_role(*allowed_roles: UserRole):
    """Create a dependency that requires specific user roles."""
    def role_checker(
        current_user: Principal = Depends(get_current_user)
    ) -> Principal:
        return authorize(current_user, *allowed_roles)

    return role_checker

# Specific role dependencies
get_admin_user = require_role(UserRole.ADMIN)
get_doctor_user = require_role(UserRole.DOCTOR)
get_patient_user = require_role(UserRole.PATIENT)
get_staff_user = require_role(UserRole.DOCTOR, UserRole.ADMIN)

# Rate limiting dependency
def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Basic rate limiting for authentication endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
