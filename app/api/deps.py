"""Dependency injection for API endpoints."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models import User
from app.services import users as user_service
from app.services.exceptions import DomainError
from app.services.permissions import get_permission_denied_message, has_permission
from app.utils.jwt import get_user_id_from_token

__all__ = [
    "get_db",
    "AsyncSession",
    "get_current_user",
    "require_permission",
    "domain_http_error",
    "PaginationParams",
]

# Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


# Auth dependency - get current user from JWT
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current user from the JWT token.

    Raises 401 if not authenticated, the token is invalid or the user is
    unknown or deactivated.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = get_user_id_from_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await user_service.get_user(db, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_permission(action: str) -> Callable[..., Coroutine[Any, Any, User]]:
    """Dependency factory: the current user, if their role may perform ``action``."""

    async def dependency(user: Annotated[User, Depends(get_current_user)]) -> User:
        if not has_permission(user, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=get_permission_denied_message(action),
            )
        return user

    return dependency


def domain_http_error(error: DomainError) -> HTTPException:
    """Translate a service-layer error into an HTTP error."""
    return HTTPException(status_code=error.status_code, detail=error.message)


# Pagination parameters
class PaginationParams:
    """Pagination query parameters."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
        limit: Annotated[
            int, Query(ge=1, le=100, description="Maximum number of records to return")
        ] = 10,
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit
