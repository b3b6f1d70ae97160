from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from hr_portal.core.admin_identity import normalize_admin_id
from hr_portal.core.clock import Clock, utc_now
from hr_portal.core.config import settings


def get_admin_id(request: Request) -> str | None:
    """Admin identity from the X-Admin-Id header, trusted as given. None when absent or blank."""
    return normalize_admin_id(request.headers.get(settings.ADMIN_ID_HEADER))


def require_admin_id(admin_id: Annotated[str | None, Depends(get_admin_id)]) -> str:
    """Dependency for endpoints that cannot proceed without an acting admin."""
    if admin_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{settings.ADMIN_ID_HEADER} header is required",
        )
    return admin_id


def get_clock() -> Clock:
    """Overridden in tests to pin 'now'."""
    return utc_now
