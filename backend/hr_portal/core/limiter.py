"""Rate limiter singleton shared by the app and the routers."""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from hr_portal.core.config import settings


def admin_or_remote_address(request: Request) -> str:
    """Key requests by admin id when present so admins behind one proxy don't share a bucket."""
    admin_id = (request.headers.get(settings.ADMIN_ID_HEADER) or "").strip()
    if admin_id:
        return f"admin:{admin_id.lower()}"
    return get_remote_address(request)


limiter = Limiter(key_func=admin_or_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
