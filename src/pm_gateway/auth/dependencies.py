"""FastAPI dependencies: get_current_user_id, require_scheduler.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: str = Depends(get_current_user_id)):
        ...
"""

import hmac

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import settings
from src.pm_common.errors import (
    InvalidCredentialsError,
    InvalidSchedulerSecretError,
    SchedulerDisabledError,
)
from src.pm_gateway.auth.jwt_handler import decode_token

bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Validate the Bearer token and return its subject (the user id).

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    return payload["sub"]


async def require_scheduler(
    authorization: str | None = Header(None),
) -> None:
    """Accept `Authorization: Bearer <CRON_SECRET>` from the resolution scheduler.

    An empty CRON_SECRET disables the scheduler endpoint entirely.
    """
    expected = settings.CRON_SECRET
    if not expected:
        raise SchedulerDisabledError()
    presented = (authorization or "").removeprefix("Bearer ").strip()
    if not hmac.compare_digest(presented.encode(), expected.encode()):
        raise InvalidSchedulerSecretError()
