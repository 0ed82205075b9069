"""JWT bearer token handling.

Tokens are issued by the external identity provider and signed with the
shared JWT_SECRET. This service only verifies them; `create_access_token`
exists for local tooling and tests.

MVP NOTE: HS256 (symmetric HMAC). Switch to RS256 with the IdP's public key
once the provider exposes a JWKS endpoint.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def create_access_token(user_id: str, expires_in: timedelta = timedelta(minutes=30)) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_in,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: bad signature, expired, wrong type or no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    # Providers that do not stamp a type are accepted; refresh tokens are not.
    if payload.get("type", "access") != "access":
        raise InvalidCredentialsError()
    if not payload.get("sub"):
        raise InvalidCredentialsError()

    return payload
