"""Bearer token issue/verify for the purchase API.

Accounts are managed by an external identity service; this module only
needs to agree with it on HS256 + JWT_SECRET and the claims below:
  sub  - account id (becomes buyer_id)
  type - must be "access"
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sf_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(account_id: str, expires_in: timedelta | None = None) -> str:
    """Issue an access token (used by the identity service and by tests)."""
    now = datetime.now(UTC)
    payload = {
        "sub": account_id,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> str:
    """Validate an access token and return the account id in `sub`.

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

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    account_id = payload.get("sub")
    if not account_id:
        raise InvalidCredentialsError()
    return str(account_id)
