"""FastAPI dependencies: get_current_account_id, require_admin.

Usage in any protected router:
    from src.sf_gateway.auth.dependencies import get_current_account_id

    @router.get("/protected")
    async def protected(account_id: str = Depends(get_current_account_id)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.sf_common.errors import AdminRequiredError, InvalidCredentialsError
from src.sf_gateway.auth.jwt_handler import decode_access_token

# Token issuance lives in the external identity service; tokenUrl is for Swagger UI only
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_account_id(token: str = Depends(oauth2_scheme)) -> str:
    """Return the identified caller's account id, or HTTP 401."""
    try:
        return decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def require_admin(account_id: str = Depends(get_current_account_id)) -> str:
    """Only accounts listed in ADMIN_USER_IDS may reach reconciliation endpoints."""
    if account_id not in settings.ADMIN_USER_IDS:
        raise AdminRequiredError()
    return account_id
