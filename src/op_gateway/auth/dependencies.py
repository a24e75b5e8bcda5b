"""FastAPI dependency: get_current_session.

Usage in any protected router:
    from src.op_gateway.auth.dependencies import get_current_session

    @router.get("/protected")
    async def protected(session: BrokerSession = Depends(get_current_session)):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import Settings, get_settings
from src.op_broker.domain.session import BrokerSession
from src.op_common.errors import InvalidTokenError
from src.op_gateway.auth.jwt_handler import decode_token, session_from_claims

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/login")


async def get_current_session(
    token: Annotated[str, Depends(oauth2_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BrokerSession:
    """Decode the Bearer token into the upstream session it carries.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        return session_from_claims(decode_token(token, settings))
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
