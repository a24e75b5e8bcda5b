"""JWT creation and verification for proxy sessions.

The token wraps the upstream session so the proxy stays stateless:
  sub : upstream username (also the cache user id)
  oddo: upstream session token
  uuid: upstream correlation id, may be null

HS256 with a shared JWT_SECRET; tokens are not revocable before expiry.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import Settings
from src.op_broker.domain.session import BrokerSession
from src.op_common.errors import InvalidTokenError


def create_access_token(session: BrokerSession, settings: Settings) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": session.username,
        "oddo": session.token,
        "uuid": session.uuid,
        "iat": now,
        "exp": now + timedelta(seconds=settings.JWT_TTL),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM))


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """Decode and validate a JWT.

    Raises:
        InvalidTokenError: bad signature, expired, or malformed token.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidTokenError() from None


def session_from_claims(claims: dict[str, Any]) -> BrokerSession:
    username = claims.get("sub")
    token = claims.get("oddo")
    if not username or not token:
        raise InvalidTokenError("Token is missing session claims")
    uuid = claims.get("uuid")
    return BrokerSession(username=str(username), token=str(token), uuid=str(uuid) if uuid else None)
