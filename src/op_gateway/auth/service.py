"""AuthService: upstream login wrapped into a signed proxy token."""

from config.settings import Settings
from src.op_broker.domain.client import BrokerClientProtocol
from src.op_common.errors import InvalidCredentialsError
from src.op_gateway.auth.jwt_handler import create_access_token


class AuthService:
    def __init__(self, client: BrokerClientProtocol, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def authenticate(self, username: str, password: str) -> str:
        """Log in upstream and return a JWT carrying the upstream session.

        Raises InvalidCredentialsError when the upstream refuses the login.
        """
        session = await self._client.login(username, password)
        if session is None:
            raise InvalidCredentialsError()
        return create_access_token(session, self._settings)
