"""Unit tests for AuthService with a mocked broker client."""

from unittest.mock import AsyncMock

import pytest

from src.op_broker.domain.session import BrokerSession
from src.op_common.errors import InvalidCredentialsError
from src.op_gateway.auth.jwt_handler import decode_token, session_from_claims
from src.op_gateway.auth.service import AuthService


async def test_authenticate_returns_token_wrapping_session(settings) -> None:
    client = AsyncMock()
    client.login.return_value = BrokerSession("alice", "upstream-token", "uuid-1")

    token = await AuthService(client, settings).authenticate("alice", "secret")

    client.login.assert_awaited_once_with("alice", "secret")
    session = session_from_claims(decode_token(token, settings))
    assert session == BrokerSession("alice", "upstream-token", "uuid-1")


async def test_rejected_login_raises(settings) -> None:
    client = AsyncMock()
    client.login.return_value = None

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await AuthService(client, settings).authenticate("alice", "wrong")

    assert exc_info.value.code == 1001
    assert exc_info.value.http_status == 401
