"""Unit tests for JWT create/decode and session claims."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.op_broker.domain.session import BrokerSession
from src.op_common.errors import InvalidTokenError
from src.op_gateway.auth.jwt_handler import (
    create_access_token,
    decode_token,
    session_from_claims,
)

SESSION = BrokerSession(username="alice", token="upstream-token", uuid="uuid-1")


class TestCreateAndDecode:
    def test_round_trip_carries_upstream_session(self, settings) -> None:
        claims = decode_token(create_access_token(SESSION, settings), settings)
        assert claims["sub"] == "alice"
        assert claims["oddo"] == "upstream-token"
        assert claims["uuid"] == "uuid-1"
        assert claims["exp"] - claims["iat"] == settings.JWT_TTL

    def test_null_uuid(self, settings) -> None:
        token = create_access_token(BrokerSession("alice", "t"), settings)
        assert session_from_claims(decode_token(token, settings)) == BrokerSession("alice", "t")

    def test_wrong_secret_rejected(self, settings) -> None:
        token = create_access_token(SESSION, settings)
        other = settings.model_copy(update={"JWT_SECRET": "another-secret-0123456789abcdef01234"})
        with pytest.raises(InvalidTokenError):
            decode_token(token, other)

    def test_expired_rejected(self, settings) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "alice", "oddo": "t", "iat": past, "exp": past + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_token(token, settings)

    def test_garbage_rejected(self, settings) -> None:
        with pytest.raises(InvalidTokenError):
            decode_token("not.a.jwt", settings)

    def test_unexpected_algorithm_rejected(self, settings) -> None:
        token = jwt.encode({"sub": "alice", "oddo": "t"}, settings.JWT_SECRET, algorithm="HS512")
        with pytest.raises(InvalidTokenError):
            decode_token(token, settings)


class TestSessionFromClaims:
    def test_valid(self) -> None:
        assert session_from_claims({"sub": "alice", "oddo": "t", "uuid": "u"}) == BrokerSession(
            "alice", "t", "u"
        )

    @pytest.mark.parametrize("claims", [{"oddo": "t"}, {"sub": "alice"}, {"sub": "", "oddo": "t"}])
    def test_missing_claims(self, claims: dict) -> None:
        with pytest.raises(InvalidTokenError):
            session_from_claims(claims)
