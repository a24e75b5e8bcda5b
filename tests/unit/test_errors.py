"""Unit tests for AppError subclasses: codes and HTTP statuses."""

import pytest

from src.op_common.errors import (
    AppError,
    ConfigurationError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    PortfolioNotCachedError,
    StorageConfigError,
    UpstreamAuthError,
    UpstreamFetchError,
)


@pytest.mark.parametrize(
    ("error", "code", "http_status"),
    [
        (InvalidCredentialsError(), 1001, 401),
        (InvalidTokenError(), 1002, 401),
        (UpstreamAuthError(), 2001, 401),
        (UpstreamFetchError("x"), 2002, 502),
        (PortfolioNotCachedError(), 3001, 404),
        (ConfigurationError("x"), 8001, 500),
        (StorageConfigError("x"), 8002, 500),
        (InternalError(), 9002, 500),
    ],
)
def test_codes(error: AppError, code: int, http_status: int) -> None:
    assert isinstance(error, AppError)
    assert error.code == code
    assert error.http_status == http_status


def test_message_is_exception_text() -> None:
    err = UpstreamFetchError("accounts/FindLoginAccounts returned HTTP 503")
    assert str(err) == err.message
    assert "HTTP 503" in err.message
