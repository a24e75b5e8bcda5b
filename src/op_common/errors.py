"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth / token
  2xxx: Upstream brokerage API
  3xxx: Portfolio / cache
  8xxx: Configuration / storage
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid credentials", 401)


class InvalidTokenError(AppError):
    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(1002, detail, 401)


# --- 2xxx: Upstream ---

class UpstreamAuthError(AppError):
    """Upstream rejected the session; the caller should log in again."""

    def __init__(self, detail: str = "Authentication token expired") -> None:
        super().__init__(2001, f"Upstream authentication failed: {detail}", 401)


class UpstreamFetchError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Upstream request failed: {detail}", 502)


# --- 3xxx: Portfolio / cache ---

class PortfolioNotCachedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            3001,
            "No portfolio data available, please refresh your data first",
            404,
        )


# --- 8xxx: Configuration / storage ---

class ConfigurationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(8001, f"Configuration error: {detail}", 500)


class StorageConfigError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(8002, f"Storage configuration error: {detail}", 500)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
