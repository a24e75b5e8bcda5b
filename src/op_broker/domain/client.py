"""Broker client Protocol: the upstream operations the proxy relies on.

Unit tests inject an AsyncMock conforming to this Protocol; the
infrastructure layer provides the httpx implementation.
"""

from datetime import date
from typing import Any, Protocol

from src.op_broker.domain.session import BrokerSession
from src.op_portfolio.domain.models import Account


class BrokerClientProtocol(Protocol):
    async def login(self, username: str, password: str) -> BrokerSession | None: ...

    async def get_accounts(self, session: BrokerSession) -> list[Account]: ...

    async def get_positions(
        self, session: BrokerSession, account_number: str, as_of: date | None = None
    ) -> list[dict[str, Any]]: ...

    async def fetch_accounts_with_positions(self, session: BrokerSession) -> list[Account]: ...
