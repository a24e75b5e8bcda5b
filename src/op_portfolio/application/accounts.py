"""AccountsLoader: cache-first access to a user's accounts with positions.

On a miss the accounts are fetched from upstream and written back to the
cache; a failed write only costs the next request a refetch.
"""

import logging

from src.op_broker.domain.client import BrokerClientProtocol
from src.op_broker.domain.session import BrokerSession
from src.op_cache.application.service import CacheService
from src.op_portfolio.domain.models import (
    Account,
    accounts_from_documents,
    accounts_to_documents,
)

logger = logging.getLogger("op.cache")


class AccountsLoader:
    def __init__(self, cache: CacheService, client: BrokerClientProtocol) -> None:
        self._cache = cache
        self._client = client

    async def cached(self, user_id: str) -> list[Account] | None:
        docs = await self._cache.get_user_accounts(user_id)
        if docs is None:
            return None
        if not isinstance(docs, list) or not all(isinstance(d, dict) for d in docs):
            logger.warning("Cached accounts for %s have an unexpected shape, ignoring", user_id)
            return None
        return accounts_from_documents(docs)

    async def load(self, session: BrokerSession) -> list[Account]:
        accounts = await self.cached(session.username)
        if accounts is not None:
            return accounts

        accounts = await self._client.fetch_accounts_with_positions(session)
        await self._cache.set_user_accounts(session.username, accounts_to_documents(accounts))
        return accounts

    async def refresh(self, session: BrokerSession) -> list[Account]:
        async def fetch() -> list[dict]:
            fresh = await self._client.fetch_accounts_with_positions(session)
            return accounts_to_documents(fresh)

        docs = await self._cache.refresh_user_accounts(session.username, fetch)
        return accounts_from_documents(docs)
