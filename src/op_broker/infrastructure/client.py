"""OddoApiClient: async httpx client for the upstream brokerage API.

The client holds no per-user state: every authenticated call takes the
BrokerSession decoded from the caller's JWT. One fixed timeout is set at
construction; there are no retries.

Errors:
  - login() reports bad credentials and transport failures as ``None``;
  - authenticated calls raise UpstreamAuthError on HTTP 401 or a missing
    token, and UpstreamFetchError on any other failure.
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx

from src.op_broker.domain.session import BrokerSession
from src.op_common.datetime_utils import last_business_day, utc_now
from src.op_common.errors import UpstreamAuthError, UpstreamFetchError
from src.op_portfolio.domain.models import Account, Position, to_float, to_str

logger = logging.getLogger("op.upstream")

CULTURE = "fr-FR"
POSITIONS_PAGE_SIZE = 10

_ACCOUNT_FIELDS = [
    "valorisation",
    "performance",
    "especes",
    "securityAccountProviderLabel",
    "libelle",
    "CodFront",
]


class OddoApiClient:
    def __init__(
        self,
        base_uri: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        today: Callable[[], date] = lambda: utc_now().date(),
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_uri, timeout=timeout, transport=transport)
        self._today = today

    async def aclose(self) -> None:
        await self._http.aclose()

    async def login(self, username: str, password: str) -> BrokerSession | None:
        try:
            response = await self._http.post(
                "core/Login",
                json={
                    "UserName": username,
                    "Password": password,
                    "SmsCode": None,
                    "culture": CULTURE,
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("Upstream login transport error for %s: %s", username, exc)
            return None

        if response.status_code != 200:
            logger.info("Upstream login rejected for %s (HTTP %d)", username, response.status_code)
            return None

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError):
            logger.warning("Upstream login returned a non-JSON body for %s", username)
            return None
        if not token:
            return None

        return BrokerSession(
            username=username,
            token=str(token),
            uuid=response.headers.get("X-UUID") or None,
        )

    async def get_accounts(self, session: BrokerSession) -> list[Account]:
        """Accounts without positions."""
        body = await self._post(
            session,
            "accounts/FindLoginAccounts",
            {"CodeBureau": "", "selectedFields": _ACCOUNT_FIELDS, "culture": CULTURE},
        )
        items = (body.get("accountsTiers") or {}).get("principalsAccounts") or []
        return [
            Account(
                account_number=to_str(item.get("accountNum")),
                label=to_str(item.get("libelle")),
                value=to_float(item.get("valorisation")),
            )
            for item in items
            if isinstance(item, dict)
        ]

    async def get_positions(
        self,
        session: BrokerSession,
        account_number: str,
        as_of: date | None = None,
    ) -> list[dict[str, Any]]:
        """Raw position records; ``as_of`` defaults to the last business day."""
        as_of = as_of or last_business_day(self._today())
        body = await self._post(
            session,
            "accounts/FindAccountsPositions",
            {
                "i": 0,
                "p": POSITIONS_PAGE_SIZE,
                "sf": "",
                "sd": "",
                "CodeBureau": "",
                "AccountNums": [account_number],
                "Type": 3,
                "ArreteAu": as_of.isoformat(),
                "culture": CULTURE,
            },
        )
        values = body.get("values") or []
        return [v for v in values if isinstance(v, dict)]

    async def fetch_accounts_with_positions(self, session: BrokerSession) -> list[Account]:
        accounts = await self.get_accounts(session)
        result: list[Account] = []
        for account in accounts:
            raw_positions = await self.get_positions(session, account.account_number)
            result.append(
                Account(
                    account_number=account.account_number,
                    label=account.label,
                    value=account.value,
                    positions=tuple(Position.from_upstream(raw) for raw in raw_positions),
                )
            )
        return result

    async def _post(
        self,
        session: BrokerSession,
        endpoint: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        if not session.token:
            raise UpstreamAuthError("No authentication token available")

        headers = {"X-Token": session.token, "Accept": "application/json"}
        if session.uuid:
            headers["X-UUID"] = session.uuid

        try:
            response = await self._http.post(endpoint, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s transport error: %s", endpoint, exc)
            raise UpstreamFetchError(f"{endpoint}: {exc}") from exc

        if response.status_code == 401:
            raise UpstreamAuthError()
        if response.status_code != 200:
            logger.warning("Upstream %s returned HTTP %d", endpoint, response.status_code)
            raise UpstreamFetchError(f"{endpoint} returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamFetchError(f"{endpoint} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise UpstreamFetchError(f"{endpoint} returned unexpected payload")
        return body
