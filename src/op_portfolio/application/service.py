"""PortfolioService: single entry point from accounts to the statistics report."""

from collections.abc import Callable, Sequence
from datetime import datetime

from src.op_common.datetime_utils import utc_now
from src.op_portfolio.application.schemas import AccountItem, PortfolioOverview, PortfolioReport
from src.op_portfolio.domain.models import Account
from src.op_portfolio.domain.stats import aggregate


class PortfolioService:
    """Stateless: instantiate once, reuse across requests."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def compute_stats(self, accounts: Sequence[Account]) -> PortfolioReport:
        result = aggregate(accounts)
        return PortfolioReport(
            accounts=[AccountItem.from_domain(s) for s in result.accounts],
            portfolio=PortfolioOverview.from_domain(
                result.portfolio,
                last_update=self._clock().isoformat(timespec="seconds"),
            ),
        )
