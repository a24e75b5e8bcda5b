"""Portfolio aggregation: pure functions over Account/Position.

Performance figures are always weight-weighted averages:

    weighted_performance = sum(weight * performance) / sum(weight)

and 0.0 when the total weight is not positive. This holds at every level
(account, asset class, whole portfolio).

Nothing here mutates its input; results are new frozen dataclasses.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.op_portfolio.domain.models import Account, Position

UNKNOWN_ASSET_CLASS = "Unknown"
RANKING_SIZE = 5


@dataclass(frozen=True)
class AccountStats:
    account: Account
    total_pmvl: float
    total_weight: float
    weighted_performance: float
    positions_count: int


@dataclass(frozen=True)
class AssetClassStats:
    code: str
    total_value: float
    total_weight: float
    weighted_performance: float
    average_performance: float
    positions_count: int


@dataclass(frozen=True)
class RankedPosition:
    position: Position
    account_number: str


@dataclass(frozen=True)
class PortfolioStats:
    total_value: float
    total_pmvl: float
    total_pmvr: float
    total_weight: float
    weighted_performance: float
    positions_count: int
    accounts_count: int
    asset_classes: tuple[AssetClassStats, ...]   # in order of first appearance
    top_performers: tuple[RankedPosition, ...]
    worst_performers: tuple[RankedPosition, ...]


@dataclass(frozen=True)
class Aggregation:
    accounts: tuple[AccountStats, ...]
    portfolio: PortfolioStats


def weighted_performance(positions: Iterable[Position]) -> float:
    total_weight = 0.0
    weighted_sum = 0.0
    for p in positions:
        total_weight += p.weight
        weighted_sum += p.weight * p.performance
    if total_weight <= 0:
        return 0.0
    return weighted_sum / total_weight


def account_stats(account: Account) -> AccountStats:
    return AccountStats(
        account=account,
        total_pmvl=sum(p.pmvl for p in account.positions),
        total_weight=sum(p.weight for p in account.positions),
        weighted_performance=weighted_performance(account.positions),
        positions_count=len(account.positions),
    )


def group_by_asset_class(positions: Sequence[Position]) -> tuple[AssetClassStats, ...]:
    groups: dict[str, list[Position]] = {}
    for p in positions:
        groups.setdefault(p.asset_class_code or UNKNOWN_ASSET_CLASS, []).append(p)

    return tuple(
        AssetClassStats(
            code=code,
            total_value=sum(p.market_value for p in members),
            total_weight=sum(p.weight for p in members),
            weighted_performance=weighted_performance(members),
            average_performance=sum(p.performance for p in members) / len(members),
            positions_count=len(members),
        )
        for code, members in groups.items()
    )


def rank_positions(
    ranked: Sequence[RankedPosition],
    limit: int = RANKING_SIZE,
) -> tuple[tuple[RankedPosition, ...], tuple[RankedPosition, ...]]:
    """(top, worst) by performance. sorted() is stable, so ties keep input order."""
    top = sorted(ranked, key=lambda r: r.position.performance, reverse=True)[:limit]
    worst = sorted(ranked, key=lambda r: r.position.performance)[:limit]
    return tuple(top), tuple(worst)


def aggregate(accounts: Sequence[Account], ranking_size: int = RANKING_SIZE) -> Aggregation:
    ranked = [
        RankedPosition(position=p, account_number=a.account_number)
        for a in accounts
        for p in a.positions
    ]
    positions = [r.position for r in ranked]
    top, worst = rank_positions(ranked, ranking_size)

    portfolio = PortfolioStats(
        total_value=sum(a.value for a in accounts),
        total_pmvl=sum(p.pmvl for p in positions),
        total_pmvr=sum(p.pmvr for p in positions),
        total_weight=sum(p.weight for p in positions),
        weighted_performance=weighted_performance(positions),
        positions_count=len(positions),
        accounts_count=len(accounts),
        asset_classes=group_by_asset_class(positions),
        top_performers=top,
        worst_performers=worst,
    )
    return Aggregation(
        accounts=tuple(account_stats(a) for a in accounts),
        portfolio=portfolio,
    )
