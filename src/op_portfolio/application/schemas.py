"""Pydantic response schemas for op_portfolio.

Every monetary or percentage figure is paired with a ``*_display`` string and,
where it has a sign, a ``*_color`` ("green" when >= 0, "red" otherwise).
"""

from pydantic import BaseModel

from src.op_common.money import (
    color_for,
    money_display,
    percent_display,
    signed_money_display,
    weight_display,
)
from src.op_portfolio.domain.models import Position
from src.op_portfolio.domain.stats import (
    AccountStats,
    AssetClassStats,
    PortfolioStats,
    RankedPosition,
)


class PositionItem(BaseModel):
    isin_code: str
    label: str
    purchase_value: float
    market_value: float
    valuation_date: str
    quantity: float
    pmvl: float
    pmvr: float
    weight: float
    asset_class_code: str
    performance: float
    asset_class: str
    closing_price: float
    performance_display: str
    performance_color: str
    pmvl_display: str
    pmvl_color: str

    @classmethod
    def from_domain(cls, p: Position) -> "PositionItem":
        return cls(
            isin_code=p.isin_code,
            label=p.label,
            purchase_value=p.purchase_value,
            market_value=p.market_value,
            valuation_date=p.valuation_date,
            quantity=p.quantity,
            pmvl=p.pmvl,
            pmvr=p.pmvr,
            weight=p.weight,
            asset_class_code=p.asset_class_code,
            performance=p.performance,
            asset_class=p.asset_class,
            closing_price=p.closing_price,
            performance_display=percent_display(p.performance),
            performance_color=color_for(p.performance),
            pmvl_display=signed_money_display(p.pmvl),
            pmvl_color=color_for(p.pmvl),
        )


class AccountStatsItem(BaseModel):
    total_pmvl: float
    total_pmvl_display: str
    pmvl_color: str
    weighted_performance: float
    weighted_performance_display: str
    performance_color: str
    total_weight: float
    positions_count: int

    @classmethod
    def from_domain(cls, s: AccountStats) -> "AccountStatsItem":
        return cls(
            total_pmvl=s.total_pmvl,
            total_pmvl_display=signed_money_display(s.total_pmvl),
            pmvl_color=color_for(s.total_pmvl),
            weighted_performance=s.weighted_performance,
            weighted_performance_display=percent_display(s.weighted_performance),
            performance_color=color_for(s.weighted_performance),
            total_weight=s.total_weight,
            positions_count=s.positions_count,
        )


class AccountItem(BaseModel):
    account_number: str
    label: str
    value: float
    value_display: str
    positions: list[PositionItem]
    stats: AccountStatsItem

    @classmethod
    def from_domain(cls, s: AccountStats) -> "AccountItem":
        return cls(
            account_number=s.account.account_number,
            label=s.account.label,
            value=s.account.value,
            value_display=money_display(s.account.value),
            positions=[PositionItem.from_domain(p) for p in s.account.positions],
            stats=AccountStatsItem.from_domain(s),
        )


class AssetClassItem(BaseModel):
    asset_class: str
    total_value: float
    total_value_display: str
    total_weight: float
    weighted_performance: float
    weighted_performance_display: str
    average_performance: float
    average_performance_display: str
    performance_color: str
    positions_count: int

    @classmethod
    def from_domain(cls, s: AssetClassStats) -> "AssetClassItem":
        return cls(
            asset_class=s.code,
            total_value=s.total_value,
            total_value_display=money_display(s.total_value),
            total_weight=s.total_weight,
            weighted_performance=s.weighted_performance,
            weighted_performance_display=percent_display(s.weighted_performance),
            average_performance=s.average_performance,
            average_performance_display=percent_display(s.average_performance),
            performance_color=color_for(s.weighted_performance),
            positions_count=s.positions_count,
        )


class RankedPositionItem(BaseModel):
    isin_code: str
    label: str
    account_number: str
    asset_class: str
    performance: float
    performance_display: str
    performance_color: str
    market_value: float
    market_value_display: str
    weight: float
    weight_display: str

    @classmethod
    def from_domain(cls, r: RankedPosition) -> "RankedPositionItem":
        p = r.position
        return cls(
            isin_code=p.isin_code,
            label=p.label,
            account_number=r.account_number,
            asset_class=p.asset_class,
            performance=p.performance,
            performance_display=percent_display(p.performance),
            performance_color=color_for(p.performance),
            market_value=p.market_value,
            market_value_display=money_display(p.market_value),
            weight=p.weight,
            weight_display=weight_display(p.weight),
        )


class PortfolioOverview(BaseModel):
    total_value: float
    total_value_display: str
    total_pmvl: float
    total_pmvl_display: str
    pmvl_color: str
    total_pmvr: float
    total_pmvr_display: str
    weighted_performance: float
    weighted_performance_display: str
    performance_color: str
    total_weight: float
    positions_count: int
    accounts_count: int
    asset_classes: list[AssetClassItem]
    top_performers: list[RankedPositionItem]
    worst_performers: list[RankedPositionItem]
    last_update: str  # ISO8601 string

    @classmethod
    def from_domain(cls, s: PortfolioStats, last_update: str) -> "PortfolioOverview":
        return cls(
            total_value=s.total_value,
            total_value_display=money_display(s.total_value),
            total_pmvl=s.total_pmvl,
            total_pmvl_display=signed_money_display(s.total_pmvl),
            pmvl_color=color_for(s.total_pmvl),
            total_pmvr=s.total_pmvr,
            total_pmvr_display=signed_money_display(s.total_pmvr),
            weighted_performance=s.weighted_performance,
            weighted_performance_display=percent_display(s.weighted_performance),
            performance_color=color_for(s.weighted_performance),
            total_weight=s.total_weight,
            positions_count=s.positions_count,
            accounts_count=s.accounts_count,
            asset_classes=[AssetClassItem.from_domain(c) for c in s.asset_classes],
            top_performers=[RankedPositionItem.from_domain(r) for r in s.top_performers],
            worst_performers=[RankedPositionItem.from_domain(r) for r in s.worst_performers],
            last_update=last_update,
        )


class PortfolioReport(BaseModel):
    accounts: list[AccountItem]
    portfolio: PortfolioOverview
