"""Domain models for op_portfolio: immutable dataclasses, no I/O.

Two external shapes map onto these models:
  - the upstream position record (``from_upstream``), where performance is
    the ``perf`` field;
  - the cached document (``from_dict`` / ``to_dict``), camelCase keys with
    performance under ``performance``.
Missing numeric fields become 0.0 and missing strings become "".
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.op_common.datetime_utils import utc_now

VALUATION_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def to_str(value: Any) -> str:
    return "" if value is None else str(value)


def format_valuation_date(value: Any, now: datetime | None = None) -> str:
    """Normalise an upstream date to ``YYYY-MM-DDTHH:MM:SS``; current time if unusable."""
    if isinstance(value, datetime):
        return value.strftime(VALUATION_DATE_FORMAT)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).strftime(VALUATION_DATE_FORMAT)
        except ValueError:
            pass
    return (now or utc_now()).strftime(VALUATION_DATE_FORMAT)


@dataclass(frozen=True)
class Position:
    isin_code: str = ""
    label: str = ""
    purchase_value: float = 0.0    # valorisationAchatNette
    market_value: float = 0.0      # valeurMarcheDeviseSecurite
    valuation_date: str = ""       # ISO-8601, no timezone
    quantity: float = 0.0
    pmvl: float = 0.0              # unrealized gain/loss
    pmvr: float = 0.0              # realized gain/loss
    weight: float = 0.0            # 0-100
    asset_class_code: str = ""     # reportingAssetClassCode
    performance: float = 0.0       # percent
    asset_class: str = ""          # classActif
    closing_price: float = 0.0

    @classmethod
    def from_upstream(cls, raw: dict[str, Any], now: datetime | None = None) -> "Position":
        return cls._from_mapping(raw, performance_field="perf", now=now)

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> "Position":
        return cls._from_mapping(doc, performance_field="performance")

    @classmethod
    def _from_mapping(
        cls,
        d: dict[str, Any],
        performance_field: str,
        now: datetime | None = None,
    ) -> "Position":
        return cls(
            isin_code=to_str(d.get("isinCode")),
            label=to_str(d.get("libInstrument")),
            purchase_value=to_float(d.get("valorisationAchatNette")),
            market_value=to_float(d.get("valeurMarcheDeviseSecurite")),
            valuation_date=format_valuation_date(d.get("dateArrete"), now),
            quantity=to_float(d.get("quantityMinute")),
            pmvl=to_float(d.get("pmvl")),
            pmvr=to_float(d.get("pmvr")),
            weight=to_float(d.get("weightMinute")),
            asset_class_code=to_str(d.get("reportingAssetClassCode")),
            performance=to_float(d.get(performance_field)),
            asset_class=to_str(d.get("classActif")),
            closing_price=to_float(d.get("closingPriceInListingCurrency")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "isinCode": self.isin_code,
            "libInstrument": self.label,
            "valorisationAchatNette": self.purchase_value,
            "valeurMarcheDeviseSecurite": self.market_value,
            "dateArrete": self.valuation_date,
            "quantityMinute": self.quantity,
            "pmvl": self.pmvl,
            "pmvr": self.pmvr,
            "weightMinute": self.weight,
            "reportingAssetClassCode": self.asset_class_code,
            "performance": self.performance,
            "classActif": self.asset_class,
            "closingPriceInListingCurrency": self.closing_price,
        }


@dataclass(frozen=True)
class Account:
    account_number: str
    label: str = ""
    value: float = 0.0
    positions: tuple[Position, ...] = ()

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> "Account":
        return cls(
            account_number=to_str(doc.get("accountNumber")),
            label=to_str(doc.get("label")),
            value=to_float(doc.get("value")),
            positions=tuple(Position.from_dict(p) for p in doc.get("positions") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accountNumber": self.account_number,
            "label": self.label,
            "value": self.value,
            "positions": [p.to_dict() for p in self.positions],
        }


def accounts_from_documents(docs: list[dict[str, Any]]) -> list[Account]:
    return [Account.from_dict(d) for d in docs]


def accounts_to_documents(accounts: list[Account]) -> list[dict[str, Any]]:
    return [a.to_dict() for a in accounts]
