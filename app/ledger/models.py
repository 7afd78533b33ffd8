"""Ledger data models — trades, capital settings and derived statistics."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


class Quarter(str, Enum):
    """Calendar quarter of a trade's buy date."""

    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"


def derive_is_open(sell_price: Optional[float], sell_date: Optional[date]) -> bool:
    """A position stays open until both sell fields are recorded."""
    return sell_price is None or sell_date is None


@dataclass(frozen=True)
class Trade:
    """One buy, or one completed buy/sell round trip.

    ``is_open`` is never passed in; it is recomputed from the sell fields
    whenever a trade is built or changed.
    """

    scrip_name: str
    quantity: float
    buy_price: float
    buy_date: date
    sell_price: Optional[float] = None
    sell_date: Optional[date] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_open: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "is_open", derive_is_open(self.sell_price, self.sell_date)
        )

    def with_changes(self, **changes) -> "Trade":
        """Return a copy with *changes* applied; ``id`` and ``created_at`` are kept."""
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes.pop("is_open", None)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "scrip_name": self.scrip_name,
            "quantity": self.quantity,
            "buy_price": self.buy_price,
            "sell_price": self.sell_price,
            "buy_date": self.buy_date.isoformat(),
            "sell_date": self.sell_date.isoformat() if self.sell_date else None,
            "is_open": self.is_open,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class CapitalSettings:
    """The trader's total deployable capital (INR)."""

    total_capital: float
    updated_at: str

    def to_dict(self) -> dict:
        return {"total_capital": self.total_capital, "updated_at": self.updated_at}


# ── Statistics ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TradePL:
    """Profit/loss of a single trade."""

    amount: float
    percentage: float
    total_buy_value: float
    total_sell_value: float


@dataclass(frozen=True)
class TradeMetrics:
    """Portfolio-wide summary computed from all trades and the capital pool."""

    total_portfolio_value: float
    total_pl: float
    booked_pl: float
    mtm_pl: float
    open_positions: int
    open_value: float
    deployed_capital: float
    free_capital: float
    total_capital: float
    capital_utilization: float
    win_rate: float
    total_trades: int
    closed_trades: int
    winning_trades: int
    total_return: float


@dataclass(frozen=True)
class QuarterStats:
    """Statistics for the trades bought in one calendar quarter."""

    booked_pl: float = 0.0
    open_positions: int = 0
    total_investment: float = 0.0
    return_percentage: float = 0.0
    total_trades: int = 0


@dataclass(frozen=True)
class YearStats:
    """Statistics for the trades bought in one calendar year."""

    year: int
    booked_pl: float
    open_positions: int
    total_investment: float
    return_percentage: float
    total_trades: int
