"""Trade metrics — pure functions over a snapshot of trades and capital.

Nothing here performs I/O or keeps state between calls.  A record that
breaks the ledger invariants (closed without sell fields, a price that
cannot be read as a finite number) is logged and contributes zero; it never
blocks the statistics for the remaining trades.
"""

import logging
import math
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, TypeVar, Union

from app.ledger.models import (
    Quarter,
    QuarterStats,
    Trade,
    TradeMetrics,
    TradePL,
    YearStats,
)

logger = logging.getLogger("tradeledger")

_ZERO_PL = TradePL(amount=0.0, percentage=0.0, total_buy_value=0.0, total_sell_value=0.0)

Period = TypeVar("Period", QuarterStats, YearStats)


def calculate_pl(trade: Trade) -> TradePL:
    """Profit/loss of a single trade.

    Open positions report zero P&L; there is no live price feed to mark
    them to market.
    """
    quantity = _to_float(trade.quantity, "quantity", trade)
    buy_price = _to_float(trade.buy_price, "buy_price", trade)
    if quantity is None or buy_price is None:
        return _ZERO_PL

    total_buy_value = buy_price * quantity

    if trade.sell_price is None or trade.is_open:
        if not trade.is_open:
            logger.warning(
                "Trade %s is marked closed but has no sell price; counting zero P&L.",
                trade.id,
            )
        return TradePL(
            amount=0.0,
            percentage=0.0,
            total_buy_value=total_buy_value,
            total_sell_value=0.0,
        )

    sell_price = _to_float(trade.sell_price, "sell_price", trade)
    if sell_price is None:
        return TradePL(
            amount=0.0,
            percentage=0.0,
            total_buy_value=total_buy_value,
            total_sell_value=0.0,
        )

    total_sell_value = sell_price * quantity
    amount = total_sell_value - total_buy_value
    percentage = amount / total_buy_value * 100 if total_buy_value else 0.0
    return TradePL(
        amount=amount,
        percentage=percentage,
        total_buy_value=total_buy_value,
        total_sell_value=total_sell_value,
    )


def calculate_trade_metrics(
    trades: Iterable[Trade], total_capital: float = 0.0
) -> TradeMetrics:
    """Compute portfolio-wide statistics.

    ``total_pl`` equals the booked P&L of closed trades only; open positions
    add to deployed capital but not to P&L.

    Returns:
        A ``TradeMetrics`` record.  Every rate is ``0.0`` when its
        denominator (capital, closed trade count) is zero.
    """
    capital = _to_float(total_capital, "total_capital") or 0.0

    total_trades = 0
    portfolio_value = 0.0
    booked_pl = 0.0
    deployed = 0.0
    open_positions = 0
    closed = 0
    winners = 0

    for trade in trades:
        total_trades += 1
        pl = calculate_pl(trade)
        portfolio_value += pl.total_buy_value
        if trade.is_open:
            open_positions += 1
            deployed += pl.total_buy_value
        else:
            closed += 1
            booked_pl += pl.amount
            if pl.amount > 0:
                winners += 1

    return TradeMetrics(
        total_portfolio_value=portfolio_value,
        total_pl=booked_pl,
        booked_pl=booked_pl,
        mtm_pl=0.0,
        open_positions=open_positions,
        open_value=deployed,
        deployed_capital=deployed,
        free_capital=max(0.0, capital - deployed),
        total_capital=capital,
        capital_utilization=deployed / capital * 100 if capital > 0 else 0.0,
        win_rate=winners / closed * 100 if closed > 0 else 0.0,
        total_trades=total_trades,
        closed_trades=closed,
        winning_trades=winners,
        total_return=booked_pl / capital * 100 if capital > 0 else 0.0,
    )


def get_quarter(value: Union[date, datetime, str]) -> Quarter:
    """Map a date's month to its calendar quarter."""
    month = _as_date(value).month
    return list(Quarter)[(month - 1) // 3]


def get_quarterly_analytics(
    trades: Iterable[Trade], year: int
) -> dict[Quarter, QuarterStats]:
    """Per-quarter statistics for trades bought in *year*.

    A trade belongs to the quarter of its buy date, whenever it was sold.
    The result always holds Q1..Q4 in that order, empty quarters included.
    """
    buckets: dict[Quarter, list[Trade]] = {q: [] for q in Quarter}
    for trade in trades:
        bought = _as_date(trade.buy_date)
        if bought.year == year:
            buckets[get_quarter(bought)].append(trade)

    return {q: _summarise(bucket) for q, bucket in buckets.items()}


def get_yearly_analytics(trades: Sequence[Trade]) -> list[YearStats]:
    """Per-year statistics, one entry per buy year, oldest first."""
    years = sorted({_as_date(t.buy_date).year for t in trades})
    result: list[YearStats] = []
    for year in years:
        quarters = get_quarterly_analytics(trades, year).values()
        booked = sum(q.booked_pl for q in quarters)
        investment = sum(q.total_investment for q in quarters)
        result.append(
            YearStats(
                year=year,
                booked_pl=booked,
                open_positions=sum(q.open_positions for q in quarters),
                total_investment=investment,
                return_percentage=_ratio_pct(booked, investment),
                total_trades=sum(q.total_trades for q in quarters),
            )
        )
    return result


def best_and_worst_period(
    periods: Iterable[Period],
) -> tuple[Optional[Period], Optional[Period]]:
    """Return the periods with the highest and lowest return percentage.

    Ties keep the earliest period.  An empty input gives ``(None, None)``.
    """
    best: Optional[Period] = None
    worst: Optional[Period] = None
    for period in periods:
        if best is None or period.return_percentage > best.return_percentage:
            best = period
        if worst is None or period.return_percentage < worst.return_percentage:
            worst = period
    return best, worst


# ── Helpers ──────────────────────────────────────────────────────────────


def _summarise(trades: list[Trade]) -> QuarterStats:
    booked = 0.0
    investment = 0.0
    open_positions = 0
    for trade in trades:
        pl = calculate_pl(trade)
        investment += pl.total_buy_value
        if trade.is_open:
            open_positions += 1
        else:
            booked += pl.amount
    return QuarterStats(
        booked_pl=booked,
        open_positions=open_positions,
        total_investment=investment,
        return_percentage=_ratio_pct(booked, investment),
        total_trades=len(trades),
    )


def _ratio_pct(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100 if denominator > 0 else 0.0


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_float(value, name: str, trade: Optional[Trade] = None) -> Optional[float]:
    """Read *value* as a finite float, or log and return ``None``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if math.isfinite(number):
        return number
    logger.warning(
        "Ignoring unreadable %s=%r%s",
        name,
        value,
        f" on trade {trade.id}" if trade is not None else "",
    )
    return None
