"""Ledger API routers — /api/trades, /api/capital, /api/metrics, /api/analytics endpoints.

No business logic, no DB access.  Delegates to repos and the metrics
functions in ``app.ledger.metrics``.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response

from app.api.schemas import CapitalUpdate, TradeCreate, TradeUpdate
from app.ledger.metrics import (
    best_and_worst_period,
    calculate_pl,
    calculate_trade_metrics,
    get_quarterly_analytics,
    get_yearly_analytics,
)
from app.ledger.models import Trade

logger = logging.getLogger("tradeledger")
router = APIRouter(prefix="/api")

# ── Shared state (set during app startup) ────────────────────────────────

_trade_repo = None    # Set via configure_routers()
_capital_repo = None  # Set via configure_routers()


def configure_routers(trade_repo, capital_repo) -> None:
    """Inject dependencies from the application startup.

    Args:
        trade_repo: A ``TradeRepo`` instance (or duck-type for tests).
        capital_repo: A ``CapitalRepo`` instance (or duck-type for tests).
    """
    global _trade_repo, _capital_repo  # noqa: PLW0603
    _trade_repo = trade_repo
    _capital_repo = capital_repo


def is_configured() -> bool:
    return _trade_repo is not None and _capital_repo is not None


def _trades():
    if _trade_repo is None:
        raise HTTPException(status_code=503, detail="Trade store not configured")
    return _trade_repo


def _capital():
    if _capital_repo is None:
        raise HTTPException(status_code=503, detail="Capital store not configured")
    return _capital_repo


def _trade_out(trade: Trade) -> dict:
    """Serialise a trade together with its P&L figures."""
    return {**trade.to_dict(), "pl": asdict(calculate_pl(trade))}


# ── Trades ───────────────────────────────────────────────────────────────


@router.get("/trades")
async def list_trades():
    """Return every trade, newest first."""
    return [_trade_out(t) for t in _trades().list_trades()]


@router.get("/trades/{trade_id}")
async def get_trade(trade_id: str):
    trade = _trades().get_trade(trade_id)
    if trade is None:
        raise HTTPException(status_code=404, detail="Trade not found")
    return _trade_out(trade)


@router.post("/trades", status_code=201)
async def create_trade(body: TradeCreate):
    """Record a buy, or a completed round trip when both sell fields are given."""
    trade = _trades().create_trade(**body.model_dump())
    return _trade_out(trade)


@router.patch("/trades/{trade_id}")
async def update_trade(trade_id: str, body: TradeUpdate):
    """Edit a trade or complete an open position.

    The merged buy and sell dates are checked again here since the body
    may carry only one of them.
    """
    repo = _trades()
    existing = repo.get_trade(trade_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Trade not found")

    changes = body.model_dump(exclude_unset=True)
    buy_date = changes.get("buy_date", existing.buy_date)
    sell_date = changes.get("sell_date", existing.sell_date)
    if sell_date is not None and sell_date < buy_date:
        raise HTTPException(
            status_code=422, detail="sell_date cannot be before buy_date",
        )

    trade = repo.update_trade(trade_id, changes)
    if trade is None:
        raise HTTPException(status_code=404, detail="Trade not found")
    return _trade_out(trade)


@router.delete("/trades/{trade_id}", status_code=204)
async def delete_trade(trade_id: str):
    if not _trades().delete_trade(trade_id):
        raise HTTPException(status_code=404, detail="Trade not found")
    return Response(status_code=204)


# ── Capital ──────────────────────────────────────────────────────────────


@router.get("/capital")
async def get_capital():
    """Return the capital record, created with the default on first read."""
    return _capital().get_settings().to_dict()


@router.post("/capital")
async def post_capital(body: CapitalUpdate, response: Response):
    """Set total capital.  Responds 201 when the record did not exist yet."""
    try:
        settings, created = _capital().set_total_capital(body.total_capital)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    response.status_code = 201 if created else 200
    return settings.to_dict()


# ── Metrics ──────────────────────────────────────────────────────────────


@router.get("/metrics")
async def get_metrics():
    """Return portfolio summary metrics over all stored trades."""
    trades = _trades().list_trades()
    capital = _capital().get_settings().total_capital
    return asdict(calculate_trade_metrics(trades, capital))


@router.get("/analytics/quarterly")
async def get_quarterly(year: Optional[int] = Query(default=None, ge=1900, le=9999)):
    """Return Q1..Q4 statistics for *year* (defaults to the current year)."""
    if year is None:
        year = date.today().year
    quarters = get_quarterly_analytics(_trades().list_trades(), year)
    best, worst = best_and_worst_period(
        s for s in quarters.values() if s.total_trades > 0
    )
    best_q = next((q.value for q, s in quarters.items() if s is best), None)
    worst_q = next((q.value for q, s in quarters.items() if s is worst), None)
    return {
        "year": year,
        "quarters": {q.value: asdict(stats) for q, stats in quarters.items()},
        "best_quarter": best_q,
        "worst_quarter": worst_q,
    }


@router.get("/analytics/yearly")
async def get_yearly():
    """Return per-year statistics with the best and worst year."""
    years = get_yearly_analytics(_trades().list_trades())
    best, worst = best_and_worst_period(years)
    return {
        "years": [asdict(y) for y in years],
        "best_year": best.year if best else None,
        "worst_year": worst.year if worst else None,
    }
