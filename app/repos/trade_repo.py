"""Trade repository — SQLite CRUD for the trades table."""

import logging
import sqlite3
from datetime import date, datetime
from typing import Optional

from app.ledger.models import Trade
from app.repos.db import get_connection

logger = logging.getLogger("tradeledger")

_UPDATABLE = ("scrip_name", "quantity", "buy_price", "sell_price", "buy_date", "sell_date")


class TradeRepo:
    """Data access layer for trade records.

    Args:
        db_path: Path to the SQLite database file.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    # ── Write ────────────────────────────────────────────────────────────

    def create_trade(
        self,
        scrip_name: str,
        quantity: float,
        buy_price: float,
        buy_date: date,
        sell_price: Optional[float] = None,
        sell_date: Optional[date] = None,
    ) -> Trade:
        """Insert a new trade and return it with its assigned ``id``."""
        trade = Trade(
            scrip_name=scrip_name,
            quantity=quantity,
            buy_price=buy_price,
            buy_date=buy_date,
            sell_price=sell_price,
            sell_date=sell_date,
        )
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                """
                INSERT INTO trades
                    (id, scrip_name, quantity, buy_price, sell_price,
                     buy_date, sell_date, is_open, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    trade.id, trade.scrip_name, trade.quantity, trade.buy_price,
                    trade.sell_price, trade.buy_date.isoformat(),
                    _iso(trade.sell_date), int(trade.is_open),
                    trade.created_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Trade %s created: %s x%s", trade.id, trade.scrip_name, trade.quantity)
        return trade

    def update_trade(self, trade_id: str, changes: dict) -> Optional[Trade]:
        """Apply a partial update and return the updated trade.

        Only the editable fields are taken from *changes*; ``is_open`` is
        derived again from the merged sell fields.  Returns ``None`` when no
        trade has *trade_id*.
        """
        existing = self.get_trade(trade_id)
        if existing is None:
            return None

        updated = existing.with_changes(
            **{k: v for k, v in changes.items() if k in _UPDATABLE}
        )
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                """
                UPDATE trades
                SET scrip_name = ?, quantity = ?, buy_price = ?, sell_price = ?,
                    buy_date = ?, sell_date = ?, is_open = ?
                WHERE id = ?
                """,
                (
                    updated.scrip_name, updated.quantity, updated.buy_price,
                    updated.sell_price, updated.buy_date.isoformat(),
                    _iso(updated.sell_date), int(updated.is_open), trade_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        if existing.is_open and not updated.is_open:
            logger.info("Trade %s closed at %s", trade_id, updated.sell_price)
        else:
            logger.info("Trade %s updated", trade_id)
        return updated

    def delete_trade(self, trade_id: str) -> bool:
        """Delete a trade.  Returns ``False`` when it did not exist."""
        conn = get_connection(self._db_path)
        try:
            cur = conn.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
            conn.commit()
            deleted = cur.rowcount > 0
        finally:
            conn.close()
        if deleted:
            logger.info("Trade %s deleted", trade_id)
        return deleted

    # ── Read ─────────────────────────────────────────────────────────────

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        """Return the trade with *trade_id*, or ``None``."""
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM trades WHERE id = ?", (trade_id,)
            ).fetchone()
            return _row_to_trade(row) if row else None
        finally:
            conn.close()

    def list_trades(self) -> list[Trade]:
        """Return all trades, newest first."""
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                "SELECT * FROM trades ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
            return [_row_to_trade(r) for r in rows]
        finally:
            conn.close()


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _row_to_trade(row: sqlite3.Row) -> Trade:
    trade = Trade(
        id=row["id"],
        scrip_name=row["scrip_name"],
        quantity=row["quantity"],
        buy_price=row["buy_price"],
        sell_price=row["sell_price"],
        buy_date=date.fromisoformat(row["buy_date"]),
        sell_date=date.fromisoformat(row["sell_date"]) if row["sell_date"] else None,
        created_at=datetime.fromisoformat(row["created_at"]),
    )
    if trade.is_open != bool(row["is_open"]):
        logger.warning(
            "Stored is_open flag of trade %s disagrees with its sell fields; using %s",
            trade.id,
            trade.is_open,
        )
    return trade
