"""Capital repository — the single total-capital record."""

import logging
import math
from datetime import datetime, timezone

from app.ledger.models import CapitalSettings
from app.repos.db import get_connection

logger = logging.getLogger("tradeledger")


class CapitalRepo:
    """Data access layer for the ``capital_settings`` table.

    Args:
        db_path: Path to the SQLite database file.
        default_capital: Value stored when the record is first read.
    """

    def __init__(self, db_path: str, default_capital: float = 100000.0) -> None:
        self._db_path = db_path
        self._default_capital = default_capital

    def get_settings(self) -> CapitalSettings:
        """Return the capital record, creating it with the default if absent."""
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT total_capital, updated_at FROM capital_settings WHERE id = 1"
            ).fetchone()
            if row is not None:
                return CapitalSettings(row["total_capital"], row["updated_at"])

            updated_at = datetime.now(timezone.utc).isoformat()
            conn.execute(
                "INSERT INTO capital_settings (id, total_capital, updated_at) VALUES (1, ?, ?)",
                (self._default_capital, updated_at),
            )
            conn.commit()
            logger.info("Capital record created with default %.2f", self._default_capital)
            return CapitalSettings(self._default_capital, updated_at)
        finally:
            conn.close()

    def set_total_capital(self, total_capital: float) -> tuple[CapitalSettings, bool]:
        """Create or overwrite the capital record.

        Returns:
            ``(settings, created)`` where *created* is ``True`` when no
            record existed before.

        Raises:
            ValueError: If *total_capital* is negative or not finite.
        """
        if not math.isfinite(total_capital) or total_capital < 0:
            raise ValueError("Capital must be a positive number")

        updated_at = datetime.now(timezone.utc).isoformat()
        conn = get_connection(self._db_path)
        try:
            cur = conn.execute(
                "UPDATE capital_settings SET total_capital = ?, updated_at = ? WHERE id = 1",
                (total_capital, updated_at),
            )
            created = cur.rowcount == 0
            if created:
                conn.execute(
                    "INSERT INTO capital_settings (id, total_capital, updated_at) VALUES (1, ?, ?)",
                    (total_capital, updated_at),
                )
            conn.commit()
        finally:
            conn.close()
        logger.info("Total capital set to %.2f", total_capital)
        return CapitalSettings(total_capital, updated_at), created
