"""Tests for the SQLite trade and capital repositories."""

from datetime import date

import pytest

from app.repos.capital_repo import CapitalRepo
from app.repos.db import get_connection, init_db
from app.repos.trade_repo import TradeRepo


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "ledger" / "test.db")
    init_db(path)
    return path


@pytest.fixture
def repo(db_path):
    return TradeRepo(db_path)


def _buy(repo, name="RELIANCE", **kwargs):
    fields = {
        "scrip_name": name,
        "quantity": 10.0,
        "buy_price": 2500.0,
        "buy_date": date(2024, 4, 2),
    }
    fields.update(kwargs)
    return repo.create_trade(**fields)


# ── Schema ───────────────────────────────────────────────────────────────


class TestInitDb:
    def test_creates_parent_dir_and_tables(self, db_path):
        conn = get_connection(db_path)
        try:
            names = {
                r["name"]
                for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert {"trades", "capital_settings"} <= names

    def test_idempotent(self, db_path):
        init_db(db_path)
        init_db(db_path)


# ── TradeRepo ────────────────────────────────────────────────────────────


class TestTradeRepo:
    def test_create_open_trade(self, repo):
        trade = _buy(repo)
        assert trade.is_open
        assert len(trade.id) == 32

        stored = repo.get_trade(trade.id)
        assert stored == trade

    def test_create_completed_trade(self, repo):
        trade = _buy(repo, sell_price=2600.0, sell_date=date(2024, 5, 1))
        assert not trade.is_open
        assert repo.get_trade(trade.id).sell_date == date(2024, 5, 1)

    def test_get_missing_returns_none(self, repo):
        assert repo.get_trade("nope") is None

    def test_list_newest_first(self, repo):
        first = _buy(repo, name="A")
        second = _buy(repo, name="B")
        third = _buy(repo, name="C")
        ids = [t.id for t in repo.list_trades()]
        assert ids == [third.id, second.id, first.id]

    def test_complete_position_flips_is_open(self, repo):
        trade = _buy(repo)
        half = repo.update_trade(trade.id, {"sell_price": 2700.0})
        assert half.is_open

        done = repo.update_trade(trade.id, {"sell_date": date(2024, 6, 1)})
        assert not done.is_open
        assert done.sell_price == 2700.0
        assert not repo.get_trade(trade.id).is_open

    def test_clearing_sell_field_reopens(self, repo):
        trade = _buy(repo, sell_price=2600.0, sell_date=date(2024, 5, 1))
        reopened = repo.update_trade(trade.id, {"sell_date": None})
        assert reopened.is_open
        assert reopened.sell_price == 2600.0

    def test_update_keeps_identity_fields(self, repo):
        trade = _buy(repo)
        updated = repo.update_trade(
            trade.id,
            {"id": "other", "created_at": "2000-01-01", "is_open": False, "quantity": 20.0},
        )
        assert updated.id == trade.id
        assert updated.created_at == trade.created_at
        assert updated.is_open
        assert updated.quantity == 20.0

    def test_update_missing_returns_none(self, repo):
        assert repo.update_trade("nope", {"quantity": 1.0}) is None

    def test_delete(self, repo):
        trade = _buy(repo)
        assert repo.delete_trade(trade.id) is True
        assert repo.get_trade(trade.id) is None
        assert repo.delete_trade(trade.id) is False


# ── CapitalRepo ──────────────────────────────────────────────────────────


class TestCapitalRepo:
    def test_lazy_default_created_once(self, db_path):
        repo = CapitalRepo(db_path, default_capital=250000.0)
        first = repo.get_settings()
        assert first.total_capital == 250000.0

        again = CapitalRepo(db_path, default_capital=1.0).get_settings()
        assert again.total_capital == 250000.0

    def test_set_creates_then_updates(self, db_path):
        repo = CapitalRepo(db_path)
        settings, created = repo.set_total_capital(500000.0)
        assert created is True
        assert settings.total_capital == 500000.0

        settings, created = repo.set_total_capital(750000.0)
        assert created is False
        assert repo.get_settings().total_capital == 750000.0

    def test_set_after_lazy_default_updates(self, db_path):
        repo = CapitalRepo(db_path)
        repo.get_settings()
        _, created = repo.set_total_capital(0.0)
        assert created is False
        assert repo.get_settings().total_capital == 0.0

    def test_negative_rejected(self, db_path):
        with pytest.raises(ValueError, match="positive"):
            CapitalRepo(db_path).set_total_capital(-1.0)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, db_path, value):
        repo = CapitalRepo(db_path)
        with pytest.raises(ValueError):
            repo.set_total_capital(value)
        assert repo.get_settings().total_capital == 100000.0
