"""Tests for app.cli.report — console rendering of ledger metrics."""

from datetime import date

from app.cli.report import print_report
from app.ledger.metrics import calculate_trade_metrics, get_quarterly_analytics
from app.ledger.models import Trade


class TestPrintReport:
    def test_report_lines(self, capsys):
        trades = [
            Trade(
                scrip_name="ITC", quantity=10, buy_price=400.0, buy_date=date(2024, 1, 1),
                sell_price=450.0, sell_date=date(2024, 2, 1),
            ),
            Trade(scrip_name="SBIN", quantity=10, buy_price=600.0, buy_date=date(2024, 5, 1)),
        ]
        output = print_report(
            calculate_trade_metrics(trades, 100000),
            get_quarterly_analytics(trades, 2024),
            2024,
        )
        assert "₹100,000" in output
        assert "₹500" in output
        assert "100.0%" in output
        assert "2 (1 open, 1 closed)" in output
        assert "2024 by quarter" in output
        assert "Q4" in output
        assert capsys.readouterr().out.strip() == output.strip()

    def test_negative_amounts(self):
        trades = [
            Trade(
                scrip_name="ITC", quantity=10, buy_price=400.0, buy_date=date(2024, 1, 1),
                sell_price=350.0, sell_date=date(2024, 2, 1),
            ),
        ]
        output = print_report(
            calculate_trade_metrics(trades, 1000),
            get_quarterly_analytics(trades, 2024),
            2024,
        )
        assert "-₹500" in output
