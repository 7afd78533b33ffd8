"""CLI report — prints ledger metrics to the console."""

from app.ledger.models import Quarter, QuarterStats, TradeMetrics


def _inr(amount: float) -> str:
    return f"₹{amount:,.0f}" if amount >= 0 else f"-₹{abs(amount):,.0f}"


def print_report(
    metrics: TradeMetrics,
    quarters: dict[Quarter, QuarterStats],
    year: int,
) -> str:
    """Format and print the portfolio summary and the quarterly breakdown.

    Args:
        metrics: Output of ``calculate_trade_metrics``.
        quarters: Output of ``get_quarterly_analytics`` for *year*.
        year: The year *quarters* was computed for.

    Returns:
        The formatted string (also printed to stdout).
    """
    lines = [
        "──────────────── Trade Ledger ────────────────",
        f"  Total Capital:      {_inr(metrics.total_capital)}",
        f"  Deployed Capital:   {_inr(metrics.deployed_capital)}",
        f"  Free Capital:       {_inr(metrics.free_capital)}",
        f"  Utilization:        {metrics.capital_utilization:.1f}%",
        f"  Booked P&L:         {_inr(metrics.booked_pl)}",
        f"  Total Return:       {metrics.total_return:.2f}%",
        f"  Win Rate:           {metrics.win_rate:.1f}%",
        f"  Trades:             {metrics.total_trades} "
        f"({metrics.open_positions} open, {metrics.closed_trades} closed)",
        f"──────────────── {year} by quarter ────────────────",
    ]
    for quarter, stats in quarters.items():
        lines.append(
            f"  {quarter.value}  {_inr(stats.booked_pl):>12}  "
            f"{stats.return_percentage:6.2f}%  "
            f"{stats.total_trades} trades, {stats.open_positions} open"
        )
    lines.append("──────────────────────────────────────────────")
    output = "\n".join(lines)
    print(output)
    return output
