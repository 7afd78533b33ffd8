"""Trade Ledger — application entry point.

Builds the FastAPI app and provides the CLI entry point for the API
server and the console report.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers import configure_routers, is_configured, router
from app.config import load_config
from app.repos.capital_repo import CapitalRepo
from app.repos.db import init_db
from app.repos.trade_repo import TradeRepo

logger = logging.getLogger("tradeledger")


def build_repos(config) -> tuple[TradeRepo, CapitalRepo]:
    """Create the database if needed and return the repositories."""
    init_db(config.db_path)
    return (
        TradeRepo(config.db_path),
        CapitalRepo(config.db_path, default_capital=config.default_capital),
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Wire repos from the environment unless they were injected already."""
    if not is_configured():
        config = load_config()
        configure_routers(*build_repos(config))
        logger.info("Ledger database: %s", config.db_path)
    yield


app = FastAPI(title="Trade Ledger API", version="0.1.0", lifespan=lifespan)
app.include_router(router)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and dispatch to the requested command."""
    import argparse
    from datetime import date

    parser = argparse.ArgumentParser(description="Trade Ledger")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the JSON API server")
    serve.add_argument("--host", help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, help="Port (default: API_PORT)")

    report = sub.add_parser("report", help="Print portfolio metrics")
    report.add_argument(
        "--year",
        type=int,
        default=date.today().year,
        help="Year for the quarterly breakdown (default: current year)",
    )
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        raise SystemExit(1)

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        _run_server(config, args.host, args.port)
    elif args.command == "report":
        _run_report(config, args.year)


def _run_server(config, host: str | None, port: int | None) -> None:
    """Start uvicorn with the repos already wired."""
    import uvicorn

    configure_routers(*build_repos(config))
    host = host or config.api_host
    port = port or config.api_port
    logger.info("Trade Ledger API listening on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=config.log_level.lower())


def _run_report(config, year: int) -> None:
    """Compute metrics from the stored ledger and print them."""
    from app.cli.report import print_report
    from app.ledger.metrics import calculate_trade_metrics, get_quarterly_analytics

    trade_repo, capital_repo = build_repos(config)
    trades = trade_repo.list_trades()
    capital = capital_repo.get_settings().total_capital
    print_report(
        calculate_trade_metrics(trades, capital),
        get_quarterly_analytics(trades, year),
        year,
    )


if __name__ == "__main__":
    _run_cli()
