"""Tests for app.config — environment variable loading and validation."""

import os

import pytest

from app.config import load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure ledger env vars are cleared between tests."""
    for var in [
        "DB_PATH",
        "LOG_LEVEL",
        "API_HOST",
        "API_PORT",
        "DEFAULT_CAPITAL",
    ]:
        monkeypatch.delenv(var, raising=False)


def _no_dotenv(tmp_path):
    # A non-existent env_path keeps load_dotenv from reading a real .env file
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        cfg = load_config(env_path=_no_dotenv(tmp_path))
        assert cfg.db_path == "data/tradeledger.db"
        assert cfg.log_level == "INFO"
        assert cfg.api_host == "127.0.0.1"
        assert cfg.api_port == 8080
        assert cfg.default_capital == 100000.0

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DB_PATH", "/tmp/ledger.db")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("API_PORT", "9000")
        monkeypatch.setenv("DEFAULT_CAPITAL", "250000.5")
        cfg = load_config(env_path=_no_dotenv(tmp_path))
        assert cfg.db_path == "/tmp/ledger.db"
        assert cfg.log_level == "DEBUG"
        assert cfg.api_port == 9000
        assert cfg.default_capital == 250000.5

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("DEFAULT_CAPITAL=42\n", encoding="utf-8")
        try:
            cfg = load_config(env_path=str(env_file))
        finally:
            os.environ.pop("DEFAULT_CAPITAL", None)
        assert cfg.default_capital == 42.0

    def test_invalid_port(self, monkeypatch, tmp_path):
        monkeypatch.setenv("API_PORT", "eighty")
        with pytest.raises(ValueError, match="API_PORT"):
            load_config(env_path=_no_dotenv(tmp_path))

    def test_port_out_of_range(self, monkeypatch, tmp_path):
        monkeypatch.setenv("API_PORT", "70000")
        with pytest.raises(ValueError, match="API_PORT"):
            load_config(env_path=_no_dotenv(tmp_path))

    def test_negative_capital(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DEFAULT_CAPITAL", "-1")
        with pytest.raises(ValueError, match="DEFAULT_CAPITAL"):
            load_config(env_path=_no_dotenv(tmp_path))

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_non_finite_capital(self, monkeypatch, tmp_path, raw):
        monkeypatch.setenv("DEFAULT_CAPITAL", raw)
        with pytest.raises(ValueError, match="DEFAULT_CAPITAL"):
            load_config(env_path=_no_dotenv(tmp_path))
