"""Tests for CLI commands."""
import json

import pytest
from click.testing import CliRunner

from main import cli
from models.enums import SignalCategory
from models.signals import Opportunity, Signal


class StubService:
    def __init__(self):
        self.closed = False
        self.signal = Signal(symbol="BTCUSDT", current_price=65_000.0,
                             category=SignalCategory.LONG_GOING, confidence=71,
                             suggested_action="Trend continuation LONG.")

    async def get_signals(self, symbols=None):
        return {
            "signals": [self.signal],
            "metadata": {
                "total_processed": 1, "total_symbols": 1, "high_confidence_count": 1,
                "advisory_validated_count": 0, "processing_time_ms": 12,
                "timestamp": "2024-06-01T12:00:00+00:00", "advisory_enabled": False,
            },
        }

    async def find_opportunities(self, symbols=None):
        return [Opportunity("BTCUSDT", self.signal, 71, "Mixed signals")]

    async def free_text_query(self, text):
        return f"answer: {text}"

    async def health_check(self):
        return {"Binance spot": {"reachable": True, "latency_ms": 40}}

    async def close(self):
        self.closed = True


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def service():
    return StubService()


def test_cli_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Crypto Signal Scanner" in result.output
    for command in ("signals", "analyze", "opportunities", "ask", "health"):
        assert command in result.output


def test_cli_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_signals_table(runner, service):
    result = runner.invoke(cli, ["signals", "BTCUSDT"], obj={"service": service})
    assert result.exit_code == 0
    assert "BTCUSDT" in result.output
    assert "LONG GOING" in result.output
    assert service.closed


def test_signals_json(runner, service):
    result = runner.invoke(cli, ["signals", "--json"], obj={"service": service})
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["signals"][0]["signal"] == "LONG GOING"
    assert data["metadata"]["total_processed"] == 1


def test_opportunities_json(runner, service):
    result = runner.invoke(cli, ["opportunities", "--json"], obj={"service": service})
    assert result.exit_code == 0
    assert json.loads(result.output)[0]["confidence"] == 71


def test_ask_joins_words(runner, service):
    result = runner.invoke(cli, ["ask", "is", "btc", "bullish"], obj={"service": service})
    assert result.exit_code == 0
    assert "answer: is btc bullish" in result.output


def test_ask_requires_query(runner, service):
    result = runner.invoke(cli, ["ask"], obj={"service": service})
    assert result.exit_code != 0


def test_health(runner, service):
    result = runner.invoke(cli, ["health"], obj={"service": service})
    assert result.exit_code == 0
    assert "Binance spot" in result.output
