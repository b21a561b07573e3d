#!/usr/bin/env python3
"""Crypto Signal Scanner - CLI Entry Point."""
import sys
import json
import asyncio
from datetime import datetime
from enum import Enum
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.table import Table

from __version__ import __version__

console = Console()


def _init_service(config_path=None, verbose=False):
    """Lazy initialization of the signal service."""
    from utils.logger import setup_logging
    from config import load_config
    from signals.service import SignalService

    config = load_config(config_path)
    log_cfg = config.get("logging", {})
    setup_logging("DEBUG" if verbose else log_cfg.get("level", "INFO"), log_cfg.get("file"))
    return SignalService.from_config(config)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="signalscan")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Crypto Signal Scanner - technical, liquidation and news signals across many symbols."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _get_service(ctx):
    if "service" not in ctx.obj:
        ctx.obj["service"] = _init_service(ctx.obj.get("config_path"), ctx.obj.get("verbose"))
    return ctx.obj["service"]


def _run(ctx, operation):
    """Run ``operation(service)`` on a fresh event loop and close the service afterwards."""
    service = _get_service(ctx)

    async def _main():
        try:
            return await operation(service)
        finally:
            await service.close()

    return asyncio.run(_main())


def _json_default(obj):
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


def _print_json(data):
    click.echo(json.dumps(data, indent=2, default=_json_default))


def _signal_table(signals, title):
    from utils.formatters import format_price, confidence_color

    table = Table(title=title, show_header=True)
    table.add_column("Symbol", style="bold", no_wrap=True)
    table.add_column("Price", justify="right")
    table.add_column("Signal", no_wrap=True)
    table.add_column("Conf", justify="right", no_wrap=True)
    table.add_column("Advisory")
    table.add_column("Action", style="dim")

    for s in signals:
        color = confidence_color(s.confidence)
        if s.advisory is None:
            advisory = "[dim]-[/dim]"
        elif s.advisory.is_valid:
            advisory = "[green]valid[/green]"
        else:
            advisory = "[red]rejected[/red]"
        symbol = f"{s.symbol} [dim](degraded)[/dim]" if s.degraded else s.symbol
        table.add_row(
            symbol,
            format_price(s.current_price),
            s.category.value,
            f"[{color}]{s.confidence}%[/{color}]",
            advisory,
            s.suggested_action,
        )
    return table


# ──────────────────────────────────────────────────────
# SIGNALS
# ──────────────────────────────────────────────────────
@cli.command()
@click.argument("symbols", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def signals(ctx, symbols, as_json):
    """Scan SYMBOLS (default: the full universe) and rank the resulting signals."""
    result = _run(ctx, lambda svc: svc.get_signals(list(symbols) or None))

    if as_json:
        _print_json(result)
        return

    meta = result["metadata"]
    if "error" in result:
        console.print(f"[red]{result['error']}[/red] - showing {len(result['signals'])} partial signals")

    console.print(_signal_table(result["signals"], "Signals"))
    console.print(
        f"[dim]Processed {meta['total_processed']}/{meta['total_symbols']} symbols in "
        f"{meta['processing_time_ms']}ms | high confidence: {meta['high_confidence_count']} | "
        f"advisory validated: {meta['advisory_validated_count']} | "
        f"advisory {'on' if meta['advisory_enabled'] else 'off'}[/dim]"
    )


@cli.command()
@click.argument("symbol")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze(ctx, symbol, as_json):
    """Deep dive on a single SYMBOL: snapshots, signal, advisory and news."""
    from signals.service import InvalidQuery
    from utils.formatters import format_price, format_usd, format_pct, confidence_color, time_ago

    try:
        result = _run(ctx, lambda svc: svc.analyze_symbol(symbol))
    except InvalidQuery as e:
        raise click.BadParameter(str(e), param_hint="SYMBOL")

    if as_json:
        _print_json(result)
        return

    signal = result["signal"]
    market = result["market"]
    liq = result["liquidation"]
    color = confidence_color(signal.confidence)

    console.print(f"\n[bold]{result['symbol']}[/bold]  {format_price(signal.current_price)}  "
                  f"[{color}]{signal.category.value} ({signal.confidence}%)[/{color}]")
    console.print(f"[dim]{signal.suggested_action}[/dim]\n")

    table = Table(show_header=False, box=None)
    table.add_column("", style="dim")
    table.add_column("")
    table.add_row("24h Change", format_pct(market.delta_volume, with_color=True))
    table.add_row("Volume", format_usd(market.volume, compact=True))
    table.add_row("Open Interest", format_usd(market.open_interest, compact=True))
    table.add_row("Funding Rate", f"{market.funding_rate:.4f}%")
    table.add_row("Long/Short Ratio", f"{market.long_short_ratio:.2f}")
    table.add_row("Trend 5m / 15m", f"{market.trend_5m.value} / {market.trend_15m.value}")
    table.add_row("Breakout / EMA", f"{market.breakout.value} / {market.crossover.value}")
    table.add_row("Liquidations 1h", f"{format_usd(liq.long_1h, compact=True)} long / "
                                     f"{format_usd(liq.short_1h, compact=True)} short")
    table.add_row("Liquidations 24h", format_usd(liq.total_24h, compact=True))
    table.add_row("Liquidation Spike", liq.spike.value)
    table.add_row("News Sentiment", result["sentiment"].value)
    table.add_row("Data Sources", f"market={market.source}, liquidations={liq.source}")
    console.print(table)

    if signal.trend_summary:
        console.print("\n[bold]Criteria met[/bold]")
        for fact in signal.trend_summary:
            console.print(f"  • {fact}")

    console.print(f"\n[bold]Read:[/bold] {result['recommendation']}")

    advisory = result["advisory"]
    if advisory is not None:
        verdict = "[green]valid[/green]" if advisory.is_valid else "[red]not valid[/red]"
        console.print(f"\n[bold]Advisory[/bold] ({advisory.source}): {verdict}, "
                      f"confidence {advisory.confidence}%, risk {advisory.risk_level.value}")
        if advisory.reasoning:
            console.print(f"  {advisory.reasoning}")
        for warning in advisory.warnings:
            console.print(f"  [yellow]! {warning}[/yellow]")

    if result["news"]:
        console.print("\n[bold]News[/bold]")
        for item in result["news"]:
            console.print(f"  [{item.sentiment.value}] {item.title} [dim]({time_ago(item.published_at)})[/dim]")


@cli.command()
@click.argument("symbols", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def opportunities(ctx, symbols, as_json):
    """Top opportunities across SYMBOLS (default: curated majors)."""
    from utils.formatters import confidence_color

    result = _run(ctx, lambda svc: svc.find_opportunities(list(symbols) or None))

    if as_json:
        _print_json(result)
        return

    if not result:
        console.print("[dim]No opportunities found.[/dim]")
        return

    table = Table(title="Opportunities", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Symbol", style="bold", no_wrap=True)
    table.add_column("Signal", no_wrap=True)
    table.add_column("Conf", justify="right", no_wrap=True)
    table.add_column("Read", style="dim")
    for i, opp in enumerate(result, 1):
        color = confidence_color(opp.confidence)
        table.add_row(str(i), opp.symbol, opp.signal.category.value,
                      f"[{color}]{opp.confidence}%[/{color}]", opp.recommendation)
    console.print(table)


@cli.command()
@click.argument("query", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def ask(ctx, query, as_json):
    """Ask the advisory provider a free-text QUERY."""
    from signals.service import InvalidQuery

    text = " ".join(query)
    try:
        answer = _run(ctx, lambda svc: svc.free_text_query(text))
    except InvalidQuery as e:
        raise click.BadParameter(str(e), param_hint="QUERY")

    if as_json:
        _print_json({"query": text, "response": answer, "timestamp": datetime.now()})
        return
    console.print(answer)


@cli.command()
@click.pass_context
def health(ctx):
    """Test connectivity to each upstream provider."""
    result = _run(ctx, lambda svc: svc.health_check())
    for name, info in result.items():
        status = "[green]✓[/green]" if info["reachable"] else "[red]✗[/red]"
        latency = f" ({info['latency_ms']}ms)" if info["latency_ms"] else ""
        console.print(f"  {status} {name}{latency}")


if __name__ == "__main__":
    cli()
