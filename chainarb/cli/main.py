"""
ChainArb CLI entry point.

Usage:
    # Scan a token on the default chains
    chainarb scan 0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48

    # Scan selected chains with a lower profit bar
    chainarb scan usd-coin --chain ethereum --chain base --min-profit 0

    # Raw price gaps, no cost netting
    chainarb routes usd-coin

    # Show cost tables and provider status
    chainarb chains
"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from chainarb.arb.engine import ArbitrageEngine, create_engine
from chainarb.core.errors import ChainArbError, InvalidInputError
from chainarb.core.logging import get_logger, setup_logging
from chainarb.core.timeutil import format_timestamp, parse_timestamp, to_local
from chainarb.domain.models import Chain, RouteQuote, ScanResult
from chainarb.providers.base import ProviderStatus

console = Console()
logger = get_logger("cli")

RISK_COLORS = {"Low": "green", "Medium": "yellow", "High": "red"}
HEALTH_COLORS = {
    ProviderStatus.HEALTHY: "green",
    ProviderStatus.DEGRADED: "yellow",
    ProviderStatus.UNAVAILABLE: "red",
}


def build_engine() -> ArbitrageEngine:
    try:
        return create_engine()
    except ChainArbError as e:
        raise click.ClickException(e.message) from e


def display_scan(result: ScanResult) -> None:
    """Display scan result in terminal."""
    scanned_at = format_timestamp(to_local(parse_timestamp(result.timestamp)), "display")
    console.print(
        f"\n[bold blue]{result.token_id}[/bold blue] "
        f"scanned on {result.chains_scanned} chain(s) at {scanned_at}\n"
    )

    if result.prices:
        table = Table(title="Prices")
        table.add_column("Chain", style="cyan")
        table.add_column("Price", justify="right")
        table.add_column("24h", justify="right")
        table.add_column("Volume", justify="right")
        table.add_column("Market Cap", justify="right")

        for chain, quote in result.prices.items():
            change = quote.price_change_24h
            change_str = "N/A" if change is None else f"{change:+.2f}%"
            table.add_row(
                chain.value,
                f"${quote.price:,.6f}",
                change_str,
                f"${quote.volume_24h:,.0f}" if quote.volume_24h else "N/A",
                f"${quote.market_cap:,.0f}" if quote.market_cap else "N/A",
            )
        console.print(table)
        console.print()

    if not result.opportunities:
        console.print("[yellow]No profitable arbitrage opportunities found.[/yellow]")
        return

    table = Table(
        title=f"Opportunities ({len(result.opportunities)} of {result.total_opportunities})"
    )
    table.add_column("Route", style="cyan")
    table.add_column("Buy", justify="right")
    table.add_column("Sell", justify="right")
    table.add_column("Costs", justify="right")
    table.add_column("Net Profit", justify="right", style="green")
    table.add_column("Bridge")
    table.add_column("Risk")

    for opp in result.opportunities:
        color = RISK_COLORS[opp.risk_level.value]
        table.add_row(
            f"{opp.buy_chain.value.upper()} -> {opp.sell_chain.value.upper()}",
            f"${opp.buy_price:,.6f}",
            f"${opp.sell_price:,.6f}",
            f"${opp.costs.total:,.2f}",
            f"${opp.net_profit:,.2f} ({opp.net_profit_percentage:.2f}%)",
            f"{opp.bridge_info.protocol} (${opp.bridge_info.cost:g}, {opp.bridge_info.time}min)",
            f"[{color}]{opp.risk_level.value}[/{color}]",
        )

    console.print(table)


def display_routes(token_id: str, routes: list[RouteQuote]) -> None:
    """Display raw routes in terminal."""
    if not routes:
        console.print(f"[yellow]Fewer than two chains quoted {token_id}.[/yellow]")
        return

    table = Table(title=f"Routes for {token_id}")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("From Price", justify="right")
    table.add_column("To Price", justify="right")
    table.add_column("Gap", justify="right")
    table.add_column("Bridge")

    for route in routes:
        color = "green" if route.profit_percentage > 0 else "red"
        table.add_row(
            route.from_chain.value,
            route.to_chain.value,
            f"${route.from_price:,.6f}",
            f"${route.to_price:,.6f}",
            f"[{color}]{route.profit_percentage:+.3f}%[/{color}]",
            f"{route.bridge_info.protocol} ({route.bridge_info.time}min)",
        )

    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def cli(verbose: bool) -> None:
    """ChainArb - Cross-chain token arbitrage scanner"""
    setup_logging(log_level="DEBUG" if verbose else None)


@cli.command()
@click.argument("token_id")
@click.option(
    "--chain",
    "chains",
    multiple=True,
    type=click.Choice([c.value for c in Chain], case_sensitive=False),
    help="Chain to scan (repeatable). Defaults to the six main EVM chains.",
)
@click.option("--min-profit", type=float, default=None, help="Minimum net profit in USD")
@click.option("--notional", type=float, default=None, help="Trade size for fee/profit scaling")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON result")
def scan(
    token_id: str,
    chains: tuple[str, ...],
    min_profit: Optional[float],
    notional: Optional[float],
    as_json: bool,
) -> None:
    """Find net-profitable cross-chain arbitrage for TOKEN_ID."""
    logger.debug(f"CLI scan: token={token_id} chains={chains or 'default'}")
    engine = build_engine()
    try:
        result = engine.scan(
            token_id,
            chains=chains or None,
            min_profit_usd=min_profit,
            notional_amount=notional,
        )
    except InvalidInputError as e:
        raise click.UsageError(e.message) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        display_scan(result)


@cli.command()
@click.argument("token_id")
@click.option(
    "--chain",
    "chains",
    multiple=True,
    type=click.Choice([c.value for c in Chain], case_sensitive=False),
    help="Chain to include (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON result")
def routes(token_id: str, chains: tuple[str, ...], as_json: bool) -> None:
    """List raw price gaps between every chain pair for TOKEN_ID."""
    engine = build_engine()
    try:
        result = engine.list_routes(token_id, chains=chains or None)
    except InvalidInputError as e:
        raise click.UsageError(e.message) from e

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in result], indent=2))
    else:
        display_routes(token_id, result)


@cli.command()
def chains() -> None:
    """Show cost tables, risk flags and price source status."""
    engine = build_engine()
    cost_model = engine.cost_model

    table = Table(title="Chain Costs")
    table.add_column("Chain", style="cyan")
    table.add_column("DEX Fee", justify="right")
    table.add_column("Swap Gas", justify="right")
    table.add_column("High Risk")

    for row in cost_model.describe(Chain):
        chain = Chain(row["chain"])
        flagged = chain in engine.risk_scorer.high_risk_chains
        table.add_row(
            row["chain"],
            f"{row['dexFeePercent']:.2f}%",
            f"${row['swapGasCostUSD']:,.2f}",
            "[red]yes[/red]" if flagged else "",
        )
    console.print(table)
    console.print()

    default = cost_model.default_bridge
    console.print(
        f"Default bridge: {default.protocol} (${default.cost:g}, {default.time}min)"
    )

    health = engine.aggregator.provider.healthcheck()
    color = HEALTH_COLORS[health.status]
    console.print(
        f"Price source {engine.aggregator.provider.name}: "
        f"[{color}]{health.status.value}[/{color}] {health.message}"
    )


if __name__ == "__main__":
    cli()
