import sys
import asyncio
from typing import Optional

# --- Settings/Logging ---
from odds_aggregator.logging.setup import setup_logging
from odds_aggregator.config.settings import settings

setup_logging()

from loguru import logger

from odds_aggregator.aggregation.aggregator import OddsAggregator
from odds_aggregator.models.responses import AggregatedOdds

from rich import print
from rich.console import Console
from rich.panel import Panel
from rich.table import Table


def render(result: AggregatedOdds, console: Console) -> None:
    """Prints each event's outcomes with the best price highlighted."""
    for event in result.data:
        table = Table(title=event.description, show_lines=False)
        table.add_column("Market")
        table.add_column("Outcome")
        table.add_column("Prices")
        for market in event.markets:
            for outcome in market.outcomes:
                prices = "  ".join(
                    (
                        f"[bold green]{p.bookmaker} {p.price:+d}[/bold green]"
                        if p.is_best
                        else f"{p.bookmaker} {p.price:+d}"
                    )
                    for p in outcome.prices
                )
                table.add_row(market.name, outcome.name, prices)
        console.print(table)

    status = (
        f"Sources: {', '.join(result.sources) or 'none'}\n"
        f"Events: {len(result.data)}\n"
        f"Last updated: {result.last_updated:%Y-%m-%d %H:%M:%S}\n"
        f"Next update: {result.next_update:%Y-%m-%d %H:%M:%S}"
    )
    if result.rate_limit_remaining is not None:
        status += f"\nRequests remaining: {result.rate_limit_remaining}"
    if result.error:
        status += f"\n[yellow]{result.error}[/yellow]"
    print(Panel(status, title="Demo data" if result.is_demo else "Live odds"))


async def main(sport: Optional[str] = None) -> None:
    """Main entry point for the application."""
    logger.info("Starting odds aggregation")

    aggregator = OddsAggregator.from_settings(settings)
    try:
        if sport:
            result = await aggregator.get_odds_by_sport(sport)
        else:
            result = await aggregator.get_all_odds()
        logger.success(
            f"Aggregation complete: {len(result.data)} events from {result.sources}"
        )
        render(result, Console())
    finally:
        await aggregator.close()


if __name__ == "__main__":
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
