"""
leapscan - Main application entry point.

Serves the LEAPS screener API. Run ``python src/main.py`` for the server or
``python src/main.py -quote TICKER`` to print a LEAPS analysis to the terminal.
"""

import asyncio
import json
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from leapscan.config.logging import get_logger, setup_logging
from leapscan.config.settings import get_settings
from leapscan.services.screening import ScreeningService


async def print_analysis(ticker: str) -> None:
    """Analyze one ticker from mock or live data and print the result."""
    settings = get_settings()
    service = ScreeningService(settings)
    use_live = service.market_data.live_enabled
    (result,) = await service.market_data.get_universe_data([ticker.upper()], use_live)
    analysis = await service.analyze_stock(result.fundamentals)
    print(json.dumps(analysis.to_dict(), indent=2))


def main() -> None:
    """Main application entry point."""
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        file_enabled=settings.log_file_enabled,
        file_path=settings.log_file_path,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
    )
    logger = get_logger(__name__)

    if "-quote" in sys.argv:
        try:
            ticker = sys.argv[sys.argv.index("-quote") + 1]
        except IndexError:
            logger.error("Missing ticker after -quote")
            print("Error: Please provide a ticker symbol after -quote flag.")
            sys.exit(1)
        logger.info("Running terminal analysis", ticker=ticker)
        asyncio.run(print_analysis(ticker))
        return

    logger.info(
        "Starting leapscan server",
        host=settings.endpoint_host,
        port=settings.endpoint_port,
        live_market_data=settings.has_live_market_data(),
    )

    try:
        uvicorn.run(
            "leapscan.webapi.app:app",
            host=settings.endpoint_host,
            port=settings.endpoint_port,
            reload=settings.api_reload,
            log_level=settings.api_log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")


if __name__ == "__main__":
    main()
