"""Command-line entry point for the Game Catalog application.

Parses arguments, configures logging, builds the API client from the saved
configuration (or ``--api-url``) and runs the TUI until it exits or the
process receives SIGTERM.
"""

import argparse
import asyncio
import contextlib
import signal
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog

from game_catalog.models import AppConfig
from game_catalog.services.api_client import CatalogApiClient
from game_catalog.services.config import VALID_LOG_LEVELS, ConfigurationService
from game_catalog.services.logging import setup_logging


VERSION = "0.1.0"

DEFAULT_LOG_DIR = Path("logs")

log = structlog.stdlib.get_logger()


@dataclass(frozen=True)
class CliOptions:
    """Parsed command-line options."""
    config: Path | None = None
    api_url: str | None = None
    log_level: str | None = None
    log_dir: Path | None = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="game-catalog",
        description="Terminal front-end for a games and categories catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  game-catalog                                   Start with the saved configuration
  game-catalog --api-url http://server:5000/api  Use another backend for this run
  game-catalog --log-level DEBUG --log-dir logs  Write debug logs to ./logs
        """,
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (default: ~/.config/game-catalog/config.json)",
    )
    _ = parser.add_argument(
        "--api-url",
        help="Catalog API base URL, overriding the configured one for this run",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        type=str.upper,
        help="Logging level (default: from configuration)",
    )
    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        help=f"Directory for log files (default: ./{DEFAULT_LOG_DIR})",
    )
    return parser


def parse_arguments(argv: list[str] | None = None) -> CliOptions:
    ns = build_parser().parse_args(argv)
    return CliOptions(
        config=ns.config,
        api_url=ns.api_url,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
    )


class ApplicationContext:
    """Owns the services one run of the application needs.

    The configuration and API client are created on first use; ``cleanup``
    closes whatever client is current when the app exits.
    """

    def __init__(self, config_path: Path | None = None, api_url: str | None = None) -> None:
        self.config_service = ConfigurationService(config_path=config_path)
        self._api_url = api_url
        self._config: AppConfig | None = None
        self._api_client: CatalogApiClient | None = None

    @property
    def config(self) -> AppConfig:
        """The saved configuration with ``--api-url`` applied."""
        if self._config is None:
            saved = self.config_service.load_config()
            if self._api_url:
                saved = AppConfig(api_base_url=self._api_url, log_level=saved.log_level)
            self._config = saved
        return self._config

    @property
    def api_client(self) -> CatalogApiClient:
        if self._api_client is None:
            self._api_client = CatalogApiClient(self.config.api_base_url)
        return self._api_client

    def adopt_client(self, client: CatalogApiClient | None) -> None:
        """Take ownership of ``client`` (the app may have reconnected), closing it at cleanup."""
        if client is not None:
            self._api_client = client

    async def cleanup(self) -> None:
        if self._api_client is not None:
            await self._api_client.close()
            self._api_client = None
        log.info("Application cleanup complete")


async def run_tui(context: ApplicationContext) -> int:
    """Run the TUI and return the process exit code."""
    from game_catalog.ui.app import CatalogApp

    app = CatalogApp(
        api_client=context.api_client,
        config_service=context.config_service,
        config=context.config,
    )

    # add_signal_handler is unavailable on Windows event loops
    with contextlib.suppress(NotImplementedError):
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, app.exit)

    log.info("Starting TUI application", api_base_url=context.config.api_base_url)
    try:
        await app.run_async()
    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        # Settings may have replaced the client the context created
        original = context.api_client
        context.adopt_client(app.api_client)
        if context.api_client is not original:
            await original.close()
        await context.cleanup()

    log.info("TUI application exited normally")
    return 0


def main() -> None:
    options = parse_arguments()
    context = ApplicationContext(config_path=options.config, api_url=options.api_url)

    log_level = options.log_level or context.config.log_level
    _ = setup_logging(log_level=log_level, log_dir=options.log_dir or DEFAULT_LOG_DIR, tui_mode=True)
    log.info(
        "Starting Game Catalog",
        version=VERSION,
        log_level=log_level,
        config_path=str(context.config_service.config_path),
    )

    try:
        exit_code = asyncio.run(run_tui(context))
    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130
    except Exception as e:
        log.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        exit_code = 1

    log.info("Application exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
