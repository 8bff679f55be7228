#!/usr/bin/env python3
"""vidbrowse - browse, search and live-search a curated video feed."""

import argparse
import asyncio
import logging
import signal

import uvicorn

from api.client import VideoAPIClient
from config import load_config, Config
from data.recent_searches import RecentSearchStore
from data.settings_store import SettingsStore
from web.app import app as fastapi_app
from web.helpers import init_app_state

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("vidbrowse")


class VidBrowse:
    """Main orchestrator - wires the controller onto the FastAPI app and serves it."""

    def __init__(self, config: Config):
        self.config = config
        self.settings_store = None
        self.api_client = None
        self.controller = None
        self.server = None

    async def setup(self) -> None:
        """Initialize all components."""
        self.settings_store = SettingsStore(db_path=self.config.database.path)
        recent = RecentSearchStore(self.settings_store)
        logger.info("Database initialized (%d recent searches)", len(recent.terms))

        api_cfg = self.config.api
        self.api_client = VideoAPIClient(
            base_url=api_cfg.base_url,
            timeout=api_cfg.timeout,
            search_timeout=api_cfg.search_timeout,
            retries=api_cfg.retries,
        )
        logger.info("Video API client targeting %s", api_cfg.base_url)

        self.controller = init_app_state(
            fastapi_app.state, self.api_client, recent, self.config.browser,
        )
        logger.info("Web app initialized")

    async def run(self) -> None:
        """Start everything."""
        await self.setup()

        # Warm the first page before the first request arrives
        self.controller.start()

        config = uvicorn.Config(
            fastapi_app,
            host=self.config.web.host,
            port=self.config.web.port,
            log_level="info",
        )
        self.server = uvicorn.Server(config)
        logger.info("vidbrowse started on %s:%d", self.config.web.host, self.config.web.port)

        try:
            await self.server.serve()
        except asyncio.CancelledError:
            logger.info("Server cancelled")
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop all components."""
        if self.server:
            self.server.should_exit = True
        if self.controller:
            await self.controller.close()
            self.controller = None
        if self.api_client:
            await self.api_client.aclose()
            self.api_client = None
        if self.settings_store:
            self.settings_store.close()
            self.settings_store = None
        logger.info("vidbrowse stopped")


async def main() -> None:
    parser = argparse.ArgumentParser(description="vidbrowse")
    parser.add_argument("-c", "--config", help="Path to config file", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    app = VidBrowse(config)

    loop = asyncio.get_running_loop()

    def signal_handler():
        if app.server:
            app.server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            signal.signal(sig, lambda s, f: signal_handler())

    try:
        await app.run()
    except KeyboardInterrupt:
        await app.stop()


if __name__ == "__main__":
    asyncio.run(main())
