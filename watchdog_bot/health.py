"""HTTP health endpoint for uptime monitors."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from aiohttp import web

if TYPE_CHECKING:  # pragma: no cover
    from .bot import WatchDogBot

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 3000
ONLINE_TEXT = "WatchDog Bot is online and operational."
INITIALISING_TEXT = "WatchDog Bot is initializing..."


class HealthCheckServer:
    """Serve ``GET /`` with 200 once the gateway is ready, 503 before."""

    def __init__(self, bot: "WatchDogBot", port: int = DEFAULT_PORT, host: str = "0.0.0.0") -> None:
        self.bot = bot
        self.port = port
        self.host = host
        self.app = web.Application()
        self.app.router.add_get("/", self.handle_root)
        self.runner: Optional[web.AppRunner] = None

    async def handle_root(self, request: web.Request) -> web.Response:
        if self.bot.is_ready():
            return web.Response(text=ONLINE_TEXT, status=200)
        return web.Response(text=INITIALISING_TEXT, status=503)

    async def start(self) -> None:
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        try:
            await site.start()
        except OSError:
            LOGGER.exception("Web server failed to start on port %s", self.port)
            await self.runner.cleanup()
            self.runner = None
            return
        LOGGER.info("Web server is running on port %s", self.port)

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
