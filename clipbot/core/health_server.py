"""HTTP health check server"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from clipbot.core.session import SessionController

logger = logging.getLogger("Bot.Health")


class HealthCheckServer:
    """HTTP health check server"""

    def __init__(self, controller: "SessionController", host: str = "0.0.0.0", port: int = 4344):
        self.controller = controller
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes"""
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    async def handle_health(self, request: web.Request) -> web.Response:
        """Readiness check: 503 until the session is launched"""
        ready = self.controller.is_ready
        return web.json_response(
            {"status": "healthy" if ready else "starting", "ready": ready},
            status=200 if ready else 503,
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        """Session details"""
        pending = self.controller.pending
        ready = self.controller.is_ready
        return web.json_response(
            {
                "service": "clipbot",
                "channel": pending.channel,
                "username": pending.username,
                "broadcaster_id": self.controller.session.broadcaster_id if ready else None,
                "uptime_seconds": int(time.time() - self._start_time),
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        """Ping endpoint"""
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        """Periodic heartbeat: log uptime and session status"""
        while True:
            await asyncio.sleep(300)
            uptime = int(time.time() - self._start_time)
            logger.info(f"Heartbeat: uptime={uptime}s, ready={self.controller.is_ready}")

    async def start(self) -> None:
        """Start health check server"""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"Health server started on {self.host}:{self.port}")
        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        """Stop health check server"""
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
