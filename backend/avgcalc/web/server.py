"""HTTP endpoint for the average calculator.

Routes:
    - GET /numbers/{kind}: refresh the window from the kind's provider
      and return {windowPrevState, windowCurrState, numbers, avg}
    - GET /health: liveness check with the current window size

The application is a thin mapping over AggregatorService; the only
logic here is status-code mapping and correlation ID handling.
"""

from __future__ import annotations

import asyncio
import signal
import uuid
from collections.abc import Awaitable, Callable

import structlog
from aiohttp import web

from avgcalc.config import AppConfig
from avgcalc.providers.http.client import HttpNumberProvider
from avgcalc.providers.number_provider import NumberProvider
from avgcalc.service.aggregator import AggregatorService, InvalidKindError
from avgcalc.utils.logging import bind_request_context, clear_request_context
from avgcalc.window.store import WindowStore

log = structlog.get_logger()

SERVICE_KEY = web.AppKey("service", AggregatorService)
REQUEST_ID_HEADER = "X-Request-ID"
INVALID_TYPE_BODY = {"error": "Invalid type"}

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class StartupError(Exception):
    """The server could not start (e.g. the port cannot be bound)."""


@web.middleware
async def correlation_middleware(
    request: web.Request,
    handler: _Handler,
) -> web.StreamResponse:
    """Bind correlation ID and kind into the log context, echo the ID back."""
    cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    fields: dict[str, object] = {}
    if "kind" in request.match_info:
        fields["kind"] = request.match_info["kind"]
    bind_request_context(cid, **fields)
    try:
        response = await handler(request)
    finally:
        clear_request_context()
    response.headers[REQUEST_ID_HEADER] = cid
    return response


async def handle_numbers(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    kind = request.match_info["kind"]
    try:
        result = await service.handle(kind)
    except InvalidKindError:
        return web.json_response(INVALID_TYPE_BODY, status=400)
    return web.json_response(result.to_dict())


async def handle_health(request: web.Request) -> web.Response:
    store = request.app[SERVICE_KEY].store
    return web.json_response(
        {
            "status": "healthy",
            "windowSize": len(store),
            "capacity": store.capacity,
        }
    )


def create_app(service: AggregatorService) -> web.Application:
    """Build the aiohttp application around an aggregator service."""
    app = web.Application(middlewares=[correlation_middleware])
    app[SERVICE_KEY] = service
    app.router.add_get("/numbers/{kind}", handle_numbers)
    app.router.add_get("/health", handle_health)
    return app


class NumberServer:
    """Owns the provider connection and the listening socket.

    start() connects the provider before binding so the first request
    never sees a disconnected client. stop() is idempotent.
    """

    def __init__(
        self,
        service: AggregatorService,
        provider: NumberProvider,
        host: str,
        port: int,
    ) -> None:
        self._service = service
        self._provider = provider
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    @property
    def is_running(self) -> bool:
        return self._site is not None

    @property
    def bound_port(self) -> int:
        """Port actually bound (differs from the configured one for port 0)."""
        if self._runner is None or not self._runner.addresses:
            raise RuntimeError("NumberServer is not running")
        return int(self._runner.addresses[0][1])

    async def start(self) -> None:
        """Connect the provider and start listening.

        Raises:
            StartupError: If the listening socket cannot be bound.
        """
        if self.is_running:
            log.debug("NumberServer already started, skipping")
            return

        await self._provider.connect()
        # Cancel the handler (and its provider call) when the client goes away
        runner = web.AppRunner(
            create_app(self._service),
            handler_cancellation=True,
        )
        try:
            await runner.setup()
        except Exception:
            await self._provider.disconnect()
            raise

        site = web.TCPSite(runner, self._host, self._port)
        try:
            await site.start()
        except OSError as e:
            log.error(
                "server_start_failed",
                host=self._host,
                port=self._port,
                error=str(e),
            )
            await runner.cleanup()
            await self._provider.disconnect()
            raise StartupError(
                f"Failed to bind {self._host}:{self._port}: {e}"
            ) from e

        self._runner = runner
        self._site = site
        log.info(
            "server_started",
            host=self._host,
            port=self.bound_port,
            capacity=self._service.store.capacity,
        )

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        self._site = None
        await self._provider.disconnect()
        log.info("server_stopped")


def build_server(config: AppConfig) -> NumberServer:
    """Wire store, provider, service and server from configuration."""
    store = WindowStore(capacity=config.window.capacity)
    provider = HttpNumberProvider(config.provider)
    service = AggregatorService(store=store, provider=provider)
    return NumberServer(
        service=service,
        provider=provider,
        host=config.web.host,
        port=config.web.port,
    )


async def serve_forever(config: AppConfig) -> None:
    """Run the server until SIGINT/SIGTERM. The window is lost on exit."""
    server = build_server(config)
    await server.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        await server.stop()
