"""Loopback listener for the bridge.

Accepts connections on the configured address and feeds them to the
dispatcher through a bounded pool of worker slots. Connections waiting for
a slot queue up in arrival order; with one slot every request is handled
start to finish before the next one is read.
"""

from __future__ import annotations

import asyncio
import logging

from fpb.server.dispatcher import ConnectionDispatcher

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6914


class BridgeServer:
    """Listens on a loopback port and dispatches each connection.

    Usage::

        async with BridgeServer(dispatcher, port=0) as server:
            print(server.bound_port)
            await server.serve_forever()
    """

    def __init__(
        self,
        dispatcher: ConnectionDispatcher,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        max_workers: int = 1,
        backlog: int = 100,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._dispatcher = dispatcher
        self._host = host
        self._port = port
        self._max_workers = max_workers
        self._backlog = backlog
        self._slots = asyncio.Semaphore(max_workers)
        self._queued = 0
        self._server: asyncio.AbstractServer | None = None
        self._bound_port: int | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BridgeServer:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()

    async def start(self) -> None:
        """Bind the listening socket.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._server = await asyncio.start_server(
            self._on_connection,
            self._host,
            self._port,
            backlog=self._backlog,
        )
        sockets = self._server.sockets
        if sockets:
            self._bound_port = sockets[0].getsockname()[1]
        logger.info(
            "Flurion's Python Bindings listening on %s:%s (%d worker%s)",
            self._host,
            self._bound_port,
            self._max_workers,
            "" if self._max_workers == 1 else "s",
        )

    async def serve_forever(self) -> None:
        """Serve until cancelled, binding first if needed."""
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
            logger.info("Listener stopped")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def bound_port(self) -> int | None:
        return self._bound_port

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def queued(self) -> int:
        """Connections accepted but still waiting for a worker slot."""
        return self._queued

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    async def _on_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._queued += 1
        try:
            await self._slots.acquire()
        finally:
            self._queued -= 1
        try:
            await self._dispatcher.handle(reader, writer)
        finally:
            self._slots.release()
