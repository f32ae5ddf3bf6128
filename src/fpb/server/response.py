"""Response writing for the bridge."""

from __future__ import annotations

import asyncio
import logging

from fpb.domain.models import OutgoingResponse

logger = logging.getLogger(__name__)


class ResponseWriter:
    """Writes one response to a client stream.

    Write failures are logged and re-raised; nothing is retried.
    """

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    async def send(self, response: OutgoingResponse) -> None:
        try:
            self._writer.write(response.encode())
            await self._writer.drain()
        except OSError as e:
            logger.error("Failed to send %d response: %s", response.status_code, e)
            raise
        logger.debug("Sent response with status: %d", response.status_code)
