"""Request parsing for the bridge.

Reads the request line, the header block and a ``Content-Length``-sized
body from an asyncio stream. Header parsing is tolerant: anything it does
not understand is skipped rather than rejected.
"""

from __future__ import annotations

import asyncio
import logging

from fpb.domain.models import IncomingRequest, parse_content_length
from fpb.errors import MissingBodyError, ReadError

logger = logging.getLogger(__name__)

CONTENT_LENGTH = "content-length"
CONTENT_LENGTH_PREFIX = CONTENT_LENGTH + ":"


class RequestParser:
    """Reads one HTTP request from a client stream."""

    def __init__(self, reader: asyncio.StreamReader) -> None:
        self._reader = reader

    async def read_request_line(self) -> str:
        """Read the request line, e.g. ``POST /api/interpreter HTTP/1.1``.

        A connection closed before sending anything yields an empty line.
        """
        return (await self._read_line()).strip()

    async def read_headers(self) -> dict[str, str]:
        """Read header lines up to the blank line ending the block.

        Returns:
            Header values keyed by lowercased name. A repeated header keeps
            its last value.
        """
        headers: dict[str, str] = {}
        while True:
            line = await self._read_line()
            if not line.strip():
                break
            name, sep, value = line.partition(":")
            if not sep:
                logger.debug("Skipping malformed header line: %r", line)
                continue
            name = name.strip().lower()
            if name == CONTENT_LENGTH and not line.lower().startswith(CONTENT_LENGTH_PREFIX):
                # Only an exact "Content-Length:" prefix declares the body size.
                logger.debug("Skipping loose Content-Length line: %r", line)
                continue
            headers[name] = value.strip()
            if name == CONTENT_LENGTH:
                logger.debug("Content-Length: %d", parse_content_length(value))
        return headers

    async def read_body(self, length: int) -> bytes:
        """Read exactly ``length`` body bytes.

        Raises:
            MissingBodyError: If ``length`` is 0.
            ReadError: If the stream ends early or the read fails.
        """
        if length == 0:
            raise MissingBodyError("Missing body in request")
        try:
            body = await self._reader.readexactly(length)
        except asyncio.IncompleteReadError as e:
            raise ReadError(
                f"Connection closed after {len(e.partial)} of {length} body bytes"
            ) from e
        except OSError as e:
            raise ReadError(f"Failed to read body: {e}") from e
        logger.debug("Read body of length: %d", len(body))
        return body

    async def read_request(self, request_line: str | None = None) -> IncomingRequest:
        """Read a complete request.

        Args:
            request_line: The already consumed request line, if any.
        """
        if request_line is None:
            request_line = await self.read_request_line()
        method, _, rest = request_line.partition(" ")
        path = rest.split(" ", 1)[0]

        headers = await self.read_headers()
        body = await self.read_body(parse_content_length(headers.get(CONTENT_LENGTH, "")))
        return IncomingRequest(
            method=method,
            path=path,
            request_line=request_line,
            headers=headers,
            body=body,
        )

    async def _read_line(self) -> str:
        try:
            raw = await self._reader.readline()
        except (OSError, ValueError) as e:
            # ValueError: line longer than the stream's buffer limit
            raise ReadError(f"Failed to read line: {e}") from e
        return raw.decode("utf-8", errors="replace")
