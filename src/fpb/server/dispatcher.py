"""Per-connection request handling.

Routes the request line to the static status page or the interpreter
pipeline and always answers with exactly one response:

    GET  /                 -> 200 text/html status page
    POST /api/interpreter  <- {"command": "print(1 + 1)"}
                           -> 200 text/plain interpreter output
    anything else          -> 404
"""

from __future__ import annotations

import asyncio
import logging

from fpb.domain.models import IncomingRequest, OutgoingResponse
from fpb.errors import BridgeError, MalformedPayloadError
from fpb.interpreter.extractor import extract_command
from fpb.interpreter.runner import ScriptRunner
from fpb.server.request import RequestParser
from fpb.server.response import ResponseWriter

logger = logging.getLogger(__name__)

HOME_ROUTE = "GET / "
INTERPRETER_ROUTE = "POST /api/interpreter "

INDEX_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Flurion's Python Bindings for MinePy mod</title>
</head>
<body>
    <h1>Helper is running.</h1>
</body>
</html>"""


class ConnectionDispatcher:
    """Drives one client connection from request line to response.

    Args:
        runner: Script runner used for ``POST /api/interpreter``.
        index_page: HTML served on ``GET /``.
    """

    def __init__(self, runner: ScriptRunner, index_page: str = INDEX_PAGE) -> None:
        self._runner = runner
        self._index_page = index_page

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Answer one connection and close it."""
        peer = writer.get_extra_info("peername")
        logger.debug("Received connection from: %s", peer)
        try:
            try:
                response = await self.dispatch(RequestParser(reader))
            except BridgeError as e:
                level = logging.INFO if e.status_code < 500 else logging.ERROR
                logger.log(level, "Request from %s failed: %s", peer, e)
                response = OutgoingResponse.build(e.status_code, e.body)
            except Exception:
                logger.exception("Unexpected error handling connection from %s", peer)
                response = OutgoingResponse.build(500, "Internal Server Error")

            try:
                await ResponseWriter(writer).send(response)
            except OSError as e:
                logger.error("Error handling connection from %s: %s", peer, e)
        finally:
            # Also reached on cancellation, which no handler above catches.
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def dispatch(self, parser: RequestParser) -> OutgoingResponse:
        """Read a request and produce its response.

        Raises:
            BridgeError: For any failure that maps to an error response.
        """
        request_line = await parser.read_request_line()
        logger.debug("Request line: %s", request_line)

        if request_line.startswith(HOME_ROUTE):
            return OutgoingResponse.build(200, self._index_page)

        if not request_line.startswith(INTERPRETER_ROUTE):
            logger.info("Invalid request path: %s", request_line)
            return OutgoingResponse.build(404, "Not Found")

        request = await parser.read_request(request_line)
        return await self.execute(request)

    async def execute(self, request: IncomingRequest) -> OutgoingResponse:
        """Run the command carried by an interpreter request."""
        logger.debug("Request body: %s", request.text)
        command = extract_command(request.text)
        if command is None:
            raise MalformedPayloadError("Invalid JSON in body")
        logger.debug("Extracted command: %s", command)

        result = await self._runner.run(command)
        response = result.to_response()
        logger.debug("Sending response: %s", response.body)
        return response
