"""Tests for the response writer."""

from __future__ import annotations

import pytest

from fpb.domain.models import OutgoingResponse
from fpb.server.response import ResponseWriter


class TestResponseWriter:
    @pytest.mark.asyncio
    async def test_writes_encoded_response(self, fake_writer, parse_response) -> None:
        response = OutgoingResponse.build(200, "2\n")
        await ResponseWriter(fake_writer).send(response)  # type: ignore[arg-type]
        assert bytes(fake_writer.data) == response.encode()

        status, reason, headers, body = parse_response(bytes(fake_writer.data))
        assert (status, reason) == (200, "OK")
        assert headers == {"content-length": "2", "content-type": "text/plain"}
        assert body == b"2\n"

    @pytest.mark.asyncio
    async def test_html_page(self, fake_writer, parse_response) -> None:
        await ResponseWriter(fake_writer).send(  # type: ignore[arg-type]
            OutgoingResponse.build(200, "<!DOCTYPE html><p>hi</p>")
        )
        _, _, headers, _ = parse_response(bytes(fake_writer.data))
        assert headers["content-type"] == "text/html"

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, failing_writer) -> None:
        with pytest.raises(ConnectionResetError):
            await ResponseWriter(failing_writer).send(OutgoingResponse.build(200, "x"))  # type: ignore[arg-type]
