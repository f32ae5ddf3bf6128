"""Shared test fixtures for the fpb test suite.

Provides in-memory stream doubles for the HTTP layer, a script runner
backed by the current Python interpreter, and a helper to split raw
HTTP responses.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable

import pytest

from fpb.interpreter.runner import ScriptRunner


# ---------------------------------------------------------------------------
# Stream doubles
# ---------------------------------------------------------------------------


class FakeWriter:
    """Collects everything written to it, like a StreamWriter to a client."""

    def __init__(self, fail_with: OSError | None = None) -> None:
        self.data = bytearray()
        self.closed = False
        self._fail_with = fail_with

    def write(self, data: bytes) -> None:
        self.data.extend(data)

    async def drain(self) -> None:
        if self._fail_with is not None:
            raise self._fail_with

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    def get_extra_info(self, name: str, default: object = None) -> object:
        if name == "peername":
            return ("127.0.0.1", 50000)
        return default


@pytest.fixture
def make_reader() -> Callable[..., asyncio.StreamReader]:
    """Factory for a StreamReader pre-fed with bytes and EOF.

    Must be called from inside a running event loop.
    """

    def _make(data: bytes, limit: int = 2**16) -> asyncio.StreamReader:
        reader = asyncio.StreamReader(limit=limit)
        reader.feed_data(data)
        reader.feed_eof()
        return reader

    return _make


@pytest.fixture
def fake_writer() -> FakeWriter:
    return FakeWriter()


# ---------------------------------------------------------------------------
# Interpreter fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    return tmp_path / "tmp"


@pytest.fixture
def runner(scratch_root: Path) -> ScriptRunner:
    """A ScriptRunner using the interpreter running the tests."""
    return ScriptRunner(executable=sys.executable, scratch_root=scratch_root)


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def split_response(raw: bytes) -> tuple[int, str, dict[str, str], bytes]:
    """Split raw response bytes into (status, reason, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    status_line, *header_lines = head.decode("ascii").split("\r\n")
    _, status, reason = status_line.split(" ", 2)
    headers = {}
    for line in header_lines:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return int(status), reason, headers, body


@pytest.fixture
def parse_response() -> Callable[[bytes], tuple[int, str, dict[str, str], bytes]]:
    return split_response


@pytest.fixture
def failing_writer() -> FakeWriter:
    """A writer whose peer has gone away."""
    return FakeWriter(fail_with=ConnectionResetError("peer gone"))


@pytest.fixture(autouse=True)
def _reset_fpb_logger():
    """Drop handlers installed by setup_logging so they don't outlive the test."""
    yield
    logger = logging.getLogger("fpb")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
