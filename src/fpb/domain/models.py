"""Core domain models for the fpb bridge.

These models represent the data flowing through one request: the parsed
incoming request, the result of running the interpreter, and the response
written back to the client.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

HTML_MARKER = "<!DOCTYPE html"

REASON_PHRASES = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ContentType(str, enum.Enum):
    """Content types the bridge can answer with."""

    HTML = "text/html"
    TEXT = "text/plain"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class IncomingRequest(BaseModel):
    """A request read off one client connection.

    The body always holds exactly ``content_length`` bytes, or nothing.
    """

    method: str = Field(description="Request method, e.g. 'POST'")
    path: str = Field(description="Request target as sent by the client")
    request_line: str = Field(default="", description="Raw request line without CRLF")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Header values keyed by lowercased name"
    )
    body: bytes = Field(default=b"")

    @property
    def content_length(self) -> int:
        return parse_content_length(self.headers.get("content-length", ""))

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, invalid sequences replaced."""
        return self.body.decode("utf-8", errors="replace")


def parse_content_length(value: str) -> int:
    """Parse a Content-Length value as an unsigned integer, 0 if invalid."""
    value = value.strip()
    if value.startswith("+"):
        value = value[1:]
    if not value.isdigit() or not value.isascii():
        return 0
    return int(value)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class OutgoingResponse(BaseModel):
    """A response ready to be written to the client."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(description="HTTP status code (200, 400, 404 or 500)")
    content_type: ContentType = Field(default=ContentType.TEXT)
    body: str = Field(default="")

    @classmethod
    def build(cls, status_code: int, body: str) -> OutgoingResponse:
        """Create a response, picking HTML only for 200 pages with a doctype."""
        if status_code == 200 and HTML_MARKER in body:
            content_type = ContentType.HTML
        else:
            content_type = ContentType.TEXT
        return cls(status_code=status_code, content_type=content_type, body=body)

    @property
    def reason(self) -> str:
        return REASON_PHRASES.get(self.status_code, REASON_PHRASES[400])

    def encode(self) -> bytes:
        """Serialize to wire format: status line, headers, blank line, body."""
        payload = self.body.encode("utf-8")
        head = (
            f"HTTP/1.1 {self.status_code} {self.reason}\r\n"
            f"Content-Length: {len(payload)}\r\n"
            f"Content-Type: {self.content_type.value}\r\n"
            "\r\n"
        )
        return head.encode("ascii") + payload


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------


class ExecutionResult(BaseModel):
    """Captured outcome of one interpreter invocation."""

    model_config = ConfigDict(frozen=True)

    standard_output: str = Field(default="")
    standard_error: str = Field(default="")
    launch_succeeded: bool = Field(default=True)
    return_code: int | None = Field(
        default=None, description="Exit code, logged only; never affects the status"
    )

    @classmethod
    def launch_failure(cls, message: str) -> ExecutionResult:
        return cls(standard_error=message, launch_succeeded=False)

    def to_response(self) -> OutgoingResponse:
        """Format the result the way the mod expects it.

        Interpreter errors still produce a 200: the caller tells success from
        failure by the ``Error:`` prefix in the body, not by the status.
        """
        if not self.launch_succeeded:
            return OutgoingResponse.build(500, self.standard_error)
        if self.standard_error:
            return OutgoingResponse.build(
                200, f"Error: {self.standard_error}\nOutput: {self.standard_output}"
            )
        return OutgoingResponse.build(200, self.standard_output)
