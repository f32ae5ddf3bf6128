"""Error taxonomy for the fpb bridge.

Every failure a request can hit is a ``BridgeError`` subclass carrying the
HTTP status and response body it maps to, so the dispatcher can answer
any of them the same way.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for request-level failures.

    Attributes:
        status_code: HTTP status the failure is reported with.
        body: Response body sent to the client.
    """

    status_code: int = 500
    default_body: str = "Internal Server Error"

    def __init__(self, message: str = "", body: str | None = None) -> None:
        super().__init__(message or self.default_body)
        self.body = body if body is not None else self.default_body


class ReadError(BridgeError):
    """Raised when reading from the client connection fails or ends early."""


class MissingBodyError(BridgeError):
    """Raised when a request declares no body (or ``Content-Length: 0``)."""

    status_code = 400
    default_body = "Bad Request: Missing body"


class MalformedPayloadError(BridgeError):
    """Raised when no command can be extracted from the request body."""

    status_code = 400
    default_body = "Bad Request: Invalid JSON"


class FilesystemError(BridgeError):
    """Raised when the scratch directory or file cannot be prepared."""


class ExecutionTimeoutError(BridgeError):
    """Raised when the interpreter outlives its configured timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"Interpreter killed after {timeout}s",
            body=f"Execution timed out after {timeout:g}s",
        )
        self.timeout = timeout
