"""Domain models for fpb.

All models use Pydantic v2 for validation.
"""

from fpb.domain.models import (
    ContentType,
    ExecutionResult,
    IncomingRequest,
    OutgoingResponse,
)

__all__ = [
    "ContentType",
    "ExecutionResult",
    "IncomingRequest",
    "OutgoingResponse",
]
