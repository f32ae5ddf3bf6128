"""Command extraction from the request body.

The mod sends a single-field object, so this is a small fixed grammar
rather than a JSON parser::

    payload := ws "{" ws "\\"command\\":" value "}" ws
    value   := ws ( "\\"" chars "\\"" | token ) ws

Quoted values are returned verbatim (escape sequences are not decoded).
Nested objects, arrays, escaped quotes and extra fields are unsupported:
they produce a wrong or empty extraction, never an exception.
"""

from __future__ import annotations

import re

COMMAND_KEY = '"command":'

PAYLOAD_PATTERN = re.compile(r"\A\{(?P<interior>.*)\}\Z", re.DOTALL)


def extract_command(body: str) -> str | None:
    """Pull the ``command`` value out of a ``{"command": ...}`` body.

    Returns:
        The command text, or None if the body does not have the expected shape.
    """
    match = PAYLOAD_PATTERN.match(body.strip())
    if match is None:
        return None

    interior = match.group("interior")
    if not interior.strip().startswith(COMMAND_KEY):
        return None

    # The key's own colon is the first one in the interior.
    value = interior.split(":", 1)[1].strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value
