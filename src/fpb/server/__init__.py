"""Loopback HTTP bridge for fpb.

Hand-rolled HTTP/1.1 framing over asyncio streams: just enough to serve
the status page and the interpreter endpoint the MinePy mod talks to.
"""

from fpb.server.dispatcher import ConnectionDispatcher
from fpb.server.listener import BridgeServer

__all__ = ["BridgeServer", "ConnectionDispatcher"]
