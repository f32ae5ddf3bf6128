"""fpb -- Flurion's Python Bindings helper.

A loopback HTTP bridge that lets the MinePy game mod run Python snippets
without embedding an interpreter. Requests carry a ``{"command": ...}``
payload; the snippet is handed to an external interpreter process and its
captured output becomes the response body.
"""

__version__ = "0.1.0"
