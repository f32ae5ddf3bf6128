"""Interpreter pipeline for fpb.

Turns a request body into a command and runs it with the external
interpreter, capturing its output.
"""

from fpb.interpreter.extractor import extract_command
from fpb.interpreter.runner import ScriptRunner

__all__ = ["ScriptRunner", "extract_command"]
