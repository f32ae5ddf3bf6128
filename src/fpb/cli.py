"""Command-line interface for the fpb helper.

Provides the main entry point for running the bridge, plus a one-shot
``exec`` command for checking the interpreter setup without the mod.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="fpb",
        description="Flurion's Python Bindings: loopback Python helper for the MinePy mod",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/fpb.yaml if present)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    for name in ("debug", "info", "error", "warn"):
        verbosity.add_argument(
            f"--{name}",
            dest="verbosity",
            action="store_const",
            const=name,
            help=f"Log at {name} level",
        )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Run the bridge (default)")

    exec_parser = subparsers.add_parser(
        "exec", help="Run one snippet through the interpreter and print the result",
    )
    source = exec_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("code", nargs="?", help="Code to run")
    source.add_argument("-f", "--file", type=Path, help="Read the code from a file")

    return parser.parse_args(argv)


def _build_runner(settings):
    from fpb.interpreter.runner import ScriptRunner

    cfg = settings.interpreter
    return ScriptRunner(
        executable=cfg.executable,
        scratch_root=cfg.scratch_root,
        scratch_dir_name=cfg.scratch_dir_name,
        timeout=cfg.timeout,
    )


async def _serve(settings) -> None:
    """Bind the listener and serve until interrupted."""
    from fpb.server.dispatcher import ConnectionDispatcher
    from fpb.server.listener import BridgeServer

    dispatcher = ConnectionDispatcher(runner=_build_runner(settings))
    srv = settings.server
    async with BridgeServer(
        dispatcher,
        host=srv.host,
        port=srv.port,
        max_workers=srv.max_workers,
        backlog=srv.backlog,
    ) as server:
        await server.serve_forever()


async def _exec(settings, code: str) -> int:
    """Run ``code`` once and print the response body the bridge would send."""
    from fpb.errors import BridgeError

    runner = _build_runner(settings)
    try:
        response = (await runner.run(code)).to_response()
    except BridgeError as e:
        print(e.body, file=sys.stderr)
        return 1
    print(response.body, end="")
    return 0 if response.status_code == 200 else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the fpb CLI."""
    args = parse_args(argv)

    from fpb.config.settings import load_settings
    from fpb.utils.logging import VERBOSITY_LEVELS, setup_logging

    settings = load_settings(args.config)

    if args.verbosity:
        settings.logging.level = VERBOSITY_LEVELS[args.verbosity]

    setup_logging(settings.logging)

    if args.command == "exec":
        code = args.file.read_text(encoding="utf-8") if args.file else args.code
        sys.exit(asyncio.run(_exec(settings, code)))

    logger.info("Starting bridge")
    try:
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except OSError as e:
        logger.error("Failed to start listener: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
