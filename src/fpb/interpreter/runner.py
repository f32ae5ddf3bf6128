"""External interpreter invocation.

Hands a command to the interpreter through a scratch file and captures
what the process prints. Each run gets its own uniquely named file in the
scratch directory, removed again once the process has finished, so
concurrent runs never see each other's code.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fpb.domain.models import ExecutionResult
from fpb.errors import ExecutionTimeoutError, FilesystemError

logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_DIR_NAME = "fpb"


class ScriptRunner:
    """Runs command text with an external interpreter.

    Usage::

        runner = ScriptRunner(executable="python3", timeout=10)
        result = await runner.run("print(1 + 1)")
        result.standard_output  # "2\\n"

    Without a timeout the call blocks until the interpreter exits.
    """

    def __init__(
        self,
        executable: str = "python",
        scratch_root: Path | str | None = None,
        scratch_dir_name: str = DEFAULT_SCRATCH_DIR_NAME,
        timeout: float | None = None,
    ) -> None:
        root = Path(scratch_root) if scratch_root else Path(tempfile.gettempdir())
        self._executable = executable
        self._scratch_dir = root / scratch_dir_name
        self._timeout = timeout

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def scratch_dir(self) -> Path:
        return self._scratch_dir

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def run(self, command: str) -> ExecutionResult:
        """Write ``command`` to a scratch file and run the interpreter on it.

        Returns:
            The captured output. A process that could not be started gives
            a result with ``launch_succeeded=False``.

        Raises:
            FilesystemError: If the scratch directory or file can't be written.
            ExecutionTimeoutError: If the interpreter outlives the timeout.
        """
        self._ensure_scratch_dir()
        with self._scratch_file(command) as script_path:
            return await self._execute(script_path)

    def _ensure_scratch_dir(self) -> None:
        try:
            self._scratch_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create scratch dir %s: %s", self._scratch_dir, e)
            raise FilesystemError(f"Cannot create scratch directory {self._scratch_dir}: {e}") from e
        logger.debug("Scratch dir ready: %s", self._scratch_dir)

    @contextmanager
    def _scratch_file(self, command: str) -> Iterator[Path]:
        """Create a private script file holding ``command``; delete it on exit."""
        try:
            fd, name = tempfile.mkstemp(prefix="script-", suffix=".py", dir=self._scratch_dir)
        except OSError as e:
            logger.error("Failed to create script file in %s: %s", self._scratch_dir, e)
            raise FilesystemError(f"Cannot create script file: {e}") from e

        path = Path(name)
        try:
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(command.encode("utf-8"))
            except OSError as e:
                logger.error("Failed to write to script file %s: %s", path, e)
                raise FilesystemError(f"Cannot write script file {path}: {e}") from e
            logger.debug("Wrote script to %s", path)
            yield path
        finally:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to remove script file %s: %s", path, e)

    async def _execute(self, script_path: Path) -> ExecutionResult:
        logger.debug("Executing %s on %s", self._executable, script_path)
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                str(script_path),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            message = f"Failed to execute {self._executable}: {e}"
            logger.error(message)
            return ExecutionResult.launch_failure(message)

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            await _kill(process)
            logger.error("Interpreter (pid=%d) timed out after %ss", process.pid, self._timeout)
            raise ExecutionTimeoutError(self._timeout) from None
        except asyncio.CancelledError:
            await _kill(process)
            raise

        result = ExecutionResult(
            standard_output=stdout.decode("utf-8", errors="replace"),
            standard_error=stderr.decode("utf-8", errors="replace"),
            return_code=process.returncode,
        )
        logger.debug(
            "Interpreter exited with %s, stdout: %s", result.return_code, result.standard_output
        )
        if result.standard_error:
            logger.warning("Interpreter stderr: %s", result.standard_error)
        return result


async def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill a running interpreter and reap it."""
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()
