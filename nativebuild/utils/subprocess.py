import logging
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Tuple

from nativebuild.errors import CancellationError, NativeBuildError

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.5
TERMINATE_GRACE_SECONDS = 10.0


class SubprocessError(NativeBuildError):
    exit_code = 13

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@dataclass(frozen=True)
class Execution:
    command: str
    args: Tuple[str, ...] = ()
    dir: Optional[Path] = None

    def command_line(self) -> list[str]:
        return [self.command, *self.args]


@dataclass(frozen=True)
class ExecutionResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class Executor(Protocol):
    def execute(
        self,
        execution: Execution,
        *,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> ExecutionResult:
        ...


class SubprocessExecutor:
    """Runs an Execution as a child process and waits for it.

    The wait is done in short slices so that a set ``cancel_event`` or an
    elapsed ``timeout`` terminates the child and raises CancellationError.
    A non-zero exit status raises SubprocessError with the captured output.
    """

    def __init__(
        self,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        terminate_grace: float = TERMINATE_GRACE_SECONDS,
    ) -> None:
        self._poll_interval = poll_interval
        self._terminate_grace = terminate_grace

    def execute(
        self,
        execution: Execution,
        *,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> ExecutionResult:
        command = execution.command_line()
        logger.debug("Executing: %s", " ".join(command))

        try:
            process = subprocess.Popen(
                command,
                cwd=str(execution.dir) if execution.dir else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as exc:
            raise SubprocessError(
                f"Command not found: {execution.command}"
            ) from exc
        except OSError as exc:
            raise SubprocessError(
                f"Failed to execute command: {' '.join(command)}"
            ) from exc

        elapsed = 0.0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                self._stop(process)
                raise CancellationError(
                    f"Cancelled while running: {execution.command}"
                )
            if timeout is not None and elapsed >= timeout:
                self._stop(process)
                raise CancellationError(
                    f"Timed out after {timeout} seconds while running: {execution.command}"
                )

            try:
                stdout, stderr = process.communicate(timeout=self._poll_interval)
                break
            except subprocess.TimeoutExpired:
                elapsed += self._poll_interval

        result = ExecutionResult(
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )

        if result.returncode != 0:
            raise SubprocessError(
                _format_error(command, result),
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return result

    def _stop(self, process: subprocess.Popen) -> None:
        process.terminate()
        try:
            process.communicate(timeout=self._terminate_grace)
        except subprocess.TimeoutExpired:
            logger.warning("Process %s ignored SIGTERM, killing", process.pid)
            process.kill()
            process.communicate()

def _format_error(
    command: list[str],
    result: ExecutionResult,
) -> str:
    message = [
        f"Command failed: {' '.join(command)}",
        f"Exit code: {result.returncode}",
    ]

    if result.stdout:
        message.append(f"stdout:\n{result.stdout.strip()}")

    if result.stderr:
        message.append(f"stderr:\n{result.stderr.strip()}")

    return "\n".join(message)
