"""
Running external programs whose failure must not leave output behind.

"""
import pathlib
import subprocess
from typing import (
    Optional,
    Sequence,
    Union,
)
import logging
log = logging.getLogger(__name__)

from cpcgrid.errors import ExternalToolError


def remove_partial(output: Optional[Union[str, pathlib.Path]]) -> None:
    if output is None:
        return
    path = pathlib.Path(output)
    if path.exists():
        log.info(f"Remove partial output {str(path)!r}")
        path.unlink()


def run_external(
    command: Sequence[str],
    *,
    output: Optional[Union[str, pathlib.Path]] = None,
    description: str = "",
) -> subprocess.CompletedProcess:
    """
    Run a command to completion, blocking the caller.

    Args:
        command: Program and arguments.
        output: The file the command produces. It is deleted, if the command fails.
        description: What the command does, used in the error message.

    Raises:
        ExternalToolError: If the program cannot be started or exits with a non-zero status.

    """
    command = [str(part) for part in command]
    log.debug(f"Run {' '.join(command)}")
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as error:
        remove_partial(output)
        raise ExternalToolError(
            f"Could not run {command[0]!r}: {error}", command=command
        ) from error

    if result.returncode != 0:
        remove_partial(output)
        detail = (result.stderr or result.stdout or "").strip()
        message = f"{description or command[0]} failed with exit status {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise ExternalToolError(message, command=command, returncode=result.returncode)
    return result
