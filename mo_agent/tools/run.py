import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class CommandTimeoutError(TimeoutError):
    """Raised when a subprocess outlives its timeout and is killed."""


async def run(
    cmd: str | list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """
    Runs a command in a subprocess and waits for it to finish.

    A string is run through the OS shell; a list is executed directly.

    Returns:
        (return code, stdout, stderr), both streams decoded as UTF-8.

    Raises:
        CommandTimeoutError: If the command is still running after `timeout` seconds.
    """
    if isinstance(cmd, str):
        process = await asyncio.create_subprocess_shell(
            cmd,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    else:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise CommandTimeoutError(f"Command timed out after {timeout} seconds: {cmd}") from None

    logger.debug("Command %r exited with %s", cmd, process.returncode)
    return process.returncode or 0, stdout.decode(errors="replace"), stderr.decode(errors="replace")
