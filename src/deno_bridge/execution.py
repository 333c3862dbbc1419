"""Subprocess execution of the resolved binary."""
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence, Set, TextIO, Union

from deno_bridge.errors import BinaryExecutionError
from deno_bridge.logging import get_logger

logger = get_logger(__name__)

# Forwarders of detached processes, kept alive until their stream closes
_FORWARDERS: Set[asyncio.Task] = set()


async def forward_stream(
    stream: asyncio.StreamReader, sink: Optional[TextIO] = None
) -> None:
    """Copy a subprocess stream line by line to ``sink`` (stdout by default)."""
    sink = sink or sys.stdout
    while line := await stream.readline():
        sink.write(line.decode(errors="replace"))
        sink.flush()


async def run_binary(
    binary_path: Union[str, Path],
    args: Sequence[str],
    wait: bool = True,
) -> Optional[asyncio.subprocess.Process]:
    """Run a binary, forwarding its stderr to our stdout.

    With ``wait`` the call returns once the process exits and raises
    BinaryExecutionError on a non-zero exit code. Without it the live
    process is returned at once and the caller owns its lifecycle.
    """
    command = [str(binary_path), *(str(arg) for arg in args)]

    logger.debug({"event": "binary_exec", "command": command, "wait": wait})

    process = await asyncio.create_subprocess_exec(
        *command,
        stderr=asyncio.subprocess.PIPE,
    )
    forwarder = asyncio.create_task(forward_stream(process.stderr))

    if not wait:
        _FORWARDERS.add(forwarder)
        forwarder.add_done_callback(_FORWARDERS.discard)
        logger.debug({"event": "binary_detached", "command": command, "pid": process.pid})
        return process

    await forwarder
    returncode = await process.wait()

    logger.debug({"event": "binary_exit", "command": command, "returncode": returncode})

    if returncode != 0:
        raise BinaryExecutionError(command, returncode)

    return None
