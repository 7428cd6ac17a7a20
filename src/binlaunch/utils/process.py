"""Child process delegation."""
import asyncio
import os
from pathlib import Path
from typing import Optional, Sequence

from binlaunch.logging import get_logger

logger = get_logger(__name__)


async def spawn_inherited(
    executable: Path, args: Sequence[str], cwd: Optional[Path] = None
) -> int:
    """Run an executable with the parent's stdio and return its exit code.

    Nothing is captured; the child reads and writes the same terminal. A
    cancelled wait terminates and reaps the child before re-raising.
    """
    cwd = cwd or Path(os.getcwd())
    logger.debug("process_spawn", executable=str(executable), args=list(args), cwd=str(cwd))

    process = await asyncio.create_subprocess_exec(str(executable), *args, cwd=cwd)

    try:
        return await process.wait()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.terminate()
            await process.wait()
        raise
