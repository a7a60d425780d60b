"""Process runner used for every ffmpeg/ffprobe call.

Anything matching ``ProcessRunner`` can be handed to ``Transcoder``, which lets
tests script exit codes and output without spawning real binaries.
"""

import logging
import subprocess
from typing import Callable

from speechsplit.errors import FFmpegInterruptedError

logger = logging.getLogger(__name__)

ProcessRunner = Callable[[list[str]], subprocess.CompletedProcess]


def run_process(cmd: list[str]) -> subprocess.CompletedProcess:
    """Run *cmd* to completion and capture its output as text.

    There is no timeout; a hung tool blocks until the caller interrupts it.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, capture_output=True, text=True)
    except KeyboardInterrupt as exc:
        # subprocess.run has already killed the child at this point
        raise FFmpegInterruptedError(f"{cmd[0]} was interrupted") from exc
