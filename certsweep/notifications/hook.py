from __future__ import annotations
import logging
import subprocess

from ..discovery.filesystem import find_stats
from ..errors import CertsweepError, FatalIOError


class HookError(CertsweepError):
    pass


def run_hook(hook: str, code: int, failed_domains: str, logger: logging.Logger) -> None:
    """
    Execute the post-run hook as `<hook> <code> <failed_domains>`.
    Raises HookError if the hook cannot be resolved, started, or exits non-zero.
    """
    try:
        st = find_stats(hook)
    except FatalIOError as e:
        raise HookError(f"Hook {hook} not found: {e.reason}") from e

    logger.debug(f"Executing hook: {st.resolved_path}")
    try:
        proc = subprocess.run([st.resolved_path, str(code), failed_domains], capture_output=True, text=True)
    except OSError as e:
        raise HookError(f"Hook {hook} could not be executed: {e}") from e

    if proc.stdout:
        logger.info(proc.stdout.rstrip())
    if proc.stderr:
        logger.warning(proc.stderr.rstrip())
    if proc.returncode != 0:
        raise HookError(f"Hook {hook} exited with status {proc.returncode}")
