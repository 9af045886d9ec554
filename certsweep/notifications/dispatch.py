from __future__ import annotations
import logging

from ..config import Config
from ..models import RunResult
from .hook import HookError, run_hook
from .slack import build_attachments, send_slack


def summary_line(result: RunResult) -> str:
    if result.error is not None:
        return f"Scan aborted: {result.error}"
    if result.failures:
        return f"Failed with {len(result.failures)} error(s)"
    return f"Finished. Validated {len(result.validated_groups)} certificate(s)"


def finish(result: RunResult, cfg: Config, logger: logging.Logger) -> int:
    """
    Run the post-scan hook, then deliver Slack notifications.
    Returns the process exit code.
    """
    code = result.exit_code
    text = summary_line(result)
    if code:
        logger.error(text)
    else:
        logger.info(text)

    if cfg.hook:
        try:
            run_hook(cfg.hook, code, result.failed_domains(), logger)
        except HookError as e:
            logger.error(str(e))
            return 1

    if cfg.slack_webhook_url:
        ok, detail = send_slack(cfg.slack_webhook_url, text, build_attachments(result.notifications))
        if ok:
            logger.info(f"Slack notify: {detail}")
        else:
            logger.warning(f"Slack notify failed: {detail}")

    return code
