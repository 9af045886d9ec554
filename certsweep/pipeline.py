from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Iterable

from .aggregate import Aggregator
from .config import Config
from .discovery.filesystem import Walker
from .discovery.grouping import build_groups
from .inspection import Inspector, make_inspector
from .log import get_logger
from .models import RunResult
from .util.timebox import utcnow
from .validation import Validator


class Auditor:
    """Runs one scan: walk the roots, group the candidates, validate every group, aggregate."""

    def __init__(
        self,
        cfg: Config,
        logger: logging.Logger | None = None,
        inspector: Inspector | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.cfg = cfg
        self.log = logger or get_logger()
        key_pattern = cfg.key_pattern()
        self.walker = Walker(
            cert_pattern=cfg.cert_pattern(),
            key_pattern=key_pattern,
            recursive=cfg.recursive,
            logger=self.log,
            workers=cfg.workers,
        )
        self.validator = Validator(
            inspector=inspector or make_inspector(cfg, self.log),
            key_pattern=key_pattern,
            expiration_days=cfg.expiration_days,
            logger=self.log,
            clock=clock,
            workers=cfg.workers,
        )

    def run(self, paths: Iterable[str] | None = None) -> RunResult:
        roots = list(paths) if paths else list(self.cfg.scan_paths)
        candidates, error = self.walker.walk_many(roots)
        if error is not None:
            return RunResult(error=error)

        groups = build_groups(candidates, self.cfg.mode)
        self.log.debug(f"Found {len(candidates)} file(s) in {len(groups)} group(s)")

        aggregator = Aggregator()
        with ThreadPoolExecutor(max_workers=self.cfg.workers, thread_name_prefix="group") as pool:
            for group, outcomes in zip(groups, pool.map(self.validator.validate, groups)):
                aggregator.aggregate(group, outcomes)
        return aggregator.finalize()
