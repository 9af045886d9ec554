from __future__ import annotations
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Callable, Optional

from .discovery.filesystem import classify
from .errors import InspectionError
from .inspection import Inspector
from .log import get_logger
from .models import FileKind, Group, GroupState, InspectionResult, Severity, ValidationOutcome
from .util.timebox import days_left, utcnow

MATCH_ALL = re.compile("")


class Validator:
    """
    Validates one group at a time.

    The files of a group are inspected concurrently; the checks are then
    applied in discovery order, so the first file to report a modulus or a
    domain list becomes the group's baseline. Every file is checked even after
    an earlier one failed.
    """

    def __init__(
        self,
        inspector: Inspector,
        key_pattern: re.Pattern,
        expiration_days: int = 30,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = utcnow,
        workers: int = 8,
    ):
        self.inspector = inspector
        self.key_pattern = key_pattern
        self.expiration_days = expiration_days
        self.log = logger or get_logger()
        self.clock = clock
        self.workers = max(1, workers)

    def kind_of(self, path: str) -> FileKind:
        return classify(os.path.basename(path), MATCH_ALL, self.key_pattern)

    def _inspect(self, path: str) -> tuple[FileKind, Optional[InspectionResult], Optional[InspectionError]]:
        kind = self.kind_of(path)
        try:
            return kind, self.inspector.inspect(path, kind), None
        except InspectionError as e:
            return kind, None, e
        except Exception as e:
            self.log.exception(f"Inspector crashed on {path}")
            return kind, None, InspectionError(path, f"{type(e).__name__}: {e}")

    def validate(self, group: Group) -> list[ValidationOutcome]:
        if not group.files:
            group.finish(valid=True)
            return []

        self.log.debug(f"Validating group: {group.key}")
        group.state = GroupState.INSPECTING
        now = self.clock()
        with ThreadPoolExecutor(max_workers=min(self.workers, len(group.files)), thread_name_prefix="inspect") as pool:
            inspected = list(pool.map(self._inspect, group.files))

        outcomes: list[ValidationOutcome] = []
        for path, (kind, result, error) in zip(group.files, inspected):
            outcomes.extend(self.check_file(group, path, kind, result, error, now))

        valid = all(o.passed for o in outcomes)
        group.finish(valid)
        if valid:
            self.log.info(f"Validated: {group.title} ({group.key})")
        return outcomes

    def check_file(
        self,
        group: Group,
        path: str,
        kind: FileKind,
        result: Optional[InspectionResult],
        error: Optional[InspectionError],
        now: datetime,
    ) -> list[ValidationOutcome]:
        if error is not None:
            return [self._fail(Severity.DANGER, path, f"command failed: {error.reason}")]

        found: list[ValidationOutcome] = []

        if kind is FileKind.CERT and not result.has_dates:
            found.append(self._fail(Severity.DANGER, path, "unable to obtain dates"))

        if result.domains:
            baseline = group.adopt_domains(result.domains)
            expected, actual = ",".join(sorted(baseline)), ",".join(sorted(result.domains))
            if expected != actual:
                found.append(self._fail(Severity.DANGER, path, f"domain mismatch: [{expected}] != [{actual}]"))

        if result.has_dates:
            expiry = self.check_expiry(path, result.not_before, result.not_after, now)
            if expiry is not None:
                found.append(expiry)

        if result.modulus is None:
            found.append(self._fail(Severity.DANGER, path, "unable to obtain modulus"))
        else:
            baseline = group.adopt_modulus(result.modulus)
            if baseline != result.modulus:
                self.log.debug(f"Group MOD = \"{baseline}\"")
                self.log.debug(f" File MOD = \"{result.modulus}\"")
                found.append(self._fail(Severity.DANGER, path, "modulus mismatch"))

        if not found:
            self.log.debug(f"Validated file: {path}")
            return [ValidationOutcome(Severity.INFO, f"{path} - ok", path)]
        return found

    def check_expiry(self, path: str, not_before: datetime, not_after: datetime, now: datetime) -> Optional[ValidationOutcome]:
        """Return the first matching validity problem, or None when the window is fine."""
        window = timedelta(days=self.expiration_days)
        if now < not_before:
            return self._fail(Severity.DANGER, path, f"not valid before {not_before.isoformat()}")
        if now >= not_after:
            return self._fail(Severity.DANGER, path, f"expired on {not_after.isoformat()}")
        if now >= not_after - window:
            return self._fail(
                Severity.WARNING,
                path,
                f"expiring soon. Expires {not_after.isoformat()} "
                f"({days_left(not_after, now)} day(s) left, threshold {self.expiration_days})",
            )
        return None

    def _fail(self, severity: Severity, path: str, detail: str) -> ValidationOutcome:
        message = f"{path} - {detail}"
        if severity is Severity.WARNING:
            self.log.warning(message)
        else:
            self.log.error(message)
        return ValidationOutcome(severity, message, path)
