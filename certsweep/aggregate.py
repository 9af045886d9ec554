from __future__ import annotations
import threading
from typing import Iterable

from .models import Failure, Group, NotificationField, RunResult, Severity, ValidationOutcome


class Aggregator:
    """Collects validated groups into a RunResult. Safe to call from several worker threads."""

    def __init__(self, result: RunResult | None = None):
        self.result = result if result is not None else RunResult()
        self._lock = threading.Lock()

    def queue_notification(self, severity: Severity, title: str, value: str) -> None:
        with self._lock:
            self.result.notifications.setdefault(severity, []).append(
                NotificationField(title=title, value=value, severity=severity)
            )

    def aggregate(self, group: Group, outcomes: Iterable[ValidationOutcome]) -> None:
        if not group.files:
            return
        failed = [o for o in outcomes if not o.passed]
        with self._lock:
            self.result.validated_groups.append(group)
            for outcome in failed:
                self.result.failures.append(Failure(group=group, outcome=outcome))
                self.result.notifications.setdefault(outcome.severity, []).append(
                    NotificationField(
                        title=group.title,
                        value=outcome.message.replace(" - ", "\n"),
                        severity=outcome.severity,
                    )
                )

    def finalize(self) -> RunResult:
        result = self.result
        if not result.failures and not result.error and result.validated_groups:
            self.queue_notification(
                Severity.GOOD,
                "SSL certificates look good!",
                f"Validated {len(result.validated_groups)} certificate(s) - Processed {result.total_files} file(s)",
            )
        return result
