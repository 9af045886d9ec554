from __future__ import annotations
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import FatalIOError


class Severity(str, Enum):
    INFO = "info"
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class FileKind(str, Enum):
    CERT = "cert"
    KEY = "key"


class GroupMode(str, Enum):
    """How candidate files are bundled together."""
    DIRECTORY = "directory"
    BASENAME = "basename"


class GroupState(str, Enum):
    SCANNING = "scanning"
    INSPECTING = "inspecting"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class FileStat:
    path: str
    resolved_path: str
    is_directory: bool


@dataclass(frozen=True)
class Candidate:
    path: str
    directory: str
    filename: str
    kind: FileKind


@dataclass(frozen=True)
class InspectionResult:
    modulus: Optional[str] = None
    domains: list[str] = field(default_factory=list)
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None

    @property
    def has_dates(self) -> bool:
        return self.not_before is not None and self.not_after is not None


@dataclass
class Group:
    """
    One certificate bundle. The modulus and domain baselines are set once by the
    first file that reports them; later files are compared against them.
    """
    key: str
    files: list[str] = field(default_factory=list)
    modulus: Optional[str] = None
    domains: Optional[list[str]] = None
    state: GroupState = field(default=GroupState.SCANNING, compare=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def frozen(self) -> bool:
        return self.state in (GroupState.VALID, GroupState.INVALID)

    def add_file(self, path: str) -> None:
        if self.state is not GroupState.SCANNING:
            raise RuntimeError(f"Group {self.key} is no longer accepting files")
        self.files.append(path)

    def adopt_modulus(self, modulus: str) -> str:
        """Record `modulus` as the baseline unless one exists. Returns the baseline."""
        with self._lock:
            self._check_open()
            if self.modulus is None:
                self.modulus = modulus
            return self.modulus

    def adopt_domains(self, domains: list[str]) -> list[str]:
        with self._lock:
            self._check_open()
            if self.domains is None:
                self.domains = list(domains)
            return self.domains

    def _check_open(self) -> None:
        if self.frozen:
            raise RuntimeError(f"Group {self.key} is frozen after validation")

    def finish(self, valid: bool) -> None:
        with self._lock:
            self.state = GroupState.VALID if valid else GroupState.INVALID

    @property
    def title(self) -> str:
        return ", ".join(self.domains) if self.domains else "Unknown"


@dataclass(frozen=True)
class ValidationOutcome:
    severity: Severity
    message: str
    source_file: str

    @property
    def passed(self) -> bool:
        return self.severity is Severity.INFO


@dataclass(frozen=True)
class Failure:
    group: Group
    outcome: ValidationOutcome


@dataclass(frozen=True)
class NotificationField:
    title: str
    value: str
    severity: Severity


@dataclass
class RunResult:
    validated_groups: list[Group] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    notifications: dict[Severity, list[NotificationField]] = field(default_factory=dict)
    error: Optional[FatalIOError] = None

    @property
    def total_files(self) -> int:
        return sum(len(g.files) for g in self.validated_groups)

    @property
    def exit_code(self) -> int:
        return 1 if self.failures or self.error else 0

    def failed_domains(self) -> str:
        """Comma-joined domains per failing group, joined with ';'."""
        seen: list[str] = []
        keys = set()
        for f in self.failures:
            if f.group.key in keys:
                continue
            keys.add(f.group.key)
            seen.append(",".join(f.group.domains or []))
        return ";".join(seen)
