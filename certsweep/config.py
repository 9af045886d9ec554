from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
import os
import re
import yaml

from .models import GroupMode

DEFAULT_CONFIG_PATHS = [
    Path.cwd() / "certsweep.yaml",
    Path.home() / ".config" / "certsweep" / "config.yaml",
]

# (certfile, keyfile) filename patterns per grouping mode
DEFAULT_PATTERNS = {
    GroupMode.DIRECTORY: (r"^(fullchain|cert)\.pem$", r"^privkey\.pem$"),
    GroupMode.BASENAME: (r"^(.*)\.(cer|crt|bundle)$", r"^(.*)\.(key|priv|privkey)$"),
}

DEFAULT_EXPIRATION_DAYS = 30
INSPECTORS = ("openssl", "native")


def _value(data: dict, key: str, default):
    value = data.get(key)
    return default if value is None else value


@dataclass
class Config:
    scan_paths: list[str] = field(default_factory=lambda: ["."])
    recursive: bool = False
    group_by: GroupMode | None = None
    certfile: str | None = None
    keyfile: str | None = None
    expiration_days: int = DEFAULT_EXPIRATION_DAYS
    slack_webhook_url: str | None = None
    hook: str | None = None
    inspector: str = "openssl"
    openssl_bin: str = "openssl"
    inspect_timeout: float | None = None
    workers: int = 8

    @property
    def mode(self) -> GroupMode:
        if self.group_by is not None:
            return GroupMode(self.group_by)
        return GroupMode.DIRECTORY if self.recursive else GroupMode.BASENAME

    def cert_pattern(self) -> re.Pattern:
        return re.compile(self.certfile or DEFAULT_PATTERNS[self.mode][0])

    def key_pattern(self) -> re.Pattern:
        return re.compile(self.keyfile or DEFAULT_PATTERNS[self.mode][1])

    def override(self, **changes) -> "Config":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @staticmethod
    def load(path: str | None = None) -> "Config":
        data = {}
        candidates = [Path(path)] if path else DEFAULT_CONFIG_PATHS
        for p in candidates:
            if p.exists():
                with open(p, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                break

        scan_paths = data.get("scan_paths") or ["."]
        if isinstance(scan_paths, str):
            scan_paths = [scan_paths]
        group_by = data.get("group_by")
        inspector = data.get("inspector") or "openssl"
        if inspector not in INSPECTORS:
            raise ValueError(f"Unknown inspector {inspector!r}, expected one of {', '.join(INSPECTORS)}")
        timeout = data.get("inspect_timeout")
        workers = int(_value(data, "workers", 8))
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        return Config(
            scan_paths=[str(p) for p in scan_paths],
            recursive=bool(data.get("recursive", False)),
            group_by=GroupMode(group_by) if group_by else None,
            certfile=data.get("certfile"),
            keyfile=data.get("keyfile"),
            expiration_days=int(os.getenv("CERTSWEEP_EXPIRATION_DAYS", _value(data, "expiration_days", DEFAULT_EXPIRATION_DAYS))),
            slack_webhook_url=os.getenv("CERTSWEEP_SLACK_WEBHOOK_URL", data.get("slack_webhook_url")),
            hook=os.getenv("CERTSWEEP_HOOK", data.get("hook")),
            inspector=inspector,
            openssl_bin=os.getenv("CERTSWEEP_OPENSSL", data.get("openssl_bin") or "openssl"),
            inspect_timeout=float(timeout) if timeout is not None else None,
            workers=workers,
        )
