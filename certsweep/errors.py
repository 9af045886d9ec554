from __future__ import annotations


class CertsweepError(Exception):
    """Base class for certsweep errors."""


class FatalIOError(CertsweepError):
    """A directory could not be read or a path could not be resolved. Aborts the run."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class InspectionError(CertsweepError):
    """The certificate inspector could not be invoked on a file."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(CertsweepError):
    def __init__(self, marker: str):
        super().__init__(f"marker not found: {marker}")
        self.marker = marker
