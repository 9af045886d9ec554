from __future__ import annotations
import logging
from typing import Protocol

from ..config import Config
from ..models import FileKind, InspectionResult


class Inspector(Protocol):
    def inspect(self, path: str, kind: FileKind) -> InspectionResult:
        """
        Raise InspectionError when the file cannot be inspected. The validator
        also records any other exception as a failed inspection of that file.
        """
        ...


def make_inspector(cfg: Config, logger: logging.Logger | None = None) -> Inspector:
    if cfg.inspector == "native":
        from .native import NativeInspector
        return NativeInspector()
    from .openssl import OpenSSLInspector
    return OpenSSLInspector(binary=cfg.openssl_bin, timeout=cfg.inspect_timeout, logger=logger)
