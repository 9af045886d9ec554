"""
Inspector backed by the ``openssl`` command line tool.

Output grammar understood by the parsers below, one marker per line:

    Modulus=<hex>
    notBefore=<Mon DD HH:MM:SS YYYY GMT>
    notAfter=<Mon DD HH:MM:SS YYYY GMT>
    ... DNS:<name>, DNS:<name>, ...     (from the -text dump)

Each ``parse_*`` function raises ParseError when its marker is absent;
``parse_output`` turns those into absent fields of the result.
"""
from __future__ import annotations
import logging
import re
import subprocess

from ..errors import InspectionError, ParseError
from ..log import get_logger
from ..models import FileKind, InspectionResult
from ..util.timebox import parse_openssl_date

MODULUS_RE = re.compile(r"^Modulus=([0-9A-Fa-f]+)\s*$", re.MULTILINE)
DATE_RE = re.compile(r"^(notBefore|notAfter)=(.+?)\s*$", re.MULTILINE)
DNS_RE = re.compile(r"DNS:([^,\s]+)")

COMMANDS = {
    FileKind.CERT: ("x509", ["-noout", "-modulus", "-dates", "-text"]),
    FileKind.KEY: ("rsa", ["-noout", "-modulus"]),
}


def parse_modulus(text: str) -> str:
    m = MODULUS_RE.search(text)
    if not m:
        raise ParseError("Modulus")
    return m.group(1)


def parse_dates(text: str):
    found = dict(DATE_RE.findall(text))
    for marker in ("notBefore", "notAfter"):
        if marker not in found:
            raise ParseError(marker)
    try:
        return parse_openssl_date(found["notBefore"]), parse_openssl_date(found["notAfter"])
    except ValueError as e:
        raise ParseError("notBefore/notAfter") from e


def parse_domains(text: str) -> list[str]:
    domains: list[str] = []
    for name in DNS_RE.findall(text):
        if name not in domains:
            domains.append(name)
    return domains


def parse_output(text: str, kind: FileKind) -> InspectionResult:
    try:
        modulus = parse_modulus(text)
    except ParseError:
        modulus = None
    not_before = not_after = None
    domains: list[str] = []
    if kind is FileKind.CERT:
        try:
            not_before, not_after = parse_dates(text)
        except ParseError:
            pass
        domains = parse_domains(text)
    return InspectionResult(modulus=modulus, domains=domains, not_before=not_before, not_after=not_after)


class OpenSSLInspector:
    def __init__(self, binary: str = "openssl", timeout: float | None = None, logger: logging.Logger | None = None):
        self.binary = binary
        self.timeout = timeout
        self.log = logger or get_logger()

    def command(self, path: str, kind: FileKind) -> list[str]:
        sub, flags = COMMANDS[FileKind(kind)]
        return [self.binary, sub, *flags, "-in", path]

    def inspect(self, path: str, kind: FileKind) -> InspectionResult:
        cmd = self.command(path, kind)
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, errors="replace", timeout=self.timeout)
        except FileNotFoundError as e:
            raise InspectionError(path, f"{self.binary} not found") from e
        except subprocess.TimeoutExpired as e:
            raise InspectionError(path, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise InspectionError(path, str(e)) from e

        if proc.returncode != 0:
            detail = (proc.stderr or "").strip() or f"exit status {proc.returncode}"
            raise InspectionError(path, detail)
        if proc.stderr:
            self.log.warning(proc.stderr.strip())
        self.log.debug(proc.stdout)
        return parse_output(proc.stdout, FileKind(kind))
