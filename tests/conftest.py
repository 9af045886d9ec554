from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from certsweep.errors import InspectionError
from certsweep.models import InspectionResult

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


class FakeInspector:
    """Returns canned results keyed by file name; records every call."""

    def __init__(self, results: dict):
        self.results = results
        self.calls = []

    def inspect(self, path, kind):
        self.calls.append((Path(path).name, kind))
        found = self.results[Path(path).name]
        if isinstance(found, Exception):
            raise found
        return found


def cert_result(modulus="X", domains=("a.com", "*.a.com"), days_valid=90, days_old=30):
    return InspectionResult(
        modulus=modulus,
        domains=list(domains),
        not_before=NOW - timedelta(days=days_old),
        not_after=NOW + timedelta(days=days_valid),
    )


def key_result(modulus="X"):
    return InspectionResult(modulus=modulus)


def inspection_error(name="bad.pem"):
    return InspectionError(name, "unable to load certificate")


@pytest.fixture
def logger():
    return logging.getLogger("certsweep.tests")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("CERTSWEEP_SLACK_WEBHOOK_URL", "CERTSWEEP_HOOK", "CERTSWEEP_EXPIRATION_DAYS", "CERTSWEEP_OPENSSL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(scope="session")
def rsa_keys():
    return [rsa.generate_private_key(public_exponent=65537, key_size=2048) for _ in range(2)]


def key_pem(key) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


def cert_pem(key, domains=("example.com",), not_before=None, not_after=None) -> bytes:
    now = datetime.now(timezone.utc)
    not_before = not_before or now - timedelta(days=1)
    not_after = not_after or now + timedelta(days=90)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, domains[0] if domains else "certsweep-test")])
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
    )
    if domains:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(d) for d in domains]), critical=False
        )
    return builder.sign(key, hashes.SHA256()).public_bytes(serialization.Encoding.PEM)


def touch(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for n in names:
        (directory / n).write_text("placeholder\n")


SAN_OID = bytes.fromhex("0603551d11")
KEY_USAGE_OID = bytes.fromhex("0603551d0f")


def corrupt_san_der(pem: bytes) -> bytes:
    """DER certificate whose SAN extension is relabelled as keyUsage, so it no longer parses."""
    der = x509.load_pem_x509_certificate(pem).public_bytes(serialization.Encoding.DER)
    assert der.count(SAN_OID) == 1
    return der.replace(SAN_OID, KEY_USAGE_OID)
