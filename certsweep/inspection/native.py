from __future__ import annotations
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..errors import InspectionError
from ..models import FileKind, InspectionResult


def _modulus_hex(public_key) -> str | None:
    # same rendering as `openssl -modulus`
    if isinstance(public_key, rsa.RSAPublicKey):
        return format(public_key.public_numbers().n, "X")
    return None


def _load_cert(path: Path) -> x509.Certificate:
    data = path.read_bytes()
    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError:
        return x509.load_der_x509_certificate(data)


def _sans(cert: x509.Certificate) -> list[str]:
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    return [str(x) for x in ext.value.get_values_for_type(x509.DNSName)]


class NativeInspector:
    """In-process inspector using the cryptography package instead of the openssl binary."""

    def inspect(self, path: str, kind: FileKind) -> InspectionResult:
        p = Path(path)
        try:
            if FileKind(kind) is FileKind.KEY:
                key = serialization.load_pem_private_key(p.read_bytes(), password=None)
                return InspectionResult(modulus=_modulus_hex(key.public_key()))
            cert = _load_cert(p)
            # extensions and the public key are parsed lazily and can fail here too
            return InspectionResult(
                modulus=_modulus_hex(cert.public_key()),
                domains=_sans(cert),
                not_before=cert.not_valid_before_utc,
                not_after=cert.not_valid_after_utc,
            )
        except (OSError, ValueError, TypeError) as e:
            raise InspectionError(path, str(e)) from e
