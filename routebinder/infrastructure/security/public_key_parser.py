"""Public key parsing for device provisioning.

Parses a PEM-encoded SubjectPublicKeyInfo with the cryptography package and
reports the key algorithm. Malformed input is returned as a Failure rather
than raised.
"""

from dataclasses import dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from routebinder.core.result import Failure, Result, Success

PEM_BEGIN = "-----BEGIN PUBLIC KEY-----"


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedPublicKey:
    """Validated public key.

    Attributes:
        algorithm: "rsa" or "ecc".
        pem: Normalized PEM re-serialized from the parsed key.
    """

    algorithm: str
    pem: str


def parse_public_key(raw: str) -> Result[ParsedPublicKey, str]:
    """Parse and normalize a PEM public key.

    Args:
        raw: PEM text as posted by the client.

    Returns:
        Success with the parsed key, or Failure with a client-facing message.
    """
    text = raw.strip()
    if not text.startswith(PEM_BEGIN):
        return Failure(error="Key error: expected a PEM encoded public key")

    try:
        key = serialization.load_pem_public_key(text.encode("ascii"))
    except (ValueError, UnicodeEncodeError, UnsupportedAlgorithm) as e:
        return Failure(error=f"Key error: {e}")

    if isinstance(key, rsa.RSAPublicKey):
        algorithm = "rsa"
    elif isinstance(key, ec.EllipticCurvePublicKey):
        algorithm = "ecc"
    else:
        return Failure(error="Key error: unsupported key type")

    pem = key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return Success(value=ParsedPublicKey(algorithm=algorithm, pem=pem))
