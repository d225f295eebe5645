"""Verification of the SignatureCEK request header."""

import base64
import binascii
import logging
import threading
from collections.abc import Mapping

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..errors import PublicKeyError, VerificationError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "SignatureCEK"

# Public key of the Clova platform
CLOVA_PUBLIC_KEY_PEM = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAwiMvQNKD/WQcX9KiWNMb
nSR+dJYTWL6TmqqwWFia69TyiobVIfGfxFSefxYyMTcFznoGCpg8aOCAkMxUH58N
0/UtWWvfq0U5FQN9McE3zP+rVL3Qul9fbC2mxvazxpv5KT7HEp780Yew777cVPUv
3+I73z2t0EHnkwMesmpUA/2Rp8fW8vZE4jfiTRm5vSVmW9F37GC5TEhPwaiIkIin
KCrH0rXbfe3jNWR7qKOvVDytcWgRHJqRUuWhwJuAnuuqLvqTyAawqEslhKZ5t+1Z
0GN8b2zMENSuixa1M9K0ZKUw3unzHpvgBlYmXRGPTSuq/EaGYWyckYz8CBq5Lz2Q
UwIDAQAB
-----END PUBLIC KEY-----
"""


def load_public_key(public_key_pem: str | bytes) -> rsa.RSAPublicKey:
    """Load an RSA public key in PEM format.

    Args:
        public_key_pem: SubjectPublicKeyInfo PEM

    Returns:
        RSA public key

    Raises:
        PublicKeyError: If the PEM is malformed or not an RSA key
    """
    data = public_key_pem.encode("utf-8") if isinstance(public_key_pem, str) else public_key_pem

    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise PublicKeyError(f"Invalid public key: {e}") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise PublicKeyError(f"Expected an RSA public key, got {type(key).__name__}")

    return key


def get_signature_header(headers: Mapping[str, str]) -> str | None:
    """Look up SignatureCEK regardless of header name case."""
    value = headers.get(SIGNATURE_HEADER)
    if value is not None:
        return value

    wanted = SIGNATURE_HEADER.lower()
    for name, candidate in headers.items():
        if name.lower() == wanted:
            return candidate
    return None


class SignatureVerifier:
    """Verifies RSA PKCS#1 v1.5 / SHA-256 signatures over raw request bodies.

    The public key is parsed once when the verifier is constructed and is
    never replaced, so one instance can be shared by concurrent requests.
    """

    def __init__(self, public_key_pem: str | bytes = CLOVA_PUBLIC_KEY_PEM) -> None:
        self._public_key = load_public_key(public_key_pem)

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._public_key

    def verify(self, body: bytes, signature: str | None) -> None:
        """
        Verify `signature` against the body exactly as received.

        Args:
            body: Raw request body, before any decoding
            signature: Base64 value of the SignatureCEK header

        Raises:
            VerificationError: On any failure, without saying which
        """
        if not signature:
            raise VerificationError()

        try:
            signature_bytes = base64.b64decode(signature, validate=True)
            self._public_key.verify(signature_bytes, body, padding.PKCS1v15(), hashes.SHA256())
        except (binascii.Error, ValueError, InvalidSignature) as e:
            raise VerificationError() from e

    def is_valid(self, body: bytes, signature: str | None) -> bool:
        try:
            self.verify(body, signature)
        except VerificationError:
            return False
        return True


_default_verifier: SignatureVerifier | None = None
_default_verifier_lock = threading.Lock()


def get_default_verifier() -> SignatureVerifier:
    """Get or create the verifier for the Clova platform key.

    The key is parsed at most once per process, even when first used from
    several threads at the same time.
    """
    global _default_verifier
    if _default_verifier is None:
        with _default_verifier_lock:
            if _default_verifier is None:
                logger.info("Loading Clova platform public key")
                _default_verifier = SignatureVerifier()
    return _default_verifier
