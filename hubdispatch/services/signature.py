"""HMAC signatures for GitHub webhook deliveries.

GitHub signs the raw request body with the hook secret and sends the hex
digest prefixed with the algorithm name, e.g. ``sha1=<hex>`` in
X-Hub-Signature and ``sha256=<hex>`` in X-Hub-Signature-256. SHA-1 is the
default for compatibility with existing hooks; SHA-256 is accepted as an
additional, stronger path.
"""

import hashlib
import hmac
from typing import Optional, Union

from hubdispatch.core.errors import MissingSignature, SignatureMismatch

ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}

Secret = Union[str, bytes]


def secret_bytes(secret: Optional[Secret]) -> bytes:
    if not secret:
        return b""
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)


def sign_payload(secret: Secret, body: bytes, algorithm: str = "sha1") -> str:
    """Return the signature header value GitHub would send for ``body``"""
    digest = hmac.new(
        secret_bytes(secret), body, ALGORITHMS[algorithm]
    ).hexdigest()
    return f"{algorithm}={digest}"


def verify_signature(
    secret: Optional[Secret],
    body: bytes,
    signature: Optional[str],
    algorithm: str = "sha1",
) -> None:
    """Check ``signature`` against the HMAC of ``body``.

    Does nothing when no secret is configured. Raises MissingSignature if
    a secret is set but no signature was presented, and SignatureMismatch
    if the digest does not match.
    """
    key = secret_bytes(secret)
    if not key:
        return

    if not signature:
        raise MissingSignature()

    prefix, sep, presented = signature.partition("=")
    expected = hmac.new(key, body, ALGORITHMS[algorithm]).hexdigest()

    # compare_digest runs in constant time for equal lengths and fails on
    # a length mismatch without inspecting content
    valid = hmac.compare_digest(presented.encode(), expected.encode())
    if not sep or prefix != algorithm or not valid:
        raise SignatureMismatch()
