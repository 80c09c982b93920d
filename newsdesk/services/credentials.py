"""Password hashing and stored-credential verification for admin accounts.

Stored credentials come in three shapes: PBKDF2-SHA256 digests written by
``hash_password``, bcrypt digests (``$2a$``, ``$2b$``, ``$2y$``) carried over
from the previous deployment, and legacy plaintext values from accounts
created before hashing was introduced. ``parse_stored_credential`` is the
only place that inspects the stored string; everything else works on the
tagged values.
Once ``newsdesk.cli.admin_accounts hash-passwords`` has been run everywhere,
``PlaintextCredential`` and its branch in ``verify_credential`` can go.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import os
from dataclasses import dataclass
from typing import Union

import bcrypt

logger = logging.getLogger(__name__)

PBKDF2_SHA256_PREFIX = "pbkdf2_sha256$"
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
HASH_PREFIXES = (PBKDF2_SHA256_PREFIX, *BCRYPT_PREFIXES)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class PlaintextCredential:
    """Legacy unhashed password as stored in the ``admin`` table."""

    value: str

    def __repr__(self) -> str:
        return "PlaintextCredential(value=***)"


@dataclass(frozen=True)
class HashedCredential:
    """PBKDF2 digest from ``hash_password`` or a bcrypt digest."""

    digest: str


Credential = Union[PlaintextCredential, HashedCredential]


def _b64decode(raw: str) -> bytes:
    padding = "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(raw + padding)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def hash_password(password: str, *, iterations: int = 210_000) -> str:
    """Return a PBKDF2-SHA256 password hash string.

    Format: "pbkdf2_sha256$<iterations>$<salt_b64>$<digest_b64>"
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return f"pbkdf2_sha256${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password_hash(password: str, encoded_hash: str) -> bool:
    """Check ``password`` against a digest produced by ``hash_password``."""
    try:
        algorithm, iterations_raw, salt_b64, digest_b64 = encoded_hash.split("$", 3)
    except ValueError:
        return False

    if algorithm != "pbkdf2_sha256":
        return False

    try:
        iterations = int(iterations_raw)
    except ValueError:
        return False

    try:
        salt = _b64decode(salt_b64)
        expected = _b64decode(digest_b64)
    except Exception:
        return False

    actual = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(actual, expected)


def verify_bcrypt_hash(password: str, encoded_hash: str) -> bool:
    """Check ``password`` against a bcrypt digest."""
    secret = password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
    return bcrypt.checkpw(secret, encoded_hash.encode("utf-8"))


def parse_stored_credential(raw: str) -> Credential:
    """Tag a stored password column value as hashed or plaintext."""
    if raw.startswith(HASH_PREFIXES):
        return HashedCredential(digest=raw)
    return PlaintextCredential(value=raw)


def verify_credential(password: str, credential: Credential) -> bool:
    """Return True when ``password`` matches ``credential``.

    Failures inside the hash comparison count as a mismatch and are logged,
    never raised.
    """
    if isinstance(credential, HashedCredential):
        try:
            if credential.digest.startswith(BCRYPT_PREFIXES):
                return verify_bcrypt_hash(password, credential.digest)
            return verify_password_hash(password, credential.digest)
        except Exception:
            logger.exception("Password hash comparison failed")
            return False

    return hmac.compare_digest(
        password.encode("utf-8"),
        credential.value.encode("utf-8"),
    )
