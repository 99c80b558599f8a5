"""Object identifier generation and validation for the ``objects`` table."""

from __future__ import annotations

import hashlib
import random
import re
import secrets
import threading
from collections.abc import Callable, Container
from typing import Final

from pbxgraph.constants import UID_LENGTH

UID_RANDOM_BITS: Final[int] = 32

_UID_RE: Final[re.Pattern[str]] = re.compile(rf"^[0-9A-F]{{{UID_LENGTH}}}$")
_SIGN_BIT: Final[int] = 1 << (UID_RANDOM_BITS - 1)

_RandBits = Callable[[int], int]

_SOURCE_LOCK = threading.Lock()
_SOURCE: random.Random | None = None

__all__ = [
    "UID_RANDOM_BITS",
    "generate_uid",
    "is_uid",
    "uid_from_random",
    "validate_uid",
]


def generate_uid(existing: Container[str], *, randbits: _RandBits | None = None) -> str:
    """Return a fresh 24-character uppercase hex UID absent from ``existing``.

    Candidates are drawn until one is not contained in ``existing``. The
    retry loop only guards against the rare hash-prefix collision.
    """
    provider = _random_source().getrandbits if randbits is None else randbits
    while True:
        candidate = uid_from_random(provider(UID_RANDOM_BITS))
        if candidate not in existing:
            return candidate


def uid_from_random(value: int) -> str:
    """Derive a UID from a 32-bit value via its signed decimal SHA-1 digest."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"random value must be an int, got {type(value).__name__}")
    if not 0 <= value < (1 << UID_RANDOM_BITS):
        raise ValueError(f"random value out of range: expected {UID_RANDOM_BITS} bits, got {value}")

    signed = value - (1 << UID_RANDOM_BITS) if value & _SIGN_BIT else value
    digest = hashlib.sha1(str(signed).encode("ascii"), usedforsecurity=False).hexdigest()
    return digest.upper()[:UID_LENGTH]


def validate_uid(uid: str) -> None:
    """Validate the canonical UID format and raise ``ValueError`` on failure."""
    if not isinstance(uid, str):
        raise ValueError(f"uid must be a string, got {type(uid).__name__}")
    if len(uid) != UID_LENGTH:
        raise ValueError(f"uid length must be {UID_LENGTH}, got {len(uid)}")
    if _UID_RE.fullmatch(uid) is None:
        raise ValueError(f"uid must be uppercase hexadecimal (got {uid!r})")


def is_uid(value: object) -> bool:
    return isinstance(value, str) and _UID_RE.fullmatch(value) is not None


def _random_source() -> random.Random:
    # Seeded once per process from the OS CSPRNG; never reseeded.
    global _SOURCE
    if _SOURCE is None:
        with _SOURCE_LOCK:
            if _SOURCE is None:
                _SOURCE = random.Random(secrets.token_bytes(32))
    return _SOURCE
