"""One-time check-in codes, stored only as peppered SHA-256 hashes."""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets

from ..core.constants import CHECKIN_CODE_DIGITS

CODE_RE = re.compile(rf"^\d{{{CHECKIN_CODE_DIGITS}}}$")


def generate_code() -> str:
    return f"{secrets.randbelow(10 ** CHECKIN_CODE_DIGITS):0{CHECKIN_CODE_DIGITS}d}"


def is_valid_format(code: str) -> bool:
    return bool(CODE_RE.match(code or ""))


def hash_code(code: str, secret: str) -> str:
    return hashlib.sha256(f"{code}:{secret}".encode("utf-8")).hexdigest()


def legacy_hash_code(code: str, secret: str) -> str:
    # codes issued before the "code:secret" ordering
    return hashlib.sha256(f"{secret}:{code}".encode("utf-8")).hexdigest()


def verify_code(code: str, secret: str, stored_hash: str) -> bool:
    stored = (stored_hash or "").lower()
    return hmac.compare_digest(hash_code(code, secret), stored) or hmac.compare_digest(
        legacy_hash_code(code, secret), stored
    )
