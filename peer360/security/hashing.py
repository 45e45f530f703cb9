"""SHA-256 hashing for lookup-by-equality fields (emails, access codes)."""

import hashlib
import hmac


def hash_text(text: str) -> str:
    """Unsalted SHA-256 hex digest, so equal inputs can be found by hash."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_email(email: str) -> str:
    """Hash email case-insensitively (trimmed, lowercased)."""
    return hash_text(email.strip().lower())


def hash_access_code(code: str) -> str:
    """Hash the raw 6-digit access code."""
    return hash_text(code)


def compare_hashes(a: str, b: str) -> bool:
    """Constant-time hash comparison."""
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
