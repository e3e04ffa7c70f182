# =============================================================================
# Passwords
# =============================================================================
#
# Strength policy (checked at registration only) and PBKDF2 hashing.
#
# =============================================================================

import hashlib
import re
import secrets

MIN_PASSWORD_LENGTH = 6

_PASSWORD_RULES = (
    re.compile(r"[A-Za-z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[a-z]"),
    re.compile(r"[^A-Za-z0-9]"),
)


def is_password_allowed(password: str) -> bool:
    """
    True if the password is at least 6 characters long and contains a
    letter, a digit, an uppercase letter, a lowercase letter and a
    character outside [A-Za-z0-9].
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False
    return all(rule.search(password) for rule in _PASSWORD_RULES)


def hash_password(password: str, iterations: int = 100_000) -> str:
    """
    Hash a password using PBKDF2-SHA256.
    
    Returns: iterations:salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=iterations,
    )
    return f"{iterations}:{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        iterations, salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=int(iterations),
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False
