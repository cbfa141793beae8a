"""
Password hashing helpers for the user credential store.
"""

from werkzeug.security import check_password_hash, generate_password_hash


def get_password_hash(password: str) -> str:
    """Hash a plaintext password for storage."""
    return generate_password_hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against its stored hash."""
    if not hashed_password:
        return False
    return check_password_hash(hashed_password, plain_password)
