"""
Password hashing for director accounts (bcrypt).
"""

import bcrypt

from core.constants import PASSWORD_HASH_ROUNDS

# bcrypt only looks at the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=PASSWORD_HASH_ROUNDS)
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


__all__ = ["MAX_PASSWORD_BYTES", "hash_password", "verify_password"]
