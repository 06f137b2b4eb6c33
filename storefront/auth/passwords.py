"""
bcrypt password hashing helpers
"""
import bcrypt
import logging

logger = logging.getLogger(__name__)

SALT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a plain password; returns the bcrypt hash as text"""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=SALT_ROUNDS))
    return hashed.decode("utf-8")


def compare_password(password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash"""
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        # Stored value is not a bcrypt hash
        logger.warning(f"Password comparison failed: {e}")
        return False
