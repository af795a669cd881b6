"""Password hashing with the ``bcrypt`` library (>=4.0).

Passwords are never stored or compared in plain text.
"""

import bcrypt


def hash_password(plain: str) -> str:
    """Return the bcrypt hash of *plain* as a utf-8 string."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """True when *plain* matches the stored bcrypt *hashed* value."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash (e.g. legacy plaintext row)
        return False
