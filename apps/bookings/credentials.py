"""
Per-booking entry secret.

4 random bytes, hex-encoded and upper-cased: 8 characters. Secrets are not
unique across bookings; they are always checked together with a booking id.
"""
import secrets

SECRET_BYTES = 4
SECRET_LENGTH = SECRET_BYTES * 2


def generate_secret() -> str:
    return secrets.token_bytes(SECRET_BYTES).hex().upper()


def normalize_secret(raw) -> str:
    """Case-fold a presented secret so it compares against the stored form."""
    return (raw or '').strip().upper()
