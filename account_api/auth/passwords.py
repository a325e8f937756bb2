from functools import lru_cache

from passlib.context import CryptContext


_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    return _pwd_context.verify(password, password_hash)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _pwd_context.hash("account-api-timing-equalizer")


def burn_verification() -> None:
    """Spend the same bcrypt work as a real check when there is nothing to check against."""
    _pwd_context.verify("not-the-password", _dummy_hash())
