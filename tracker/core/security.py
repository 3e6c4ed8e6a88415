"""Password hashing and JWT identity tokens."""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt hard limit: 72 bytes (UTF-8)
BCRYPT_MAX_BYTES = 72

TOKEN_TYPE = "access"


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the time of one hash check when there is no account to check against."""
    pwd_context.dummy_verify()


def create_access_token(
    subject: str | int,
    *,
    secret_key: str,
    algorithm: str,
    expires_minutes: int,
    extra: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes)
    to_encode = {"sub": str(subject), "iat": now, "exp": expire, "type": TOKEN_TYPE}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, *, secret_key: str, algorithm: str) -> dict | None:
    """Return the verified claims, or None if the token is malformed, expired or forged."""
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
