"""Credential store: account creation and lookup."""
import logging
import re

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.errors import Conflict, InvalidInput, NotFound
from tracker.core.security import BCRYPT_MAX_BYTES, hash_password
from tracker.models.user import User

logger = logging.getLogger("tracker.accounts")

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USERNAME_MAX_LEN = 64
DEFAULT_MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str | None) -> str:
    return (username or "").strip()


async def create_account(
    db: AsyncSession,
    username: str | None,
    email: str | None,
    raw_password: str | None,
    *,
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
) -> User:
    """Validate and persist a new account; the password is stored only as a bcrypt hash."""
    username_norm = normalize_username(username)
    email_norm = normalize_email(email)
    pwd = raw_password or ""

    if not username_norm:
        raise InvalidInput("Username is required")
    if "@" in username_norm:
        raise InvalidInput("Username must not contain '@'")
    if len(username_norm) > USERNAME_MAX_LEN:
        raise InvalidInput(f"Username must be at most {USERNAME_MAX_LEN} characters")
    if not email_norm or not EMAIL_RE.match(email_norm):
        raise InvalidInput("A valid email is required")
    if len(pwd) < min_password_length:
        raise InvalidInput(f"Password must be at least {min_password_length} characters")
    if len(pwd.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidInput("Password is too long")

    result = await db.execute(
        select(User).where(or_(User.username == username_norm, User.email == email_norm))
    )
    existing = result.scalars().first()
    if existing is not None:
        if existing.username == username_norm:
            raise Conflict("Username already registered")
        raise Conflict("Email already registered")

    hashed = await run_in_threadpool(hash_password, pwd)
    user = User(username=username_norm, email=email_norm, hashed_password=hashed)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup with the same name or email
        await db.rollback()
        raise Conflict("Username or email already registered") from None
    await db.refresh(user)

    logger.info("Account created: id=%s username=%s", user.id, user.username)
    return user


async def find_by_credential_key(db: AsyncSession, username_or_email: str | None) -> User:
    """Look an account up by email when the key contains '@', by username otherwise."""
    key = (username_or_email or "").strip()
    if not key:
        raise NotFound("Account not found")

    result = await db.execute(
        select(User).where(User.email == normalize_email(key) if "@" in key else User.username == key)
    )
    user = result.scalars().first()
    if user is None:
        raise NotFound("Account not found")
    return user


async def get_account(db: AsyncSession, account_id: int) -> User:
    result = await db.execute(select(User).where(User.id == account_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user
