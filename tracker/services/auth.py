"""Authenticator: signup, login and stateless bearer-token verification."""
import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.config import Settings
from tracker.core.errors import InvalidCredentials, NotFound, Unauthorized
from tracker.core.security import (
    TOKEN_TYPE,
    create_access_token,
    decode_access_token,
    dummy_verify,
    verify_password,
)
from tracker.services.accounts import DEFAULT_MIN_PASSWORD_LENGTH, create_account, find_by_credential_key

logger = logging.getLogger("tracker.auth")


class Authenticator:
    """Issues and verifies identity tokens with one process-wide secret.

    Tokens are JWTs carrying the account id (``sub`` and ``id``), ``iat`` and
    ``exp``. Nothing is stored server-side, so a token stays valid until it
    expires.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        expire_minutes: int = 120,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.min_password_length = min_password_length

    @classmethod
    def from_settings(cls, settings: Settings) -> "Authenticator":
        if not settings.secret_key:
            raise RuntimeError("SECRET_KEY is not configured")
        return cls(
            settings.secret_key,
            algorithm=settings.algorithm,
            expire_minutes=settings.access_token_expire_minutes,
            min_password_length=settings.min_password_length,
        )

    def issue_token(self, account_id: int) -> str:
        return create_access_token(
            account_id,
            secret_key=self._secret_key,
            algorithm=self.algorithm,
            expires_minutes=self.expire_minutes,
            extra={"id": account_id},
        )

    def verify(self, token: str | None) -> int:
        """Return the account id the token was issued for, or raise Unauthorized."""
        if not token:
            raise Unauthorized("Missing token")
        claims = decode_access_token(token, secret_key=self._secret_key, algorithm=self.algorithm)
        if claims is None:
            raise Unauthorized("Invalid or expired token")
        if claims.get("type") != TOKEN_TYPE:
            raise Unauthorized("Invalid token")
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise Unauthorized("Invalid token") from None

    async def signup(self, db: AsyncSession, username: str | None, email: str | None, raw_password: str | None) -> str:
        user = await create_account(
            db, username, email, raw_password, min_password_length=self.min_password_length
        )
        return self.issue_token(user.id)

    async def login(self, db: AsyncSession, username_or_email: str | None, raw_password: str | None) -> str:
        """Same error for an unknown account and a wrong password."""
        try:
            user = await find_by_credential_key(db, username_or_email)
        except NotFound:
            await run_in_threadpool(dummy_verify)
            logger.info("Login failed: unknown account")
            raise InvalidCredentials() from None

        if not await run_in_threadpool(verify_password, raw_password or "", user.hashed_password):
            logger.info("Login failed: bad password for id=%s", user.id)
            raise InvalidCredentials()

        logger.info("Login: id=%s", user.id)
        return self.issue_token(user.id)
