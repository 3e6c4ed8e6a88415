"""Auth routes: signup, login, profile. Stateless bearer-token auth."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.errors import InvalidInput
from tracker.db.session import get_db
from tracker.schemas.auth import LoginSchema, ProfileOutSchema, SignupSchema, TokenSchema
from tracker.services.accounts import get_account
from tracker.services.auth import Authenticator
from tracker.services.progress import get_all_progress

router = APIRouter(tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def require_account_id(
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> int:
    """Account id from the `Authorization: Bearer` header; Unauthorized otherwise."""
    token = credentials.credentials if credentials else None
    return authenticator.verify(token)


@router.post("/signup", response_model=TokenSchema, status_code=201)
async def signup(
    body: SignupSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
):
    """Create an account and log it in."""
    token = await authenticator.signup(db, body.username, body.email, body.password)
    return TokenSchema(token=token)


@router.post("/login", response_model=TokenSchema)
async def login(
    body: LoginSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
):
    """Exchange username (or email) and password for a token."""
    if not body.credential_key:
        raise InvalidInput("Username or email is required")
    token = await authenticator.login(db, body.credential_key, body.password)
    return TokenSchema(token=token)


@router.get("/profile", response_model=ProfileOutSchema)
async def profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    account_id: Annotated[int, Depends(require_account_id)],
):
    """Current account with every module's progress; never the password hash."""
    user = await get_account(db, account_id)
    progress = await get_all_progress(db, account_id)
    return ProfileOutSchema(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        progress={module.value: document.to_wire() for module, document in progress.items()},
    )
