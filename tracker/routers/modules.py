"""Module progress routes: GET/PUT one progress document per module.

Every module gets the same two endpoints, built by :func:`build_module_router`;
only the module key and the document schema differ.
"""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.errors import Unauthorized
from tracker.db.session import get_db
from tracker.routers.auth import require_account_id
from tracker.schemas.progress import MODULE_ORDER, MODULE_SCHEMAS, ModuleKey
from tracker.services.progress import get_module_progress, set_module_progress


def _ensure_owner(user_id: int, account_id: int) -> None:
    if user_id != account_id:
        raise Unauthorized("Token does not belong to this user")


def build_module_router(module: ModuleKey) -> APIRouter:
    schema = MODULE_SCHEMAS[module]
    router = APIRouter(prefix=f"/{module.value}", tags=[module.value])

    @router.get("/{user_id}", response_model=schema, name=f"{module.value}_get_progress")
    async def get_progress(
        user_id: int,
        db: Annotated[AsyncSession, Depends(get_db)],
        account_id: Annotated[int, Depends(require_account_id)],
    ):
        """Saved progress, or the module default before the first save."""
        _ensure_owner(user_id, account_id)
        return await get_module_progress(db, user_id, module)

    @router.put("/update/{user_id}", name=f"{module.value}_update_progress")
    async def update_progress(
        user_id: int,
        document: schema,
        db: Annotated[AsyncSession, Depends(get_db)],
        account_id: Annotated[int, Depends(require_account_id)],
    ):
        """Replace the whole document."""
        _ensure_owner(user_id, account_id)
        stored = await set_module_progress(db, user_id, module, document)
        return {"message": "Progress updated", module.value: stored.to_wire()}

    return router


routers = [build_module_router(module) for module in MODULE_ORDER]
