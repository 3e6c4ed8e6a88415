"""Progress store: one whole-document slot per (account, module)."""
import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models.progress import ModuleProgress
from tracker.schemas.progress import (
    MODULE_ORDER,
    ModuleKey,
    ProgressDocument,
    default_document,
    module_key,
    parse_document,
    schema_for,
)
from tracker.services.accounts import get_account

logger = logging.getLogger("tracker.progress")


async def _load_row(db: AsyncSession, account_id: int, module: ModuleKey) -> ModuleProgress | None:
    result = await db.execute(
        select(ModuleProgress).where(
            ModuleProgress.user_id == account_id,
            ModuleProgress.module == module.value,
        )
    )
    return result.scalar_one_or_none()


def _decode(module: ModuleKey, row: ModuleProgress) -> ProgressDocument:
    # a stored document that no longer validates is a server fault, not bad input
    return schema_for(module).model_validate(json.loads(row.document_json))


async def get_module_progress(db: AsyncSession, account_id: int, module: ModuleKey | str) -> ProgressDocument:
    """Return the saved document, or the module default if nothing was saved yet."""
    module = module_key(module)
    await get_account(db, account_id)

    row = await _load_row(db, account_id, module)
    if row is None:
        return default_document(module)
    return _decode(module, row)


async def get_all_progress(db: AsyncSession, account_id: int) -> dict[ModuleKey, ProgressDocument]:
    """Every module's document for the account, defaults filled in."""
    await get_account(db, account_id)

    result = await db.execute(select(ModuleProgress).where(ModuleProgress.user_id == account_id))
    saved = {row.module: row for row in result.scalars().all()}

    progress = {}
    for module in MODULE_ORDER:
        row = saved.get(module.value)
        progress[module] = _decode(module, row) if row is not None else default_document(module)
    return progress


async def set_module_progress(
    db: AsyncSession,
    account_id: int,
    module: ModuleKey | str,
    document: ProgressDocument | dict[str, Any],
) -> ProgressDocument:
    """Replace the stored document for (account, module). Last write wins; no merge."""
    module = module_key(module)
    if not isinstance(document, schema_for(module)):
        document = parse_document(module, document)

    await get_account(db, account_id)
    payload = json.dumps(document.to_wire())

    row = await _load_row(db, account_id, module)
    if row is None:
        db.add(ModuleProgress(user_id=account_id, module=module.value, document_json=payload))
    else:
        row.document_json = payload

    try:
        await db.commit()
    except IntegrityError:
        # a concurrent first save inserted the row; overwrite it
        await db.rollback()
        row = await _load_row(db, account_id, module)
        if row is None:
            raise
        row.document_json = payload
        await db.commit()

    logger.info("Progress saved: id=%s module=%s", account_id, module.value)
    return document
