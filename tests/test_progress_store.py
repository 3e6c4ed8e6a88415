"""Progress store: defaults, whole-document replacement, isolation."""
import pytest

from tracker.core.errors import InvalidInput, NotFound
from tracker.db.session import build_engine, build_sessionmaker
from tracker.schemas.progress import GrootProgressSchema, ModuleKey
from tracker.services import progress as progress_store
from tracker.services.accounts import create_account
from tracker.services.progress import get_all_progress, get_module_progress, set_module_progress

DEFAULTS = {
    "groot": {"level": 1, "score": 0, "achievements": []},
    "stark": {"dashboardConfig": {}, "alerts": [], "reports": []},
    "spiderman": {"missions": [], "calendarPrefs": {}},
    "drstrange": {"spellbooks": [], "searchHistory": []},
}


@pytest.fixture()
async def account(db):
    return await create_account(db, "peter", "p@x.com", "webslinger")


@pytest.mark.parametrize("module", list(DEFAULTS))
async def test_unsaved_module_returns_default(db, account, module):
    document = await get_module_progress(db, account.id, module)
    assert document.to_wire() == DEFAULTS[module]


async def test_save_then_read_returns_same_document(db, account):
    saved = {
        "missions": [{"name": "Stop the Vulture", "date": "2025-10-19T12:00:00Z"}],
        "calendarPrefs": {"weekStart": "monday"},
    }
    stored = await set_module_progress(db, account.id, ModuleKey.SPIDERMAN, saved)
    assert stored.to_wire() == saved
    assert (await get_module_progress(db, account.id, "spiderman")).to_wire() == saved


async def test_save_replaces_instead_of_merging(db, account):
    await set_module_progress(
        db, account.id, "stark", {"dashboardConfig": {"theme": "dark", "grid": 3}, "alerts": [{"id": 1}], "reports": []}
    )
    await set_module_progress(db, account.id, "stark", {"dashboardConfig": {"grid": 4}, "alerts": [], "reports": []})

    document = await get_module_progress(db, account.id, "stark")
    assert document.to_wire() == {"dashboardConfig": {"grid": 4}, "alerts": [], "reports": []}


async def test_last_write_wins(db, account):
    first = GrootProgressSchema(level=2, score=500, achievements=["Milestone 2"])
    second = GrootProgressSchema(level=3, score=1000, achievements=["Milestone 2", "Milestone 3"])
    await set_module_progress(db, account.id, "groot", first)
    await set_module_progress(db, account.id, "groot", second)

    assert await get_module_progress(db, account.id, "groot") == second


async def test_modules_and_accounts_are_isolated(db, account):
    other = await create_account(db, "tony", "t@stark.com", "iamironman")
    await set_module_progress(db, account.id, "groot", {"level": 5, "score": 2000, "achievements": []})

    assert (await get_module_progress(db, other.id, "groot")).to_wire() == DEFAULTS["groot"]
    assert (await get_module_progress(db, account.id, "drstrange")).to_wire() == DEFAULTS["drstrange"]


async def test_all_progress_fills_defaults(db, account):
    await set_module_progress(db, account.id, "drstrange", {"spellbooks": [{"title": "Vishanti", "power": "🔥"}], "searchHistory": ["time stone"]})

    progress = await get_all_progress(db, account.id)
    assert list(progress) == [ModuleKey.GROOT, ModuleKey.STARK, ModuleKey.SPIDERMAN, ModuleKey.DRSTRANGE]
    assert progress[ModuleKey.DRSTRANGE].to_wire()["searchHistory"] == ["time stone"]
    assert progress[ModuleKey.GROOT].to_wire() == DEFAULTS["groot"]


async def test_unknown_account_is_not_found(db):
    with pytest.raises(NotFound):
        await get_module_progress(db, 999, "groot")
    with pytest.raises(NotFound):
        await set_module_progress(db, 999, "groot", {"level": 1, "score": 0, "achievements": []})


@pytest.mark.parametrize(
    "document",
    [
        {"level": 1, "score": 0},
        {"level": 0, "score": 0, "achievements": []},
        {"level": 1, "score": -5, "achievements": []},
        {"level": 1, "score": 0, "achievements": [], "extra": True},
        {"level": 1, "score": 0, "achievements": "Milestone 2"},
    ],
)
async def test_malformed_document_is_rejected_and_not_stored(db, account, document):
    with pytest.raises(InvalidInput):
        await set_module_progress(db, account.id, "groot", document)
    assert (await get_module_progress(db, account.id, "groot")).to_wire() == DEFAULTS["groot"]


async def test_unknown_module_is_invalid_input(db, account):
    with pytest.raises(InvalidInput):
        await set_module_progress(db, account.id, "hulk", {})


async def test_concurrent_first_saves_last_write_wins(db, account, settings, monkeypatch):
    first = {"level": 2, "score": 500, "achievements": ["Milestone 2"]}
    second = {"level": 3, "score": 1000, "achievements": ["Milestone 3"]}

    real_load_row = progress_store._load_row
    lookups = []

    async def load_row_before_first_commit(session, account_id, module):
        lookups.append(module)
        if len(lookups) == 1:
            # the second writer looked before the first one committed
            return None
        return await real_load_row(session, account_id, module)

    await set_module_progress(db, account.id, "groot", first)

    engine = build_engine(settings.database_url)
    try:
        async with build_sessionmaker(engine)() as racer:
            monkeypatch.setattr(progress_store, "_load_row", load_row_before_first_commit)
            stored = await set_module_progress(racer, account.id, "groot", second)
            monkeypatch.undo()
        assert stored.to_wire() == second
        assert len(lookups) == 2

        async with build_sessionmaker(engine)() as reader:
            assert (await get_module_progress(reader, account.id, "groot")).to_wire() == second
    finally:
        await engine.dispose()
