"""Per-module page state: load on entry, change locally, save on demand."""
from datetime import datetime, timezone
from typing import Any

from tracker.client import TrackerClient
from tracker.schemas.progress import ModuleKey, default_document, next_module

CHALLENGE_SCORE = 500


class ModuleView:
    module: ModuleKey

    def __init__(self, client: TrackerClient) -> None:
        self.client = client
        self.state = self.defaults()

    @classmethod
    def open(cls, client: TrackerClient) -> "ModuleView":
        view = cls(client)
        view.load()
        return view

    def defaults(self) -> dict[str, Any]:
        return default_document(self.module).to_wire()

    def load(self) -> dict[str, Any]:
        """Fetch saved progress; fields the server leaves empty keep their defaults."""
        data = self.client.get_progress(self.module) or {}
        state = self.defaults()
        state.update({key: value for key, value in data.items() if key in state and value is not None})
        self.state = state
        return state

    def save(self) -> dict[str, Any]:
        self.state = self.client.save_progress(self.module, self.state)
        return self.state

    @property
    def next_module(self) -> ModuleKey | None:
        return next_module(self.module)


class GrootView(ModuleView):
    module = ModuleKey.GROOT

    @property
    def level(self) -> int:
        return self.state["level"]

    @property
    def score(self) -> int:
        return self.state["score"]

    @property
    def achievements(self) -> list[str]:
        return self.state["achievements"]

    def complete_challenge(self) -> None:
        level = self.level + 1
        self.state["score"] = self.score + CHALLENGE_SCORE
        self.state["level"] = level
        self.state["achievements"] = [*self.achievements, f"Milestone {level}"]


class StarkView(ModuleView):
    module = ModuleKey.STARK

    def configure_dashboard(self, **settings: Any) -> None:
        self.state["dashboardConfig"] = {**self.state["dashboardConfig"], **settings}

    def add_alert(self, record: dict[str, Any]) -> None:
        self.state["alerts"] = [*self.state["alerts"], record]

    def add_report(self, record: dict[str, Any]) -> None:
        self.state["reports"] = [*self.state["reports"], record]


class SpidermanView(ModuleView):
    module = ModuleKey.SPIDERMAN

    def add_mission(self, name: str = "New Mission", date: datetime | None = None) -> None:
        date = (date or datetime.now(timezone.utc)).astimezone(timezone.utc)
        stamp = date.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        self.state["missions"] = [*self.state["missions"], {"name": name, "date": stamp}]

    def set_calendar_pref(self, key: str, value: Any) -> None:
        self.state["calendarPrefs"] = {**self.state["calendarPrefs"], key: value}


class DrStrangeView(ModuleView):
    module = ModuleKey.DRSTRANGE

    def add_spellbook(self, title: str = "New Spell", power: str = "🔥") -> None:
        self.state["spellbooks"] = [*self.state["spellbooks"], {"title": title, "power": power}]

    def record_search(self, entry: Any) -> None:
        self.state["searchHistory"] = [*self.state["searchHistory"], entry]


VIEWS: dict[ModuleKey, type[ModuleView]] = {
    ModuleKey.GROOT: GrootView,
    ModuleKey.STARK: StarkView,
    ModuleKey.SPIDERMAN: SpidermanView,
    ModuleKey.DRSTRANGE: DrStrangeView,
}


def open_view(client: TrackerClient, module: ModuleKey | str) -> ModuleView:
    return VIEWS[ModuleKey(module)].open(client)
