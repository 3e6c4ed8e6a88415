"""Pydantic schemas for module progress documents, one per module key."""
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, StrictInt, StrictStr, TypeAdapter, ValidationError, field_validator

from tracker.core.errors import InvalidInput


class ModuleKey(str, Enum):
    GROOT = "groot"
    STARK = "stark"
    SPIDERMAN = "spiderman"
    DRSTRANGE = "drstrange"


# Page order in the front end: each module links to the next one
MODULE_ORDER = [ModuleKey.GROOT, ModuleKey.STARK, ModuleKey.SPIDERMAN, ModuleKey.DRSTRANGE]

_TIMESTAMP = TypeAdapter(datetime)


class DocumentModel(BaseModel):
    """Wire names are camelCase; snake_case is accepted too. Unknown fields are rejected."""

    class Config:
        populate_by_name = True
        extra = "forbid"


class ProgressDocument(DocumentModel):
    @classmethod
    def default(cls) -> "ProgressDocument":
        """Document served before the user has saved anything."""
        raise NotImplementedError

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ---------- groot ----------

class GrootProgressSchema(ProgressDocument):
    level: StrictInt = Field(ge=1)
    score: StrictInt = Field(ge=0)
    achievements: list[StrictStr]

    @classmethod
    def default(cls) -> "GrootProgressSchema":
        return cls(level=1, score=0, achievements=[])


# ---------- stark ----------

class StarkProgressSchema(ProgressDocument):
    dashboard_config: dict[str, Any] = Field(alias="dashboardConfig")
    alerts: list[dict[str, Any]]
    reports: list[dict[str, Any]]

    @classmethod
    def default(cls) -> "StarkProgressSchema":
        return cls(dashboard_config={}, alerts=[], reports=[])


# ---------- spiderman ----------

class MissionSchema(DocumentModel):
    name: StrictStr
    # kept verbatim as sent; only checked to be an ISO-8601 timestamp
    date: StrictStr

    @field_validator("date")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        try:
            _TIMESTAMP.validate_python(value)
        except ValidationError:
            raise ValueError("date must be an ISO-8601 timestamp") from None
        return value


class SpidermanProgressSchema(ProgressDocument):
    missions: list[MissionSchema]
    calendar_prefs: dict[str, Any] = Field(alias="calendarPrefs")

    @classmethod
    def default(cls) -> "SpidermanProgressSchema":
        return cls(missions=[], calendar_prefs={})


# ---------- drstrange ----------

class SpellbookSchema(DocumentModel):
    title: StrictStr
    power: StrictStr


class DrStrangeProgressSchema(ProgressDocument):
    spellbooks: list[SpellbookSchema]
    search_history: list[Any] = Field(alias="searchHistory")

    @classmethod
    def default(cls) -> "DrStrangeProgressSchema":
        return cls(spellbooks=[], search_history=[])


MODULE_SCHEMAS: dict[ModuleKey, type[ProgressDocument]] = {
    ModuleKey.GROOT: GrootProgressSchema,
    ModuleKey.STARK: StarkProgressSchema,
    ModuleKey.SPIDERMAN: SpidermanProgressSchema,
    ModuleKey.DRSTRANGE: DrStrangeProgressSchema,
}


def module_key(module: ModuleKey | str) -> ModuleKey:
    try:
        return ModuleKey(module)
    except ValueError:
        raise InvalidInput(f"Unknown module: {module}") from None


def schema_for(module: ModuleKey | str) -> type[ProgressDocument]:
    return MODULE_SCHEMAS[module_key(module)]


def default_document(module: ModuleKey | str) -> ProgressDocument:
    return schema_for(module).default()


def parse_document(module: ModuleKey | str, data: Any) -> ProgressDocument:
    """Validate raw JSON data as the document of `module`; InvalidInput if malformed."""
    schema = schema_for(module)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise InvalidInput(f"Invalid {module_key(module).value} progress: {exc.error_count()} error(s)") from exc


def next_module(module: ModuleKey | str) -> ModuleKey | None:
    idx = MODULE_ORDER.index(module_key(module))
    return MODULE_ORDER[idx + 1] if idx + 1 < len(MODULE_ORDER) else None
