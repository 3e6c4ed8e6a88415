from tracker.schemas.auth import LoginSchema, ProfileOutSchema, SignupSchema, TokenSchema
from tracker.schemas.progress import (
    MODULE_ORDER,
    MODULE_SCHEMAS,
    DrStrangeProgressSchema,
    GrootProgressSchema,
    ModuleKey,
    ProgressDocument,
    SpidermanProgressSchema,
    StarkProgressSchema,
)

__all__ = [
    "LoginSchema",
    "ProfileOutSchema",
    "SignupSchema",
    "TokenSchema",
    "MODULE_ORDER",
    "MODULE_SCHEMAS",
    "ModuleKey",
    "ProgressDocument",
    "GrootProgressSchema",
    "StarkProgressSchema",
    "SpidermanProgressSchema",
    "DrStrangeProgressSchema",
]
