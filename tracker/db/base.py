"""SQLAlchemy declarative base with every model registered on its metadata."""
from tracker.db.session import Base

# Import all models so create_all sees them
from tracker.models.progress import ModuleProgress  # noqa: F401
from tracker.models.user import User  # noqa: F401

__all__ = ["Base", "User", "ModuleProgress"]
