from tracker.models.user import User
from tracker.models.progress import ModuleProgress

__all__ = ["User", "ModuleProgress"]
