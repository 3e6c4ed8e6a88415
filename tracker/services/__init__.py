from tracker.services.accounts import create_account, find_by_credential_key, get_account
from tracker.services.auth import Authenticator
from tracker.services.progress import get_all_progress, get_module_progress, set_module_progress

__all__ = [
    "Authenticator",
    "create_account",
    "find_by_credential_key",
    "get_account",
    "get_all_progress",
    "get_module_progress",
    "set_module_progress",
]
