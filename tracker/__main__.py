"""Tracker entrypoint.

Run with:
  python -m tracker
"""
import uvicorn

from tracker.core.config import get_settings
from tracker.core.logging_config import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)
    uvicorn.run("tracker.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
