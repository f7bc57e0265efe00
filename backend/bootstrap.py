from __future__ import annotations

import logging
import os

from database import Base, engine, get_db
from models import Event

logger = logging.getLogger(__name__)

DEFAULT_EVENT_ID = int(os.environ.get("DEFAULT_EVENT_ID", 1))
DEFAULT_EVENT_TITLE = "UVic Hacks 2026"
DEFAULT_EVENT_DESCRIPTION = "The main hackathon event."


def ensure_tables() -> None:
    Base.metadata.create_all(bind=engine)


def ensure_default_event() -> bool:
    """Seed the default event row. Returns True when a row was inserted."""
    db = next(get_db())
    try:
        event = db.query(Event).filter(Event.id == DEFAULT_EVENT_ID).first()
        if event:
            return False
        db.add(Event(
            id=DEFAULT_EVENT_ID,
            title=DEFAULT_EVENT_TITLE,
            description=DEFAULT_EVENT_DESCRIPTION,
            is_active=True,
        ))
        db.commit()
        return True
    finally:
        db.close()


def run_bootstrap_migrations(seed: bool = True) -> None:
    ensure_tables()
    logger.info("Database schema ensured.")
    if seed and ensure_default_event():
        logger.info("Seeded default event %s (%s).", DEFAULT_EVENT_ID, DEFAULT_EVENT_TITLE)
