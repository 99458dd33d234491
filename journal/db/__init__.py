"""Trade journal schema, migrations and engine/session helpers."""

from __future__ import annotations

import logging

from journal.db.base import Base
from journal.db import models
from journal.db.session import create_journal_engine, make_session_factory, session_scope

logger = logging.getLogger(__name__)

__all__ = [
    "Base",
    "create_journal_engine",
    "make_session_factory",
    "models",
    "session_scope",
]
