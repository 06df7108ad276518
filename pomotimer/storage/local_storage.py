"""Key-value store for JSON-serializable values.

Every operation is best-effort: a missing key, a value that no longer
decodes, or a database error turns into ``None`` (for reads) or a no-op
(for writes), logged at WARNING.  Callers never see a storage exception.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from ..database.db import get_session
from ..database.models import StoredValue

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class SqlKeyValueStore:
    """Key-value store backed by the ``stored_values`` table."""

    def get(self, key: str) -> Optional[Any]:
        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                raw = record.value if record else None
        except (SQLAlchemyError, OSError) as error:
            logger.warning("Could not read %r: %s", key, error)
            return None

        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed value stored under %r", key)
            return None

    def set(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as error:
            logger.warning("Value for %r is not JSON-serializable: %s", key, error)
            return

        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                if record is None:
                    db.add(StoredValue(key=key, value=encoded))
                else:
                    record.value = encoded
                    record.updated_at = datetime.utcnow()
        except (SQLAlchemyError, OSError) as error:
            logger.warning("Could not write %r: %s", key, error)

    def remove(self, key: str) -> None:
        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                if record is not None:
                    db.delete(record)
        except (SQLAlchemyError, OSError) as error:
            logger.warning("Could not remove %r: %s", key, error)
