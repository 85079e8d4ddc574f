"""In-process stand-in for the hosted record store.

Tables are dicts of records keyed by id. Every read hands out copies so a
caller can never mutate stored state except through ``update``.
"""

import copy
import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Union

from careers.logger import get_logger

logger = get_logger(__name__)

Record = dict[str, Any]


class StoreError(Exception):
    pass


class RecordNotFound(StoreError, LookupError):
    def __init__(self, table: str, record_id: str):
        super().__init__(f"No record {record_id!r} in {table!r}")
        self.table = table
        self.record_id = record_id


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    def __init__(self, tables: Optional[dict[str, list[Record]]] = None):
        self._tables: dict[str, dict[str, Record]] = {}
        self._lock = threading.Lock()
        for table, records in (tables or {}).items():
            for record in records:
                self.insert(table, record)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RecordStore":
        path = Path(path)
        if not path.exists():
            logger.warning(f"[Store] Seed file {path} not found, starting empty")
            return cls()
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise StoreError(f"Seed file {path} must hold an object of tables")
        store = cls(data)
        logger.info(f"[Store] Loaded {', '.join(f'{t}={len(r)}' for t, r in data.items())} from {path}")
        return store

    def _table(self, table: str) -> dict[str, Record]:
        return self._tables.setdefault(table, {})

    def select(
        self,
        table: str,
        where: Optional[Callable[[Record], bool]] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        **equals: Any,
    ) -> list[Record]:
        with self._lock:
            rows = [
                copy.deepcopy(r) for r in self._table(table).values()
                if all(r.get(k) == v for k, v in equals.items())
                and (where is None or where(r))
            ]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=descending)
        return rows

    def get(self, table: str, record_id: str) -> Record:
        with self._lock:
            record = self._table(table).get(record_id)
            if record is None:
                raise RecordNotFound(table, record_id)
            return copy.deepcopy(record)

    def insert(self, table: str, record: Record) -> Record:
        now = utcnow()
        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        with self._lock:
            rows = self._table(table)
            if row["id"] in rows:
                raise StoreError(f"Duplicate id {row['id']!r} in {table!r}")
            rows[row["id"]] = row
        logger.debug(f"[Store] insert {table}/{row['id']}")
        return copy.deepcopy(row)

    def update(self, table: str, record_id: str, changes: Record) -> Record:
        with self._lock:
            row = self._table(table).get(record_id)
            if row is None:
                raise RecordNotFound(table, record_id)
            row.update(copy.deepcopy(changes))
            updated = copy.deepcopy(row)
        logger.debug(f"[Store] update {table}/{record_id} keys={sorted(changes)}")
        return updated

    def delete(self, table: str, record_id: str) -> None:
        with self._lock:
            if self._table(table).pop(record_id, None) is None:
                raise RecordNotFound(table, record_id)
        logger.debug(f"[Store] delete {table}/{record_id}")


__all__ = ["Record", "RecordNotFound", "RecordStore", "StoreError", "utcnow"]
