"""
Keyed record store.

Records are JSON-shaped dicts grouped into named collections ("units",
"events", ...) and addressed by a string id. Every record carries a version
stamp drawn from a store-wide counter on each write, so a record that is
deleted and re-created never repeats an earlier stamp. `transact` uses it for
optimistic read-modify-write:

  store = open_store(settings)
  store.transact("units", unit_id, lambda unit: {**unit, "name": "New"})

Backends:
- SqliteStore: one table, short-lived connection per call
- MemoryStore: in-process dict, for tests and throwaway demos
"""
from __future__ import annotations

import copy
import json
import logging
import secrets
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

from .errors import ArtFestError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Transform = Callable[[Optional[Record]], Optional[Record]]


class StoreError(ArtFestError):
    """A read or write against the record store failed."""


class TransactionConflict(StoreError):
    """transact() could not commit within its retry budget."""


def new_key() -> str:
    return secrets.token_hex(10)


class RecordStore(ABC):
    def __init__(self, max_retries: int = 25):
        self.max_retries = max_retries

    @abstractmethod
    def get_all(self, collection: str) -> Dict[str, Record]:
        """Return every record in the collection keyed by id, oldest first."""

    @abstractmethod
    def get_one(self, collection: str, record_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def set(self, collection: str, record_id: str, record: Record) -> None:
        ...

    @abstractmethod
    def remove(self, collection: str, record_id: str) -> None:
        """Delete a record. Deleting a missing record is not an error."""

    @abstractmethod
    def _read_versioned(self, collection: str, record_id: str) -> Tuple[Optional[Record], int]:
        """Return (record, version); version is 0 for a missing record."""

    @abstractmethod
    def _compare_and_set(self, collection: str, record_id: str, expected_version: int, record: Record) -> bool:
        """Write record only if its version still equals expected_version."""

    def push(self, collection: str, record: Record) -> str:
        record_id = new_key()
        self.set(collection, record_id, record)
        return record_id

    def transact(self, collection: str, record_id: str, fn: Transform) -> Optional[Record]:
        """
        Apply fn to the current record and commit the result atomically.

        fn receives a private copy of the record (or None) and returns the new
        record, or None to abort without writing. It is re-run against the
        fresh value whenever another writer commits first, so it must not have
        side effects.
        """
        for attempt in range(1, self.max_retries + 1):
            current, version = self._read_versioned(collection, record_id)
            updated = fn(copy.deepcopy(current))
            if updated is None:
                return current
            if self._compare_and_set(collection, record_id, version, updated):
                if attempt > 1:
                    logger.debug("transaction on %s/%s committed after %d attempts", collection, record_id, attempt)
                return updated
            logger.debug("transaction conflict on %s/%s (attempt %d)", collection, record_id, attempt)

        raise TransactionConflict(
            f"Could not commit {collection}/{record_id} after {self.max_retries} attempts."
        )


# -----------------------
# SQLite
# -----------------------
class SqliteStore(RecordStore):
    def __init__(self, db_path: str, max_retries: int = 25):
        super().__init__(max_retries=max_retries)
        self.db_path = db_path
        self.init_db()

    def db(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def _run(self, action: str, fn):
        try:
            conn = self.db()
            try:
                with conn:
                    return fn(conn)
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("sqlite %s failed", action)
            raise StoreError(f"Store {action} failed: {e}") from e

    def init_db(self):
        self._run(
            "init",
            lambda conn: conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS records (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    version INTEGER NOT NULL DEFAULT 1,
                    PRIMARY KEY (collection, id)
                );
                CREATE TABLE IF NOT EXISTS clock (n INTEGER NOT NULL);
                INSERT INTO clock(n)
                    SELECT COALESCE((SELECT MAX(version) FROM records), 0)
                    WHERE NOT EXISTS (SELECT 1 FROM clock);
                """
            ),
        )

    def get_all(self, collection: str) -> Dict[str, Record]:
        rows = self._run(
            "get_all",
            lambda conn: conn.execute(
                "SELECT id, data FROM records WHERE collection=? ORDER BY rowid", (collection,)
            ).fetchall(),
        )
        return {r["id"]: json.loads(r["data"]) for r in rows}

    def get_one(self, collection: str, record_id: str) -> Optional[Record]:
        record, _version = self._read_versioned(collection, record_id)
        return record

    @staticmethod
    def _tick(conn: sqlite3.Connection) -> int:
        conn.execute("UPDATE clock SET n = n + 1")
        return int(conn.execute("SELECT n FROM clock").fetchone()[0])

    def set(self, collection: str, record_id: str, record: Record) -> None:
        data = json.dumps(record)

        def write(conn: sqlite3.Connection):
            # upsert keeps the original rowid so get_all order stays insertion order
            conn.execute(
                """
                INSERT INTO records(collection, id, data, version) VALUES(?,?,?,?)
                ON CONFLICT(collection, id) DO UPDATE SET data=excluded.data, version=excluded.version
                """,
                (collection, record_id, data, self._tick(conn)),
            )

        self._run("set", write)

    def remove(self, collection: str, record_id: str) -> None:
        self._run(
            "remove",
            lambda conn: conn.execute(
                "DELETE FROM records WHERE collection=? AND id=?", (collection, record_id)
            ),
        )

    def _read_versioned(self, collection: str, record_id: str) -> Tuple[Optional[Record], int]:
        row = self._run(
            "get_one",
            lambda conn: conn.execute(
                "SELECT data, version FROM records WHERE collection=? AND id=?", (collection, record_id)
            ).fetchone(),
        )
        if not row:
            return None, 0
        return json.loads(row["data"]), int(row["version"])

    def _compare_and_set(self, collection: str, record_id: str, expected_version: int, record: Record) -> bool:
        data = json.dumps(record)

        def write(conn: sqlite3.Connection) -> bool:
            version = self._tick(conn)
            if expected_version == 0:
                try:
                    conn.execute(
                        "INSERT INTO records(collection, id, data, version) VALUES(?,?,?,?)",
                        (collection, record_id, data, version),
                    )
                except sqlite3.IntegrityError:
                    # someone created it first
                    return False
                return True
            cur = conn.execute(
                "UPDATE records SET data=?, version=? WHERE collection=? AND id=? AND version=?",
                (data, version, collection, record_id, expected_version),
            )
            return cur.rowcount == 1

        return self._run("transact", write)


# -----------------------
# In-memory
# -----------------------
class MemoryStore(RecordStore):
    def __init__(self, max_retries: int = 25):
        super().__init__(max_retries=max_retries)
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Tuple[int, Record]]] = {}
        self._clock = 0

    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    def get_all(self, collection: str) -> Dict[str, Record]:
        with self._lock:
            rows = self._data.get(collection, {})
            return {k: copy.deepcopy(rec) for k, (_v, rec) in rows.items()}

    def get_one(self, collection: str, record_id: str) -> Optional[Record]:
        record, _version = self._read_versioned(collection, record_id)
        return record

    def set(self, collection: str, record_id: str, record: Record) -> None:
        with self._lock:
            rows = self._data.setdefault(collection, {})
            rows[record_id] = (self._tick(), copy.deepcopy(record))

    def remove(self, collection: str, record_id: str) -> None:
        with self._lock:
            self._data.get(collection, {}).pop(record_id, None)

    def _read_versioned(self, collection: str, record_id: str) -> Tuple[Optional[Record], int]:
        with self._lock:
            entry = self._data.get(collection, {}).get(record_id)
            if entry is None:
                return None, 0
            return copy.deepcopy(entry[1]), entry[0]

    def _compare_and_set(self, collection: str, record_id: str, expected_version: int, record: Record) -> bool:
        with self._lock:
            rows = self._data.setdefault(collection, {})
            entry = rows.get(record_id)
            version = entry[0] if entry is not None else 0
            if version != expected_version:
                return False
            rows[record_id] = (self._tick(), copy.deepcopy(record))
            return True


def open_store(settings) -> RecordStore:
    if settings.store == "memory":
        logger.info("using in-memory record store")
        return MemoryStore(max_retries=settings.max_txn_retries)
    logger.info("using sqlite record store at %s", settings.db_path)
    return SqliteStore(settings.db_path, max_retries=settings.max_txn_retries)
