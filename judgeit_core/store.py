"""Record store interface consumed by the core, plus an in-memory implementation.

The hosted store is reached through generated bindings that live outside this
package. The core only needs collection reads and, for judge actions, simple
insert/patch/delete. ``InMemoryStore`` implements the same surface for tests
and local tooling.
"""
from __future__ import annotations

import itertools
import logging
import time
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol

from .types import Heat, Player, Team, TimeLog, TimeType
from .validation import RecordSanitizer

logger = logging.getLogger(__name__)

PLAYERS = "players"
TEAMS = "teams"
HEATS = "heats"
TIME_TYPES = "time_types"
TIME_LOGS = "time_logs"

COLLECTIONS = (PLAYERS, TEAMS, HEATS, TIME_TYPES, TIME_LOGS)


class StoreError(Exception):
    """Raised by store implementations when a read or write cannot complete."""


class RecordStore(Protocol):
    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        ...

    def fetch_where(
        self, collection: str, predicate: Callable[[Dict[str, Any]], bool]
    ) -> List[Dict[str, Any]]:
        ...

    def insert(self, collection: str, record: Dict[str, Any]) -> str:
        ...

    def insert_many(self, collection: str, records: List[Dict[str, Any]]) -> List[str]:
        """Insert all records in one write; none are stored if the write fails."""
        ...

    def patch(self, collection: str, record_id: str, partial: Dict[str, Any]) -> None:
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...


class InMemoryStore:
    """Dict-backed store; rows get an ``_id`` and an epoch-ms ``_creationTime``."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._rows: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        self._ids = itertools.count(1)
        self._clock = clock or (lambda: time.time() * 1000)

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        if collection not in self._rows:
            raise StoreError(f"unknown collection: {collection}")
        return self._rows[collection]

    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        return [deepcopy(row) for row in self._collection(collection).values()]

    def fetch_where(
        self, collection: str, predicate: Callable[[Dict[str, Any]], bool]
    ) -> List[Dict[str, Any]]:
        return [row for row in self.fetch_all(collection) if predicate(row)]

    def insert(self, collection: str, record: Dict[str, Any]) -> str:
        rows = self._collection(collection)
        record_id = f"{collection}:{next(self._ids)}"
        rows[record_id] = {**deepcopy(record), "_id": record_id, "_creationTime": self._clock()}
        logger.debug(f"Inserted {record_id}")
        return record_id

    def insert_many(self, collection: str, records: List[Dict[str, Any]]) -> List[str]:
        rows = self._collection(collection)
        staged: Dict[str, Dict[str, Any]] = {}
        for record in records:
            if not isinstance(record, dict):
                raise StoreError(f"{collection} records must be mappings")
            record_id = f"{collection}:{next(self._ids)}"
            staged[record_id] = {**deepcopy(record), "_id": record_id, "_creationTime": self._clock()}
        rows.update(staged)
        logger.debug(f"Inserted {len(staged)} record(s) into {collection}")
        return list(staged)

    def patch(self, collection: str, record_id: str, partial: Dict[str, Any]) -> None:
        rows = self._collection(collection)
        if record_id not in rows:
            raise StoreError(f"{collection} has no record {record_id}")
        protected = {"_id", "_creationTime"}
        rows[record_id].update({k: v for k, v in partial.items() if k not in protected})

    def delete(self, collection: str, record_id: str) -> None:
        rows = self._collection(collection)
        if rows.pop(record_id, None) is None:
            raise StoreError(f"{collection} has no record {record_id}")


@dataclass(frozen=True)
class Snapshot:
    players: tuple[Player, ...]
    teams: tuple[Team, ...]
    heats: tuple[Heat, ...]
    time_types: tuple[TimeType, ...]
    time_logs: tuple[TimeLog, ...]


def load_snapshot(store: RecordStore) -> Snapshot:
    """Read every collection once and convert rows into record types."""
    snapshot = Snapshot(
        players=tuple(RecordSanitizer.parse_many(store.fetch_all(PLAYERS), RecordSanitizer.to_player, "player")),
        teams=tuple(RecordSanitizer.parse_many(store.fetch_all(TEAMS), RecordSanitizer.to_team, "team")),
        heats=tuple(RecordSanitizer.parse_many(store.fetch_all(HEATS), RecordSanitizer.to_heat, "heat")),
        time_types=tuple(
            RecordSanitizer.parse_many(store.fetch_all(TIME_TYPES), RecordSanitizer.to_time_type, "time type")
        ),
        time_logs=tuple(
            RecordSanitizer.parse_many(store.fetch_all(TIME_LOGS), RecordSanitizer.to_time_log, "time log")
        ),
    )
    logger.debug(
        f"Snapshot loaded: {len(snapshot.players)} players, {len(snapshot.teams)} teams, "
        f"{len(snapshot.heats)} heats, {len(snapshot.time_logs)} time logs"
    )
    return snapshot


__all__ = [
    "PLAYERS",
    "TEAMS",
    "HEATS",
    "TIME_TYPES",
    "TIME_LOGS",
    "StoreError",
    "RecordStore",
    "InMemoryStore",
    "Snapshot",
    "load_snapshot",
]
