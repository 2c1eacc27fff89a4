"""Judge actions: the write path into the record store.

These are the only functions in the package that touch a store. Ranking code
never calls them; it only reads snapshots.

Heats:
- At most one heat is current. Setting a heat current first unsets every other
  current heat, then sets the target (read-modify-write, not atomic; these are
  rare manual actions).

Time logs:
- A judge press writes one log with the clock time of the press. Whether it is
  a start or a stop is decided later by interval reconstruction.
- A relay handover writes two Sail logs with one clock reading: the outgoing
  sailor's stop and the incoming sailor's start.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from .intervals import filter_time_logs_by_heat, filter_time_logs_by_team, sort_time_logs_by_time
from .lookups import find_time_type
from .result import Err, Ok, Result
from .store import HEATS, TIME_LOGS, RecordStore, StoreError
from .timecodec import clock_time_of
from .types import Heat, TimeLog, TimeType
from .validation import InputSanitizer

logger = logging.getLogger(__name__)


def current_heat(heats: Sequence[Heat]) -> Heat | None:
    return next((heat for heat in heats if heat.is_current), None)


def _unset_current_heats(store: RecordStore, keep_id: str | None = None) -> int:
    current = store.fetch_where(HEATS, lambda row: bool(row.get("is_current")))
    count = 0
    for row in current:
        if row.get("_id") == keep_id:
            continue
        store.patch(HEATS, row["_id"], {"is_current": False})
        count += 1
    return count


def set_current_heat(store: RecordStore, heat_id: str) -> Result[str]:
    """Make ``heat_id`` the only current heat."""
    try:
        if not store.fetch_where(HEATS, lambda row: row.get("_id") == heat_id):
            return Err(kind="heat_not_found", message=f"Heat {heat_id} not found")
        unset = _unset_current_heats(store, keep_id=heat_id)
        store.patch(HEATS, heat_id, {"is_current": True})
    except StoreError as e:
        logger.error(f"Error setting current heat {heat_id}: {e}")
        return Err(kind="store_error", message=f"Error setting current heat: {e}")
    logger.info(f"Heat {heat_id} is now current ({unset} heat(s) unset)")
    return Ok(heat_id)


def create_heat(
    store: RecordStore,
    heat_number: int,
    date: str,
    *,
    is_current: bool = False,
    name: str | None = None,
) -> Result[str]:
    # Validate before unsetting the current heat: a rejected heat leaves the store untouched.
    try:
        validated = InputSanitizer.validate_heat_input(
            {"heat": heat_number, "date": date, "is_current": is_current, "name": name}
        )
    except ValueError as e:
        return Err(kind="invalid_input", message=str(e))
    record = validated.model_dump(exclude_none=True)
    try:
        if is_current:
            _unset_current_heats(store)
        heat_id = store.insert(HEATS, record)
    except StoreError as e:
        logger.error(f"Error creating heat {heat_number}: {e}")
        return Err(kind="store_error", message=f"Error creating heat: {e}")
    return Ok(heat_id)


def log_time(
    store: RecordStore,
    *,
    player_id: str | None,
    heat: Heat | None,
    activity_key: str,
    time_types: Sequence[TimeType],
    team_id: str | None = None,
    moment: datetime | None = None,
) -> Result[str]:
    """
    Record one judge press for a player in the current heat.

    Args:
      store: write target.
      player_id: player being timed.
      heat: the current heat (see current_heat); None if no heat is running.
      activity_key: "Beer" | "Sail" | "Spin".
      time_types: reference table used to resolve the activity key.
      team_id: team the player is racing for, if any.
      moment: time of the press; defaults to now.

    Returns:
      Ok(new log id), or Err describing why nothing was written.
    """
    if not player_id or heat is None:
        return Err(kind="missing_player", message="Missing player ID or current heat")
    found = find_time_type(activity_key, time_types)
    if isinstance(found, Err):
        logger.warning(f"Time log rejected: {found.message}")
        return found
    clock, seconds = clock_time_of(moment or datetime.now())
    payload = {
        "player_id": player_id,
        "heat_id": heat.id,
        "time_type_id": found.value.id,
        "team_id": team_id,
        "time": clock,
        "time_seconds": seconds,
    }
    try:
        validated = InputSanitizer.validate_time_log_input(payload)
    except ValueError as e:
        return Err(kind="invalid_input", message=str(e))
    try:
        log_id = store.insert(TIME_LOGS, validated.model_dump(exclude_none=True))
    except StoreError as e:
        logger.error(f"Error inserting time log: {e}")
        return Err(kind="store_error", message=f"Error inserting time log: {e}")
    logger.info(f"Inserted {activity_key} log {log_id} for player {player_id} at {clock}")
    return Ok(log_id)


def log_handover(
    store: RecordStore,
    *,
    from_player_id: str | None,
    from_team_id: str | None,
    to_player_id: str | None,
    to_team_id: str | None,
    heat: Heat | None,
    time_types: Sequence[TimeType],
    moment: datetime | None = None,
) -> Result[list[str]]:
    """
    Main judge start: stop the outgoing sailor and start the incoming one.

    Both Sail logs carry the same clock reading and are written in one batch,
    outgoing first. Returns the ids in that order.
    """
    if not from_player_id or not to_player_id or heat is None:
        return Err(kind="missing_player", message="Missing player ID or current heat")
    found = find_time_type("Sail", time_types)
    if isinstance(found, Err):
        logger.warning(f"Handover rejected: {found.message}")
        return found
    clock, seconds = clock_time_of(moment or datetime.now())
    payloads = [
        {
            "player_id": player_id,
            "heat_id": heat.id,
            "time_type_id": found.value.id,
            "team_id": team_id,
            "time": clock,
            "time_seconds": seconds,
        }
        for player_id, team_id in ((from_player_id, from_team_id), (to_player_id, to_team_id))
    ]
    try:
        records = [
            InputSanitizer.validate_time_log_input(payload).model_dump(exclude_none=True)
            for payload in payloads
        ]
    except ValueError as e:
        return Err(kind="invalid_input", message=str(e))
    try:
        log_ids = store.insert_many(TIME_LOGS, records)
    except StoreError as e:
        logger.error(f"Error starting handover: {e}")
        return Err(kind="store_error", message=f"Error starting global timer: {e}")
    logger.info(f"Handover {from_player_id} -> {to_player_id} in heat {heat.heat} at {clock}")
    return Ok(log_ids)


def previous_player_id(team_id: str | None, heat: Heat | None, logs: Sequence[TimeLog]) -> str | None:
    """Player of the team's latest log in the heat (the one handing over)."""
    if not team_id or heat is None:
        return None
    team_logs = filter_time_logs_by_team(filter_time_logs_by_heat(logs, heat.id), team_id)
    if not team_logs:
        return None
    return sort_time_logs_by_time(team_logs)[-1].player_id


__all__ = [
    "current_heat",
    "set_current_heat",
    "create_heat",
    "log_time",
    "log_handover",
    "previous_player_id",
]
