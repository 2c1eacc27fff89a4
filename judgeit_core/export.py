"""CSV export of ranking data.

One row per record, in the order given; fields are resolved through the
reference tables and quoted only when they contain a comma, a quote or a line
break.
"""
from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, Protocol, Sequence

from .lookups import heat_number, heat_year_label, player_name, team_name
from .selection import best_per_player
from .timecodec import format_duration
from .types import Heat, Interval, Player, Team

logger = logging.getLogger(__name__)

CSV_HEADER = ("Formatted Time", "Player", "Team", "Heat", "Heat Year")


class ExportRecord(Protocol):
    player_id: str
    team_id: str | None
    heat_id: str
    duration: float


def _formatted_time(record: ExportRecord) -> str:
    return getattr(record, "formatted_duration", None) or format_duration(record.duration)


def to_csv(
    records: Iterable[ExportRecord],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=",", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)
    count = 0
    for record in records:
        writer.writerow(
            [
                _formatted_time(record),
                player_name(record.player_id, players),
                team_name(record.team_id, teams),
                heat_number(record.heat_id, heats),
                heat_year_label(record.heat_id, heats),
            ]
        )
        count += 1
    logger.debug(f"Exported {count} rows to CSV")
    text = buffer.getvalue()
    # Rows are joined by "\n"; no terminator after the last one.
    return text[:-1] if text.endswith("\n") else text


def export_all_entries(
    intervals: Sequence[Interval],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
) -> str:
    """Full export: every player's best attempt, not just the leaderboard top."""
    return to_csv(best_per_player(intervals, limit=None), players, teams, heats)


__all__ = ["CSV_HEADER", "ExportRecord", "to_csv", "export_all_entries"]
