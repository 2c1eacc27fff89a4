from .config import DEFAULT_CONFIG, PerformanceScale, ScoringConfig
from .export import CSV_HEADER, export_all_entries, to_csv
from .intervals import (
    filter_and_sort_time_logs,
    reconstruct_intervals,
    sort_time_logs_by_heat,
    sort_time_logs_by_time,
    split_by_heat,
)
from .judging import create_heat, current_heat, log_handover, log_time, previous_player_id, set_current_heat
from .progress import PlayerProgress, TeamProgress, heat_progress
from .projections import (
    ACTIVITY_KEYS,
    MEDALS,
    LeaderboardRow,
    LeaderboardView,
    RadarPoint,
    RadarView,
    RpmRow,
    RpmView,
    compare_players,
    compare_teams,
    leaderboard_view,
    performance_score,
    radar_view,
    replay_delay_ms,
    rpm_view,
)
from .result import Err, Notification, Ok, Result, notification_for
from .seasons import default_year, get_unique_years_given_heats, unique_years
from .selection import LEADERBOARD_LIMIT, best_intra_heat_for_player, best_per_player
from .store import InMemoryStore, RecordStore, Snapshot, StoreError, load_snapshot
from .timecodec import (
    duration_between,
    format_duration,
    millis_to_seconds,
    parse_clock_time,
    rpm_from_duration,
)
from .types import ActivityKey, Heat, Interval, Player, Team, TimeLog, TimeType
from .validation import InputSanitizer, RecordSanitizer, TimeLogInput

__all__ = [
    "DEFAULT_CONFIG",
    "PerformanceScale",
    "ScoringConfig",
    "CSV_HEADER",
    "export_all_entries",
    "to_csv",
    "filter_and_sort_time_logs",
    "reconstruct_intervals",
    "sort_time_logs_by_heat",
    "sort_time_logs_by_time",
    "split_by_heat",
    "create_heat",
    "current_heat",
    "log_handover",
    "log_time",
    "previous_player_id",
    "set_current_heat",
    "PlayerProgress",
    "TeamProgress",
    "heat_progress",
    "ACTIVITY_KEYS",
    "MEDALS",
    "LeaderboardRow",
    "LeaderboardView",
    "RadarPoint",
    "RadarView",
    "RpmRow",
    "RpmView",
    "compare_players",
    "compare_teams",
    "leaderboard_view",
    "performance_score",
    "radar_view",
    "replay_delay_ms",
    "rpm_view",
    "Err",
    "Notification",
    "Ok",
    "Result",
    "notification_for",
    "default_year",
    "get_unique_years_given_heats",
    "unique_years",
    "LEADERBOARD_LIMIT",
    "best_intra_heat_for_player",
    "best_per_player",
    "InMemoryStore",
    "RecordStore",
    "Snapshot",
    "StoreError",
    "load_snapshot",
    "duration_between",
    "format_duration",
    "millis_to_seconds",
    "parse_clock_time",
    "rpm_from_duration",
    "ActivityKey",
    "Heat",
    "Interval",
    "Player",
    "Team",
    "TimeLog",
    "TimeType",
    "InputSanitizer",
    "RecordSanitizer",
    "TimeLogInput",
]
