"""Reference-table lookups used to enrich ranking rows.

``find_*`` helpers return the record or None. Display helpers never raise: a
missing reference renders as an empty string so partially-resolved rows can
still be shown while a heat is being entered.
"""
from __future__ import annotations

from typing import Sequence

from .result import Err, Ok, Result
from .types import Heat, Player, Team, TimeType


def find_player(player_id: str | None, players: Sequence[Player]) -> Player | None:
    if not player_id:
        return None
    return next((p for p in players if p.id == player_id), None)


def find_team(team_id: str | None, teams: Sequence[Team]) -> Team | None:
    if not team_id:
        return None
    return next((t for t in teams if t.id == team_id), None)


def find_heat(heat_id: str | None, heats: Sequence[Heat]) -> Heat | None:
    if not heat_id:
        return None
    return next((h for h in heats if h.id == heat_id), None)


def find_time_type(key: str, time_types: Sequence[TimeType]) -> Result[TimeType]:
    """Resolve an activity by its machine key (ids differ between deployments)."""
    for time_type in time_types:
        if time_type.time_eng == key:
            return Ok(time_type)
    return Err(kind="time_type_not_found", message=f"{key} time type not found")


def player_name(player_id: str | None, players: Sequence[Player]) -> str:
    player = find_player(player_id, players)
    return player.name if player else ""


def player_team(player_id: str | None, teams: Sequence[Team]) -> Team | None:
    if not player_id:
        return None
    return next((t for t in teams if player_id in t.members()), None)


def player_name_with_team(
    player_id: str | None, players: Sequence[Player], teams: Sequence[Team]
) -> str:
    player = find_player(player_id, players)
    if player is None:
        return ""
    team = player_team(player.id, teams)
    return f"{player.name} - {team.name}" if team else player.name


def team_name(team_id: str | None, teams: Sequence[Team]) -> str:
    team = find_team(team_id, teams)
    return team.name if team else ""


def team_members(team_id: str | None, teams: Sequence[Team]) -> tuple[str, ...]:
    team = find_team(team_id, teams)
    return team.members() if team else ()


def team_players(team_id: str | None, teams: Sequence[Team], players: Sequence[Player]) -> list[Player]:
    found = (find_player(pid, players) for pid in team_members(team_id, teams))
    return [p for p in found if p is not None]


def active_teams(teams: Sequence[Team]) -> list[Team]:
    return [t for t in teams if not t.is_out]


def heat_number(heat_id: str | None, heats: Sequence[Heat]) -> str:
    heat = find_heat(heat_id, heats)
    return str(heat.heat) if heat else ""


def heat_year_label(heat_id: str | None, heats: Sequence[Heat]) -> str:
    heat = find_heat(heat_id, heats)
    if heat is None or heat.year is None:
        return ""
    return str(heat.year)


def team_image_url(team_id: str | None, teams: Sequence[Team]) -> str:
    team = find_team(team_id, teams)
    return (team.image_url or "") if team else ""


def player_image_with_fallback(
    player_id: str | None, players: Sequence[Player], teams: Sequence[Team]
) -> str:
    player = find_player(player_id, players)
    if player and player.image_url:
        return player.image_url
    team = player_team(player_id, teams)
    return (team.image_url or "") if team else ""


def player_fun_fact(player_id: str | None, players: Sequence[Player]) -> str | None:
    player = find_player(player_id, players)
    return (player.fun_fact or None) if player else None
