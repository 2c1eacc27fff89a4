import pytest

from judgeit_core import Player, Team
from judgeit_core.lookups import (
    active_teams,
    player_fun_fact,
    player_image_with_fallback,
    player_name_with_team,
    team_members,
    team_players,
)
from judgeit_core.types import TEAM_SLOTS

PLAYERS = [
    Player(id="p1", name="Ana", fun_fact=""),
    Player(id="p2", name="Bo", image_url="https://img/bo.png"),
]
TEAMS = [
    Team(id="t1", name="Sharks", player_ids=("p1", None, "p2", None), image_url="https://img/sharks.png"),
    Team(id="t2", name="Gulls", player_ids=("p9",), is_out=True),
    Team(id="t3", name="Crabs"),
]


def test_team_slots_are_padded_to_four():
    assert len(TEAMS[1].player_ids) == TEAM_SLOTS
    assert TEAMS[1].player_ids == ("p9", None, None, None)
    assert TEAMS[2].members() == ()


def test_team_rejects_more_than_four_slots():
    with pytest.raises(ValueError):
        Team(id="t9", name="Crowd", player_ids=("a", "b", "c", "d", "e"))


def test_active_teams_skips_eliminated_teams():
    assert [t.id for t in active_teams(TEAMS)] == ["t1", "t3"]


def test_team_members_keep_slot_order_and_skip_unknown_players():
    assert team_members("t1", TEAMS) == ("p1", "p2")
    assert [p.name for p in team_players("t1", TEAMS, PLAYERS)] == ["Ana", "Bo"]
    assert team_players("t2", TEAMS, PLAYERS) == []
    assert team_members("missing", TEAMS) == ()


def test_display_helpers_never_raise_on_missing_references():
    assert player_name_with_team("p1", PLAYERS, TEAMS) == "Ana - Sharks"
    assert player_name_with_team("ghost", PLAYERS, TEAMS) == ""
    assert player_image_with_fallback("p1", PLAYERS, TEAMS) == "https://img/sharks.png"
    assert player_image_with_fallback("ghost", PLAYERS, TEAMS) == ""
    assert player_fun_fact("p1", PLAYERS) is None
