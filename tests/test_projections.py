from judgeit_core import (
    MEDALS,
    Err,
    Heat,
    Interval,
    Ok,
    Player,
    Team,
    TimeLog,
    TimeType,
    compare_players,
    compare_teams,
    leaderboard_view,
    performance_score,
    radar_view,
    replay_delay_ms,
    rpm_view,
)
from judgeit_core.projections import rank_by_rpm

_ids = iter(range(1, 10_000))

PLAYERS = [
    Player(id="p1", name="Ana"),
    Player(id="p2", name="Bo", image_url="https://img/bo.png", fun_fact="Can juggle"),
    Player(id="p3", name="Cy"),
    Player(id="p4", name="Di"),
]
TEAMS = [
    Team(id="t1", name="Sharks", player_ids=("p1", "p2", None, None), image_url="https://img/sharks.png"),
    Team(id="t2", name="Gulls", player_ids=("p3", None, None, None)),
]
HEATS = [
    Heat(id="h2023", heat=1, date="2023-06-10"),
    Heat(id="h2024a", heat=3, date="2024-06-08"),
    Heat(id="h2024b", heat=4, date="2024-06-08"),
]
TIME_TYPES = [
    TimeType(id="tt-beer", name="Øl", time_eng="Beer"),
    TimeType(id="tt-spin", name="Snurr", time_eng="Spin"),
    TimeType(id="tt-sail", name="Seil", time_eng="Sail"),
]


def _log(player, heat, time, *, team=None, type_id="tt-beer"):
    return TimeLog(
        id=f"log{next(_ids)}",
        player_id=player,
        heat_id=heat,
        time_type_id=type_id,
        time=time,
        team_id=team,
    )


def _attempt(player, heat, start, stop, *, team=None, type_id="tt-beer"):
    return [
        _log(player, heat, start, team=team, type_id=type_id),
        _log(player, heat, stop, team=team, type_id=type_id),
    ]


def _beer_logs():
    return (
        _attempt("p1", "h2024a", "18:00:00.000", "18:00:10.000", team="t1")
        + _attempt("p2", "h2024a", "18:00:01.000", "18:00:13.345", team="t1")
        + _attempt("p3", "h2024b", "18:30:00.000", "18:30:15.000", team="t2")
        + _attempt("p1", "h2024b", "18:31:00.000", "18:31:20.000", team="t1")
        # Faster, but in another season.
        + _attempt("p4", "h2023", "18:00:00.000", "18:00:01.000")
    )


def test_leaderboard_leader_shows_time_others_show_gap():
    result = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024)
    assert isinstance(result, Ok)
    rows = result.value.rows
    assert [r.player_id for r in rows] == ["p1", "p2", "p3"]
    assert [r.display_label for r in rows] == ["00:10:000", "+2.345s", "+5.000s"]
    assert [r.medal for r in rows] == list(MEDALS[:3])
    assert [r.rank for r in rows] == [1, 2, 3]


def test_leaderboard_rows_are_enriched_from_reference_tables():
    rows = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024).value.rows
    ana, bo, cy = rows
    assert (ana.player_name, ana.team_name, ana.heat_number) == ("Ana", "Sharks", "3")
    # No own picture: falls back to the team picture.
    assert ana.image_url == "https://img/sharks.png"
    assert bo.image_url == "https://img/bo.png"
    assert cy.image_url == ""
    assert cy.heat_number == "4"


def test_leaderboard_excludes_other_years():
    rows = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, TIME_TYPES, 2023).value.rows
    assert [r.player_id for r in rows] == ["p4"]
    assert rows[0].display_label == "00:01:000"


def test_leaderboard_is_capped_at_five_players():
    players = [Player(id=f"x{n}", name=f"X{n}") for n in range(7)]
    logs = []
    for n in range(7):
        logs += _attempt(f"x{n}", "h2024a", "10:00:00.000", f"10:00:1{n}.000")
    rows = leaderboard_view("Beer", logs, players, [], HEATS, TIME_TYPES, 2024).value.rows
    assert [r.player_id for r in rows] == ["x0", "x1", "x2", "x3", "x4"]
    assert rows[4].medal == MEDALS[4]


def test_leaderboard_missing_time_type_is_err():
    time_types = [t for t in TIME_TYPES if t.time_eng != "Beer"]
    result = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, time_types, 2024)
    assert isinstance(result, Err)
    assert result.kind == "time_type_not_found"
    assert not result.success


def test_leaderboard_empty_season_is_ok_and_empty():
    result = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, TIME_TYPES, 2019)
    assert isinstance(result, Ok)
    assert result.value.is_empty


def test_leaderboard_is_deterministic():
    logs = _beer_logs()
    first = leaderboard_view("Beer", logs, PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024)
    second = leaderboard_view("Beer", logs, PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024)
    assert first == second


def test_rpm_reranks_by_revolutions_per_minute():
    intervals = [
        Interval(player_id="p1", heat_id="h2024a", team_id="t1", duration=1000, formatted_duration="00:01:000"),
        Interval(player_id="p2", heat_id="h2024a", team_id="t1", duration=2000, formatted_duration="00:02:000"),
        Interval(player_id="p3", heat_id="h2024b", team_id="t2", duration=500, formatted_duration="00:00:500"),
    ]
    rows = rank_by_rpm(intervals, PLAYERS, TEAMS, HEATS, revolutions=10)
    assert [r.player_id for r in rows] == ["p3", "p1", "p2"]
    assert [r.rpm for r in rows] == [1200.0, 600.0, 300.0]
    assert [r.display_label for r in rows] == ["1200 RPM", "-600 RPM", "-900 RPM"]
    assert [r.rank for r in rows] == [1, 2, 3]


def test_rpm_view_uses_configured_revolutions():
    logs = _attempt("p1", "h2024a", "19:00:00.000", "19:00:06.000", type_id="tt-spin")
    result = rpm_view("Spin", logs, PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024)
    assert isinstance(result, Ok)
    assert result.value.revolutions == 10
    assert result.value.rows[0].display_label == "100 RPM"


def test_performance_score_scales_and_edges():
    assert performance_score(2000, "Beer") == 100
    assert performance_score(1000, "Beer") == 100
    assert performance_score(120000, "Beer") == 0
    assert performance_score(61000, "Beer") == 50
    assert performance_score(0, "Beer") == 0
    assert performance_score(-3000, "Beer") == 0
    assert performance_score(float("nan"), "Beer") == 0
    assert performance_score(5000, "Juggle") == 0


def test_radar_view_for_player():
    view = radar_view("p1", {"Beer": 2000, "Spin": 60000}, PLAYERS, TEAMS)
    assert view.name == "Ana - Sharks"
    assert view.image_url == "https://img/sharks.png"
    assert [(p.subject, p.performance, p.full_mark) for p in view.data] == [
        ("Beer", 100, 100),
        ("Spin", 0, 100),
        ("Sail", 0, 100),
    ]


def test_radar_view_player_without_team_uses_bare_name():
    view = radar_view("p4", {}, PLAYERS, TEAMS)
    assert view.name == "Di"


def test_compare_players_builds_two_views():
    logs = _attempt("p1", "h2024a", "18:00:00.000", "18:00:02.000") + _attempt(
        "p2", "h2023", "18:00:00.000", "18:02:00.000"
    )
    result = compare_players("p1", "p2", logs, PLAYERS, TEAMS, TIME_TYPES)
    assert isinstance(result, Ok)
    left, right = result.value
    assert left.data[0].performance == 100
    assert right.data[0].performance == 0
    assert right.fun_fact == "Can juggle"


def test_compare_players_missing_time_type_is_err():
    result = compare_players("p1", "p2", [], PLAYERS, TEAMS, TIME_TYPES[:1])
    assert isinstance(result, Err)
    assert result.kind == "time_type_not_found"


def test_compare_teams_averages_members_with_times():
    logs = _attempt("p1", "h2024a", "18:00:00.000", "18:00:02.000") + _attempt(
        "p2", "h2024a", "18:00:00.000", "18:02:00.000"
    )
    result = compare_teams("t1", "t2", logs, TEAMS, TIME_TYPES)
    assert isinstance(result, Ok)
    sharks, gulls = result.value
    assert sharks.name == "Sharks"
    assert sharks.image_url == "https://img/sharks.png"
    # Mean of 2s and 120s is 61s, halfway along the beer scale.
    assert sharks.data[0].performance == 50
    assert [p.performance for p in gulls.data] == [0, 0, 0]


def test_replay_delay_is_longest_displayed_duration():
    rows = leaderboard_view("Beer", _beer_logs(), PLAYERS, TEAMS, HEATS, TIME_TYPES, 2024).value.rows
    assert replay_delay_ms(rows) == 15000
    assert replay_delay_ms([]) == 0
