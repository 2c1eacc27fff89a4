import csv
import io

from judgeit_core import Heat, Interval, Player, Team, export_all_entries, to_csv

HEATS = [Heat(id="h1", heat=2, date="2024-06-08")]
TEAMS = [Team(id="t1", name='The "Fast" Ones', player_ids=("p1", None, None, None))]


def _interval(player, duration, *, team="t1", heat="h1", formatted=""):
    return Interval(player_id=player, heat_id=heat, team_id=team, duration=duration, formatted_duration=formatted)


def test_header_row_and_no_trailing_newline():
    out = to_csv([], [], [], [])
    assert out == "Formatted Time,Player,Team,Heat,Heat Year"


def test_fields_with_commas_and_quotes_are_quoted():
    players = [Player(id="p1", name="Doe, Jane")]
    out = to_csv([_interval("p1", 10500, formatted="00:10:500")], players, TEAMS, HEATS)
    lines = out.split("\n")
    assert lines[1] == '00:10:500,"Doe, Jane","The ""Fast"" Ones",2,2024'
    parsed = list(csv.reader(io.StringIO(out)))
    assert parsed[1] == ["00:10:500", "Doe, Jane", 'The "Fast" Ones', "2", "2024"]


def test_missing_references_render_empty_fields():
    out = to_csv([_interval("ghost", 4000, team=None, heat="nope")], [], [], [])
    assert out.split("\n")[1] == "00:04:000,,,,"


def test_export_all_entries_keeps_every_player_best_once():
    players = [Player(id=f"p{n}", name=f"P{n}") for n in range(7)]
    intervals = [_interval(f"p{n}", 1000 * (n + 1), team=None) for n in range(7)]
    intervals.append(_interval("p0", 9000, team=None))
    lines = export_all_entries(intervals, players, [], HEATS).split("\n")
    assert len(lines) == 8
    assert [line.split(",")[1] for line in lines[1:]] == [f"P{n}" for n in range(7)]
    assert lines[1].startswith("00:01:000,")


def test_fields_with_line_breaks_are_quoted():
    players = [Player(id="p1", name="Line\nBreak")]
    out = to_csv([_interval("p1", 10500, team=None, formatted="00:10:500")], players, [], HEATS)
    assert out == 'Formatted Time,Player,Team,Heat,Heat Year\n00:10:500,"Line\nBreak",,2,2024'
    parsed = list(csv.reader(io.StringIO(out)))
    assert len(parsed) == 2
    assert parsed[1] == ["00:10:500", "Line\nBreak", "", "2", "2024"]
