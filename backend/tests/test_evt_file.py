import codecs

from evt_core.evt import load_event_file, read_event_races, render_event_file, write_event_file
from evt_core.race import TargetRace, compare_race_numbers, format_laps, sort_races
from evt_core.skater import TargetSkater

EVENT_TEXT = (
    '3A,,,"Open Men A (1500m) Final",,,,,,,,,13.5\r\n'
    ",123,1\r\n"
    ",456,2\r\n"
    "\r\n"
    "stray,row\r\n"
    '25A,,,"Open Women B (500m) Heat, 2 +2",,,,,,,,,\r\n'
    ",789,4\r\n"
    ",bad,x\r\n"
)


def test_read_event_races_parses_headers_and_skaters() -> None:
    races = read_event_races(EVENT_TEXT)

    assert [race.race_number for race in races] == ["3A", "25A"]
    first, second = races
    assert first.full_event_name == "Open Men A (1500m) Final"
    assert first.laps == 13.5
    assert [(s.lane, s.skater_id) for s in first.skaters] == [(1, "123"), (2, "456")]
    assert second.full_event_name == "Open Women B (500m) Heat, 2 +2"
    assert second.laps is None
    assert [(s.lane, s.skater_id) for s in second.skaters] == [(4, "789")]


def test_read_event_races_ignores_skaters_before_first_race() -> None:
    races = read_event_races(",123,1\r\n" + '1,,,"A",,,,,,,,,\r\n')
    assert len(races) == 1
    assert races[0].skaters == []


def test_row_with_filled_second_field_is_not_a_race() -> None:
    assert read_event_races('1,x,,"A",,,,,,,,,2\r\n') == []


def test_load_event_file_missing_is_empty(tmp_path) -> None:
    assert load_event_file(tmp_path / "lynx.evt") == []


def test_render_event_file_layout() -> None:
    race = TargetRace(
        race_number="12",
        full_event_name="Open Men A (1500m) Final",
        laps=13.5,
        skaters=[TargetSkater(lane=2, skater_id="7"), TargetSkater(lane=1, skater_id="5")],
    )

    content = render_event_file([race])

    assert content == (
        '12,,,"Open Men A (1500m) Final"' + "," * 9 + "13.5\r\n"
        ",5,1\r\n"
        ",7,2\r\n"
    )
    header = content.split("\r\n")[0]
    assert len(header.split(",")) == 13


def test_render_event_file_sorts_races_naturally() -> None:
    races = [TargetRace(race_number=number) for number in ["25A", "3B", "10", "3A"]]
    content = render_event_file(races)
    numbers = [line.split(",")[0] for line in content.splitlines()]
    assert numbers == ["3A", "3B", "10", "25A"]


def test_render_event_file_quotes_event_name_with_quotes() -> None:
    race = TargetRace(race_number="1", full_event_name='Say "go"')
    assert render_event_file([race]).startswith('1,,,"Say ""go"""')


def test_format_laps() -> None:
    assert format_laps(2.0) == "2"
    assert format_laps(2.5) == "2.5"
    assert format_laps(13.5) == "13.5"
    assert format_laps(9) == "9"
    assert format_laps(None) == ""


def test_natural_race_number_order() -> None:
    assert compare_race_numbers("3A", "3B") < 0
    assert compare_race_numbers("3B", "25A") < 0
    assert compare_race_numbers("", "1") < 0
    assert compare_race_numbers(None, "1") < 0
    assert compare_race_numbers("3a", "3A") == 0
    assert compare_race_numbers("B", "1") < 0
    assert compare_race_numbers("10", "9") > 0


def test_sort_races_is_natural() -> None:
    races = [TargetRace(race_number=n) for n in ["25A", "", "3B", "3A"]]
    assert [race.race_number for race in sort_races(races)] == ["", "3A", "3B", "25A"]


def test_write_then_read_round_trip(tmp_path) -> None:
    path = tmp_path / "out" / "lynx.evt"
    races = read_event_races(EVENT_TEXT)

    write_event_file(path, races, "ascii")

    assert read_event_races(path.read_text(encoding="ascii")) == races


def test_write_event_file_encodings(tmp_path) -> None:
    race = TargetRace(race_number="1", full_event_name="Élite (500m) Final", laps=4.5)

    utf16 = tmp_path / "utf16.evt"
    write_event_file(utf16, [race], "utf-16")
    assert utf16.read_bytes()[:2] in (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)
    assert load_event_file(utf16)[0].full_event_name == "Élite (500m) Final"

    utf8 = tmp_path / "utf8.evt"
    write_event_file(utf8, [race], "utf-8-sig")
    assert utf8.read_bytes().startswith(codecs.BOM_UTF8)
    assert load_event_file(utf8)[0].full_event_name == "Élite (500m) Final"

    ascii_path = tmp_path / "ascii.evt"
    write_event_file(ascii_path, [race], "ascii")
    assert load_event_file(ascii_path)[0].full_event_name == "?lite (500m) Final"


def test_write_event_file_leaves_no_temporary_files(tmp_path) -> None:
    path = tmp_path / "lynx.evt"
    path.write_text("old")

    write_event_file(path, [TargetRace(race_number="1")], "ascii")

    assert [p.name for p in tmp_path.iterdir()] == ["lynx.evt"]
    assert path.read_text().startswith('1,,,""')


def test_read_event_races_keeps_quotes_inside_event_name() -> None:
    races = read_event_races('1,,,"""Open"" (500m) Heat ""2""",,,,,,,,,\r\n')
    assert races[0].full_event_name == '"Open" (500m) Heat "2"'
