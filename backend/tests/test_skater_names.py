from evt_core.skater import SourceSkater, split_skater_name


def test_split_skater_name_with_id() -> None:
    assert split_skater_name("123 SMITH, JOHN") == ("123", "SMITH", "JOHN")


def test_split_skater_name_keeps_multi_part_id_before_last_space() -> None:
    assert split_skater_name("A 12 DE GROOT, ANNA MARIE") == ("A 12 DE", "GROOT", "ANNA MARIE")


def test_split_skater_name_without_comma_is_last_name() -> None:
    assert split_skater_name("  SMITH JOHN ") == ("", "SMITH JOHN", "")


def test_split_skater_name_without_id() -> None:
    assert split_skater_name("SMITH, JOHN") == ("", "SMITH", "JOHN")


def test_split_skater_name_blank_input() -> None:
    assert split_skater_name("") == ("", "", "")
    assert split_skater_name("   ") == ("", "", "")
    assert split_skater_name(None) == ("", "", "")


def test_full_name_rebuilds_export_format() -> None:
    skater = SourceSkater(lane=2, skater_id="77", last_name="LEE", first_name="AMY", club="Ottawa")
    assert skater.full_name == "77 LEE, AMY"
    assert skater.to_target().lane == 2
    assert skater.to_target().skater_id == "77"
