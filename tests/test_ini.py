import pytest

from retrokit.ini import ConfigItem, IniParser, ItemType


SAMPLE = (
    "# a comment line\n"
    "Name=Test Mod\n"
    "Spaced = padded\n"
    "[mods]\n"
    "First=true\n"
    "Second=1\n"
    "Third=yes\n"
    "[Game]\n"
    "Count=42abc\n"
    "Bad=abc\n"
    "Ratio=1.5x\n"
    "Tabbed=left\tright\n"
)


@pytest.fixture
def parser():
    return IniParser.parse(SAMPLE)


def test_parse_collects_items_in_order(parser):
    keys = [item.key for item in parser.items]
    assert keys == ["Name", "Spaced ", "First", "Second", "Third", "Count", "Bad", "Ratio", "Tabbed"]


def test_comment_line_is_skipped(parser):
    assert all(not item.key.startswith("#") for item in parser.items)


def test_sectionless_items(parser):
    assert parser.get_string("", "Name") == "Test Mod"
    assert parser.items[0].has_section is False


def test_key_keeps_trailing_space(parser):
    assert parser.get_string("", "Spaced ") == "padded"
    assert parser.get_string("", "Spaced") is None


def test_section_assignment(parser):
    assert parser.get_string("mods", "First") == "true"
    assert parser.get_string("", "First") is None
    item = parser.items[2]
    assert item.section == "mods" and item.has_section is True


def test_get_bool(parser):
    assert parser.get_bool("mods", "First") is True
    assert parser.get_bool("mods", "Second") is True
    assert parser.get_bool("mods", "Third") is False
    assert parser.get_bool("mods", "Missing") is None


def test_get_bool_is_case_insensitive():
    ini = IniParser.parse("a=TRUE\nb=True\n")
    assert ini.get_bool("", "a") is True
    assert ini.get_bool("", "b") is True


def test_get_integer_uses_leading_digits(parser):
    assert parser.get_integer("Game", "Count") == 42
    assert parser.get_integer("Game", "Bad") == 0
    assert parser.get_integer("Game", "Nope") is None


def test_get_float_uses_leading_number(parser):
    assert parser.get_float("Game", "Ratio") == 1.5
    assert parser.get_float("Game", "Bad") == 0.0


def test_value_stops_at_tab(parser):
    assert parser.get_string("Game", "Tabbed") == "left"


def test_lines_without_equals_are_ignored():
    ini = IniParser.parse("justtext\n;note=1\n=novalue\nkey=\n")
    assert ini.items == []


def test_carriage_return_excluded_from_value():
    ini = IniParser.parse("k=v\r\n")
    assert ini.get_string("", "k") == "v"


def test_set_string_replaces_in_place(parser):
    count = len(parser.items)
    parser.set_string("mods", "First", "false")
    assert len(parser.items) == count
    assert parser.get_bool("mods", "First") is False


def test_setters_append_new_items():
    ini = IniParser()
    ini.set_integer("s", "i", 7)
    ini.set_bool("s", "b", True)
    ini.set_float("s", "f", 1.5)
    assert ini.get_integer("s", "i") == 7
    assert ini.get_string("s", "b") == "true"
    assert ini.get_string("s", "f") == "1.500000"
    assert [item.type for item in ini.items] == [ItemType.INT, ItemType.BOOL, ItemType.FLOAT]


def test_dumps_layout():
    ini = IniParser()
    ini.set_string("", "a", "1")
    ini.set_bool("mods", "x", True)
    assert ini.dumps() == "a=1\n\n[mods]\nx=true\n"


def test_dumps_comment():
    ini = IniParser()
    ini.set_comment("", "c", "hello")
    assert ini.dumps() == "; hello\n\n"


def test_dumps_merges_repeated_first_and_last_section():
    ini = IniParser(
        items=[
            ConfigItem(section="A", key="one", value="1"),
            ConfigItem(section="B", key="two", value="2"),
            ConfigItem(section="A", key="three", value="3"),
        ]
    )
    assert ini.dumps() == "\n[A]\none=1\nthree=3\n\n[B]\ntwo=2\n"


def test_write_and_load_round_trip(tmp_path):
    ini = IniParser()
    ini.set_string("", "Name", "Example")
    ini.set_bool("mods", "Alpha", True)
    ini.set_bool("mods", "Beta", False)
    ini.set_integer("Game", "Lives", 3)
    path = tmp_path / "config.ini"
    ini.write(path)
    loaded = IniParser.load(path)
    assert loaded.get_string("", "Name") == "Example"
    assert loaded.get_bool("mods", "Alpha") is True
    assert loaded.get_bool("mods", "Beta") is False
    assert loaded.get_integer("Game", "Lives") == 3


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        IniParser.load(tmp_path / "absent.ini")