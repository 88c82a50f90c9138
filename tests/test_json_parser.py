import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from ompcore.json_parser import JsonParser


def _write_person(path):
    parser = JsonParser()
    parser.write_value("name", "firstname")
    parser.write_value("age", 5)
    return parser.write_to_file(path)


def _read_person(path):
    parser = JsonParser()
    ok = parser.populate_from_file(path)
    return ok, parser.read_value("name"), parser.read_value("age")


def test_concurrent_write_then_read(tmp_path):
    paths = [tmp_path / name for name in ("one.json", "two.json", "three.json")]
    with ThreadPoolExecutor(max_workers=3) as pool:
        written = list(pool.map(_write_person, paths))
    assert written == [True, True, True]

    with ThreadPoolExecutor(max_workers=3) as pool:
        results = list(pool.map(_read_person, paths))
    assert results == [(True, "firstname", 5)] * 3

    for path in paths:
        parser = JsonParser()
        assert parser.populate_from_file(path) is True
        assert parser.read_value("name") == "firstname"
        assert parser.read_value("age") == 5


def _fill(parser):
    text = "text"
    parser.write_value("one", text)
    parser.write_value("two", text)
    parser.write_value("three", "another text")
    parser.write_value("four", True)
    parser.write_value("five", 4)
    parser.write_value("six", 4.5)
    parser.write_value("seven", 3.4)
    parser.write_value("eight", "d")
    parser.write_value("nine", [4.0, 5.0, 6.0, 7.0])
    nested = JsonParser()
    nested.write_value("four", True)
    nested.write_value("five", 4)
    nested.write_value("six", 4.5)
    parser.write_object("obj", nested)


def _check_scalars(parser):
    assert parser.read_value("one") == "text"
    assert parser.read_value("two") == "text"
    assert parser.read_value("three") == "another text"
    assert parser.read_value("four") is True
    assert parser.read_value("five") == 4
    assert parser.read_value("six") == 4.5
    assert parser.read_value("seven") == 3.4
    assert parser.read_value("eight") == "d"


def test_many_types_round_trip_through_file(tmp_path):
    path = tmp_path / "four.json"
    parser = JsonParser()
    _fill(parser)
    assert parser.write_to_file(path)

    read_parser = JsonParser()
    assert read_parser.populate_from_file(path)
    _check_scalars(read_parser)
    nested = read_parser.read_object("obj")
    assert nested.read_value("four") is True
    assert nested.read_value("five") == 4
    assert nested.read_value("six") == 4.5

    copied = JsonParser(parser.to_dict())
    _check_scalars(copied)
    nine = copied.read_value("nine")
    assert len(nine) == 4
    assert nine[0] == 4.0


def test_missing_value_is_none():
    parser = JsonParser({"a": 1})
    assert parser.read_value("b") is None
    assert (parser.read_value("b") or "dd") == "dd"


def test_read_object_missing_raises():
    with pytest.raises(KeyError):
        JsonParser().read_object("missing")


def test_read_object_not_an_object_raises():
    with pytest.raises(TypeError):
        JsonParser({"a": 3}).read_object("a")


def test_contains():
    parser = JsonParser()
    parser.write_value("key", 1)
    assert parser.contains("key")
    assert "key" in parser
    assert not parser.contains("other")


def test_to_string_is_compact_and_sorted():
    parser = JsonParser({"b": 1, "a": [1, 2]})
    assert parser.to_string() == '{"a":[1,2],"b":1}'


def test_set_is_written_as_sorted_list():
    parser = JsonParser()
    parser.write_value("deps", {3, 1, 2})
    assert parser.read_value("deps") == [1, 2, 3]


def test_unsupported_value_raises():
    with pytest.raises(TypeError):
        JsonParser().write_value("bad", object())


def test_read_value_returns_copy():
    parser = JsonParser({"list": [1, 2]})
    parser.read_value("list").append(3)
    assert parser.read_value("list") == [1, 2]


def test_populate_missing_file_returns_false(tmp_path):
    assert JsonParser().populate_from_file(tmp_path / "nope.json") is False


def test_write_to_bad_directory_returns_false(tmp_path):
    assert JsonParser().write_to_file(tmp_path / "missing" / "x.json") is False


def test_populate_malformed_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        JsonParser().populate_from_file(path)


def test_file_is_indented(tmp_path):
    path = tmp_path / "x.json"
    JsonParser({"a": 1}).write_to_file(path)
    assert path.read_text(encoding="utf-8") == '{\n    "a": 1\n}\n'