import json
from dataclasses import dataclass
from enum import Enum

import pytest

from jsonguard.parsing import parse
from jsonguard.serialization import (
    StringifyOptions,
    StringifyResult,
    format_json,
    minify,
    stringify,
    try_stringify,
)
from jsonguard.utils.dates import to_timestamp
from jsonguard.utils.type_names import UNDEFINED


@dataclass
class Point:
    x: int
    y: int


class Color(Enum):
    RED = "red"


def boom(key, value):
    raise RuntimeError("replacer failed")


def test_compact_by_default():
    assert stringify({"a": 1, "b": [1, 2], "c": None, "d": True}) == '{"a":1,"b":[1,2],"c":null,"d":true}'


def test_indentation():
    assert stringify({"a": 1}, space=2) == '{\n  "a": 1\n}'
    assert stringify({"a": 1}, space=0) == '{"a":1}'


def test_self_reference_is_marked_once():
    a = {"name": "a"}
    a["self"] = a
    text = stringify(a)
    assert text == '{"name":"a","self":"[Circular]"}'
    assert text.count("[Circular]") == 1


def test_list_self_reference():
    items = [1]
    items.append(items)
    assert stringify(items) == '[1,"[Circular]"]'


def test_shared_reference_is_also_marked():
    # Known characteristic: any composite emitted once in the call is
    # replaced on every later encounter, not only true cycles.
    shared = {"x": 1}
    assert stringify({"a": shared, "b": shared}) == '{"a":{"x":1},"b":"[Circular]"}'


def test_seen_set_is_scoped_to_one_call():
    shared = {"x": 1}
    first = stringify({"a": shared})
    second = stringify({"a": shared})
    assert first == second == '{"a":{"x":1}}'


def test_equal_but_distinct_objects_are_not_circular():
    assert stringify([{"x": 1}, {"x": 1}]) == '[{"x":1},{"x":1}]'


def test_big_integers_get_a_suffix():
    assert stringify({"n": 2**64}) == '{"n":"18446744073709551616n"}'
    assert stringify({"n": -(2**64)}) == '{"n":"-18446744073709551616n"}'
    assert stringify({"n": 42}) == '{"n":42}'


def test_dates_render_as_iso_by_default(sample_date):
    expected = '{"d":"2023-01-01T10:00:00.123Z"}'
    assert stringify({"d": sample_date}) == expected
    assert stringify({"d": sample_date}, dates=True) == expected
    assert stringify({"d": sample_date}, dates="iso") == expected


def test_timestamp_mode(sample_date):
    text = stringify({"d": sample_date, "nested": [{"d": sample_date}]}, dates="timestamp")
    decoded = json.loads(text)
    assert decoded["d"] == to_timestamp(sample_date) == 1672567200123
    assert decoded["nested"][0]["d"] == 1672567200123


def test_iso_mode_round_trips_through_date_revival(sample_date):
    text = stringify({"d": sample_date}, dates="iso")
    assert parse(text, dates=True)["d"] == sample_date


def test_replacer_runs_first():
    def redact(key, value):
        return "***" if key == "password" else value

    assert stringify({"user": "ada", "password": "hunter2"}, replacer=redact) == '{"user":"ada","password":"***"}'


def test_replacer_output_is_date_converted(sample_date):
    def stamp(key, value):
        return sample_date if key == "when" else value

    assert stringify({"when": None}, replacer=stamp, dates="timestamp") == '{"when":1672567200123}'


def test_replacer_sees_root_and_index_keys():
    keys = []

    def record(key, value):
        keys.append(key)
        return value

    stringify({"a": [10, 20]}, replacer=record)
    assert keys == ["", "a", "0", "1"]


def test_replacer_runs_once_per_enum_member():
    keys = []

    def record(key, value):
        keys.append(key)
        return value

    assert stringify({"k": Color.RED}, replacer=record) == '{"k":"red"}'
    assert keys == ["", "k"]


def test_replacer_can_drop_fields():
    def drop(key, value):
        return UNDEFINED if key == "secret" else value

    assert stringify({"a": 1, "secret": 2}, replacer=drop) == '{"a":1}'


def test_unrepresentable_values():
    assert stringify({"f": len, "a": [len, 1, UNDEFINED]}) == '{"a":[null,1,null]}'


def test_unrepresentable_root():
    assert stringify(len) is None
    assert try_stringify(UNDEFINED) == StringifyResult(None, None)


def test_containers_without_json_projection():
    assert stringify({"s": {1, 2}, "f": frozenset()}) == '{"s":{},"f":{}}'


def test_dataclasses_and_enums():
    assert stringify({"p": Point(1, 2), "c": Color.RED}) == '{"p":{"x":1,"y":2},"c":"red"}'


def test_non_finite_floats_become_null():
    assert stringify([float("nan"), float("inf"), 1.5]) == "[null,null,1.5]"


def test_non_string_keys():
    assert stringify({1: "a", None: "b", 2.5: "c", False: "d"}) == '{"1":"a","null":"b","2.5":"c","false":"d"}'


def test_tuples_are_arrays():
    assert stringify({"t": (1, "x")}) == '{"t":[1,"x"]}'


def test_non_ascii_is_kept():
    assert stringify({"s": "é"}) == '{"s":"é"}'


def test_failures_return_none():
    assert stringify({"a": 1}, replacer=boom) is None


def test_try_stringify_returns_error():
    text, error = try_stringify({"a": 1}, replacer=boom)
    assert text is None
    assert isinstance(error, RuntimeError)
    assert str(error) == "replacer failed"


def test_try_stringify_option_forms(sample_date):
    expected = '{\n  "a": 1\n}'
    assert try_stringify({"a": 1}, 2) == StringifyResult(expected, None)
    assert try_stringify({"a": 1}, StringifyOptions(space=2)).text == expected
    assert try_stringify({"a": 1}, space=2).text == expected
    assert try_stringify({"d": sample_date}, StringifyOptions(), dates="timestamp").text == '{"d":1672567200123}'


def test_try_stringify_rejects_bad_options():
    text, error = try_stringify({"a": 1}, "wide")
    assert text is None
    assert isinstance(error, TypeError)


@pytest.mark.parametrize(
    "value",
    [
        {"a": [1, 2.5, "x", None, True, {"b": []}]},
        [{"k": "v"}, [], {}],
        "plain",
        0,
    ],
)
def test_round_trip(value):
    assert json.loads(stringify(value)) == value


def test_format_json():
    assert format_json('{"a":1}') == '{\n  "a": 1\n}'
    assert format_json({"a": 1}, space=4) == '{\n    "a": 1\n}'
    assert format_json("not json") is None


def test_minify():
    assert minify('{ "a" : [1, 2] }') == '{"a":[1,2]}'
    assert minify({"a": [1, 2]}) == '{"a":[1,2]}'
    assert minify("{bad") is None
