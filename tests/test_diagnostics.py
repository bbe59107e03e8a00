import json

from jsonguard.diagnostics import extract_position, format_error, get_context


def test_position_from_message():
    assert extract_position(ValueError("Unexpected token } in JSON at position 12")) == 12
    assert extract_position(ValueError("Expecting value: line 3 column 1 (char 10)")) == 10


def test_position_from_decoder_error():
    try:
        json.loads('{"a": 1,}')
    except json.JSONDecodeError as exc:
        assert extract_position(exc) == exc.pos


def test_line_is_converted_approximately():
    assert extract_position(ValueError("Unexpected end at line 3")) == 160
    assert extract_position(ValueError("bad LINE 1")) == 0


def test_no_position():
    assert extract_position(ValueError("something went wrong")) is None
    assert extract_position(None) is None


def test_context_window():
    text = "abcdefghijklmnopqrstuvwxyz"
    assert get_context(text, 10, radius=3) == "hijklm"
    assert get_context(text, 1, radius=3) == "abcd"
    assert get_context(text, 24, radius=3) == "vwxyz"


def test_context_escapes_control_characters():
    assert get_context("ab\ncd\te\rf", 4, radius=4) == "ab\\ncd\\te\\r"


def test_context_out_of_range():
    text = "x" * 100
    assert get_context(text, 500) == "x" * 50
    assert get_context(text, -1) == "x" * 50
    assert get_context("short", 99) == "short"


def test_format_error():
    error = ValueError("boom")
    assert format_error(error, 5, "ctx") == "Invalid JSON at position 5: boom\nContext: ...ctx..."
    assert format_error(error, 5) == "Invalid JSON at position 5: boom"
    assert format_error(error) == "Invalid JSON: boom"
    assert format_error(None) == "Invalid JSON: Unknown error"
