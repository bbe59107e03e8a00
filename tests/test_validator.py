import pytest

from jsonguard.exceptions import SchemaDefinitionError, SchemaMismatchError
from jsonguard.models.schema import compile_schema
from jsonguard.utils.type_names import UNDEFINED
from jsonguard.validator import ValidationIssue, ValidationResult, assert_valid, validate


def test_valid_value(user_schema):
    value = {"name": "Ada", "tags": ["x"], "address": {"street": "Main", "zip": 1}}
    assert validate(value, user_schema) == ValidationResult(True, None)


def test_result_unpacks_as_pair():
    valid, error = validate({"name": "John", "age": "30"}, {"name": "string", "age": "number"})
    assert valid is False
    assert error == ValidationIssue(
        path="age",
        expected="number",
        actual="string",
        message="Expected number at 'age', got string",
    )
    assert "age" in error.message


def test_array_element_path():
    valid, error = validate({"tags": ["a", 1, "c"]}, {"tags": ["string"]})
    assert not valid
    assert error.path == "tags[1]"
    assert error.expected == "string"
    assert error.actual == "number"


def test_array_of_objects_path():
    value = {"users": [{"name": "ok"}, {"name": 5}]}
    _, error = validate(value, {"users": [{"name": "string"}]})
    assert error.path == "users[1].name"
    assert error.message == "Expected string at 'users[1].name', got number"


def test_array_of_objects_rejects_non_object_element():
    _, error = validate({"users": [5]}, {"users": [{"name": "string"}]})
    assert (error.path, error.expected, error.actual) == ("users[0]", "object", "number")


def test_nested_arrays_extend_the_path():
    _, error = validate({"grid": [[1], [2, "x"]]}, {"grid": [["number"]]})
    assert error.path == "grid[1][1]"


def test_nested_object_path():
    value = {"address": {"street": "Main", "zip": "x"}}
    _, error = validate(value, {"address": {"street": "string", "zip": "number"}})
    assert error.path == "address.zip"


def test_deeply_nested_path():
    schema = {"a": {"b": [{"c": {"d": "boolean"}}]}}
    _, error = validate({"a": {"b": [{"c": {"d": True}}, {"c": {"d": "no"}}]}}, schema)
    assert error.path == "a.b[1].c.d"


@pytest.mark.parametrize("value, actual", [(None, "null"), ([], "array"), ("x", "string"), (UNDEFINED, "undefined")])
def test_nested_schema_requires_an_object(value, actual):
    fields = {} if value is UNDEFINED else {"address": value}
    _, error = validate(fields, {"address": {"zip": "number"}})
    assert (error.path, error.expected, error.actual) == ("address", "object", actual)


def test_first_failure_wins_in_declaration_order():
    value = {"a": 1, "b": "x"}
    assert validate(value, {"a": "string", "b": "number"}).error.path == "a"
    assert validate(value, {"b": "number", "a": "string"}).error.path == "b"


def test_optional_field_absent_or_undefined():
    assert validate({}, {"x": "?string"}).valid
    assert validate({"x": UNDEFINED}, {"x": "?string"}).valid
    assert validate({"x": "set"}, {"x": "?string"}).valid


def test_optional_field_rejects_null():
    valid, error = validate({"x": None}, {"x": "?string"})
    assert not valid
    assert (error.path, error.expected, error.actual) == ("x", "string", "null")


def test_optional_field_wrong_type():
    _, error = validate({"x": 3}, {"x": "?string"})
    assert error.actual == "number"


def test_missing_required_field_is_undefined():
    _, error = validate({}, {"name": "string"})
    assert (error.path, error.actual) == ("name", "undefined")


def test_empty_array_always_matches():
    assert validate({"x": []}, {"x": ["number"]}).valid
    assert validate({"x": []}, {"x": [{"deep": "string"}]}).valid


def test_array_schema_requires_an_array():
    _, error = validate({"x": {"0": 1}}, {"x": ["number"]})
    assert (error.path, error.expected, error.actual) == ("x", "array", "object")


def test_empty_array_declaration_accepts_any_array():
    assert validate({"x": [1, "a", None]}, {"x": []}).valid
    assert validate({"x": 1}, {"x": []}).error.expected == "array"


@pytest.mark.parametrize(
    "value, valid",
    [({}, True), ({"k": 1}, True), ([], False), (None, False), ("{}", False)],
)
def test_object_tag(value, valid):
    assert validate({"meta": value}, {"meta": "object"}).valid is valid


def test_booleans_are_not_numbers():
    _, error = validate({"n": True}, {"n": "number"})
    assert error.actual == "boolean"
    assert validate({"b": 0}, {"b": "boolean"}).error.actual == "number"


def test_tuples_are_arrays():
    assert validate({"x": ("a", "b")}, {"x": ["string"]}).valid


@pytest.mark.parametrize("value, actual", [([1], "array"), (None, "null"), ("s", "string"), (3, "number")])
def test_root_must_be_an_object(value, actual):
    valid, error = validate(value, {"a": "string"})
    assert not valid
    assert (error.path, error.expected, error.actual) == ("root", "object", actual)
    assert error.message == f"Expected object at 'root', got {actual}"


def test_extra_fields_are_ignored():
    assert validate({"name": "x", "extra": object()}, {"name": "string"}).valid


def test_compiled_schema_is_accepted(user_schema):
    compiled = compile_schema(user_schema)
    assert validate({"name": 1}, compiled) == validate({"name": 1}, user_schema)


def test_validation_is_deterministic(user_schema):
    value = {"name": "x", "tags": ["a", 2], "address": None}
    results = {validate(value, user_schema) for _ in range(5)}
    assert len(results) == 1


def test_invalid_schema_raises():
    with pytest.raises(SchemaDefinitionError):
        validate({}, {"a": "int"})


def test_assert_valid():
    assert_valid({"a": "x"}, {"a": "string"})
    with pytest.raises(SchemaMismatchError) as excinfo:
        assert_valid({"a": 1}, {"a": "string"})
    assert excinfo.value.issue.path == "a"
    assert str(excinfo.value) == "Expected string at 'a', got number"


def test_date_is_an_object_for_tags_and_nested_schemas(sample_date):
    assert validate({"m": sample_date}, {"m": "object"}).valid
    assert validate({"m": sample_date}, {"m": {}}).valid
    assert validate(sample_date, {}).valid


def test_non_mapping_object_has_no_fields(sample_date):
    valid, error = validate({"m": sample_date}, {"m": {"year": "number"}})
    assert not valid
    assert (error.path, error.expected, error.actual) == ("m.year", "number", "undefined")
