import json

import pytest

from jsonguard.exceptions import SchemaDefinitionError
from jsonguard.models import clear_cache, compile_schema, load_schema_file
from jsonguard.models.schema import ObjectSchema


def test_load_json_schema(tmp_path, user_schema):
    path = tmp_path / "user.schema.json"
    path.write_text(json.dumps(user_schema), encoding="utf-8")
    assert load_schema_file(path) == compile_schema(user_schema)


def test_load_yaml_schema(tmp_path, user_schema):
    path = tmp_path / "user.schema.yaml"
    path.write_text(
        "name: string\n"
        "age: '?number'\n"
        "tags: [string]\n"
        "address:\n"
        "  street: string\n"
        "  zip: number\n",
        encoding="utf-8",
    )
    assert load_schema_file(str(path)) == compile_schema(user_schema)


def test_empty_yaml_is_an_empty_schema(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_schema_file(path) == ObjectSchema()


def test_loaded_schemas_are_cached(tmp_path):
    path = tmp_path / "s.json"
    path.write_text('{"a": "string"}', encoding="utf-8")
    first = load_schema_file(path)
    assert load_schema_file(path) is first
    clear_cache()
    reloaded = load_schema_file(path)
    assert reloaded is not first
    assert reloaded == first


def test_missing_file(tmp_path):
    with pytest.raises(SchemaDefinitionError, match="not found"):
        load_schema_file(tmp_path / "missing.json")


def test_malformed_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"a": ', encoding="utf-8")
    with pytest.raises(SchemaDefinitionError, match="Invalid JSON"):
        load_schema_file(path)


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("a: [string\n", encoding="utf-8")
    with pytest.raises(SchemaDefinitionError, match="Failed to parse YAML"):
        load_schema_file(path)


def test_invalid_declaration_keeps_issues(tmp_path):
    path = tmp_path / "bad_tag.json"
    path.write_text('{"a": "integer"}', encoding="utf-8")
    with pytest.raises(SchemaDefinitionError) as excinfo:
        load_schema_file(path)
    assert str(path) in str(excinfo.value)
    assert excinfo.value.issues[0].path == "/a"
