# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Declarative schema model.

A schema declaration is a plain mapping such as::

    {
        "name": "string",
        "age": "?number",
        "tags": ["string"],
        "address": {"street": "string", "zip": "number"},
    }

Declarations are checked against the bundled JSON Schema
(``schema/schema_declaration.json``) and compiled into a closed tagged union
of frozen dataclasses so that matching is a dispatch over known spec types.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import jsonschema
from jsonschema.exceptions import best_match

from ..exceptions import SchemaDefinitionError
from ..utils.type_names import SCHEMA_TAGS


OPTIONAL_MARKER = "?"

JsonPointer = str

DECLARATION_SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "schema_declaration.json"


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    path: Optional[JsonPointer] = None


@dataclass(frozen=True)
class PrimitiveSpec:
    tag: str


@dataclass(frozen=True)
class OptionalSpec:
    tag: str


@dataclass(frozen=True)
class ArrayOfSpec:
    item: "SchemaSpec"


@dataclass(frozen=True)
class ObjectSchema:
    # Ordered (name, spec) pairs; declaration order is the check order.
    fields: Tuple[Tuple[str, "SchemaSpec"], ...] = ()

    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


SchemaSpec = Union[PrimitiveSpec, OptionalSpec, ArrayOfSpec, ObjectSchema]

SchemaLike = Union[ObjectSchema, Mapping]


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _join_path(base: JsonPointer, token: Any) -> JsonPointer:
    return f"{base}/{_jp_escape(str(token))}"


@lru_cache(maxsize=1)
def _declaration_validator():
    with open(DECLARATION_SCHEMA_PATH, "r", encoding="utf-8") as f:
        meta_schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(meta_schema)
    validator_cls.check_schema(meta_schema)
    return validator_cls(meta_schema)


def to_declaration(spec: SchemaSpec) -> Any:
    """Turn a compiled spec back into its declarative form."""
    if isinstance(spec, PrimitiveSpec):
        return spec.tag
    if isinstance(spec, OptionalSpec):
        return OPTIONAL_MARKER + spec.tag
    if isinstance(spec, ArrayOfSpec):
        return [to_declaration(spec.item)]
    return {name: to_declaration(item) for name, item in spec.fields}


def _to_plain(declaration: Any) -> Any:
    """Copy mappings to dicts and tuples to lists for the JSON Schema check."""
    if isinstance(declaration, ObjectSchema):
        return to_declaration(declaration)
    if isinstance(declaration, Mapping):
        return {key: _to_plain(value) for key, value in declaration.items()}
    if isinstance(declaration, (list, tuple)):
        return [_to_plain(item) for item in declaration]
    return declaration


def _non_string_keys(declaration: Any, path: JsonPointer = "") -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []
    if isinstance(declaration, Mapping):
        for key, value in declaration.items():
            if not isinstance(key, str):
                issues.append(SchemaIssue(message=f"Field name must be a string, got {key!r}", path=path))
                continue
            issues.extend(_non_string_keys(value, _join_path(path, key)))
    elif isinstance(declaration, (list, tuple)):
        for idx, item in enumerate(declaration):
            issues.extend(_non_string_keys(item, _join_path(path, idx)))
    return issues


def check_declaration(declaration: Any) -> List[SchemaIssue]:
    """Check a schema declaration and return every issue found."""
    if isinstance(declaration, ObjectSchema):
        return []
    if not isinstance(declaration, Mapping):
        return [SchemaIssue(message="Schema root must be a mapping/object", path="")]

    issues = _non_string_keys(declaration)
    if issues:
        return issues

    validator = _declaration_validator()
    for error in validator.iter_errors(_to_plain(declaration)):
        # oneOf failures carry the per-branch errors in their context
        detail = best_match([error])
        path = "/" + "/".join(_jp_escape(str(p)) for p in detail.absolute_path) if detail.absolute_path else ""
        issues.append(SchemaIssue(message=detail.message, path=path))
    issues.sort(key=lambda issue: issue.path or "")
    return issues


def format_schema_issues(issues) -> str:
    return "\n".join(
        f"  - {i.message}" + (f" (path={i.path})" if getattr(i, "path", None) else "")
        for i in issues
    )


def _compile_value(value: Any, path: JsonPointer) -> SchemaSpec:
    if isinstance(value, str):
        if value.startswith(OPTIONAL_MARKER):
            tag = value[len(OPTIONAL_MARKER):]
            if tag in SCHEMA_TAGS:
                return OptionalSpec(tag)
        elif value in SCHEMA_TAGS:
            return PrimitiveSpec(value)
        raise SchemaDefinitionError(
            f"Unknown type tag '{value}' at '{path}'",
            [SchemaIssue(message=f"Unknown type tag '{value}'", path=path)],
        )

    if isinstance(value, (list, tuple)):
        if not value:
            # [] accepts any array
            return PrimitiveSpec("array")
        if len(value) > 1:
            raise SchemaDefinitionError(
                f"Array schema at '{path}' must contain exactly one item schema",
                [SchemaIssue(message="Array schema must contain exactly one item schema", path=path)],
            )
        return ArrayOfSpec(_compile_value(value[0], _join_path(path, 0)))

    if isinstance(value, ObjectSchema):
        return value

    if isinstance(value, Mapping):
        return ObjectSchema(
            fields=tuple((key, _compile_value(item, _join_path(path, key))) for key, item in value.items())
        )

    raise SchemaDefinitionError(
        f"Invalid schema value {value!r} at '{path}'",
        [SchemaIssue(message=f"Invalid schema value {value!r}", path=path)],
    )


def _freeze(declaration: Any) -> Any:
    """Hashable, order-preserving key for a declaration."""
    if isinstance(declaration, Mapping):
        return ("object", tuple((key, _freeze(value)) for key, value in declaration.items()))
    if isinstance(declaration, (list, tuple)):
        return ("array", tuple(_freeze(item) for item in declaration))
    return declaration


def _thaw(key: Any) -> Any:
    if isinstance(key, tuple):
        kind, items = key
        if kind == "object":
            return {name: _thaw(value) for name, value in items}
        return [_thaw(item) for item in items]
    return key


def _compile_declaration(declaration: Any) -> ObjectSchema:
    issues = check_declaration(declaration)
    if issues:
        raise SchemaDefinitionError(
            "Invalid schema declaration:\n" + format_schema_issues(issues), issues
        )

    compiled = _compile_value(declaration, "")
    assert isinstance(compiled, ObjectSchema)
    return compiled


@lru_cache(maxsize=256)
def _compile_cached(key: Any) -> ObjectSchema:
    return _compile_declaration(_thaw(key))


def compile_schema(declaration: SchemaLike) -> ObjectSchema:
    """Compile a declaration mapping into an :class:`ObjectSchema`.

    Compiled results are memoized by declaration content, so passing the
    same plain mapping on every call only pays for the checks once.

    Raises:
        SchemaDefinitionError: If the declaration is malformed. The
            exception's ``issues`` lists every problem found.
    """
    if isinstance(declaration, ObjectSchema):
        return declaration
    if not isinstance(declaration, Mapping):
        return _compile_declaration(declaration)

    try:
        key = _freeze(declaration)
        hash(key)
    except TypeError:
        return _compile_declaration(declaration)
    return _compile_cached(key)
