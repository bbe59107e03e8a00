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

"""Structural validation of decoded values against a schema.

Fields are checked in schema declaration order and the first failure wins:
the result carries exactly one :class:`ValidationIssue`. Paths join object
fields with ``.`` and array elements with ``[index]``; ``root`` names the
top-level value itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from .exceptions import SchemaMismatchError
from .models.schema import (
    ArrayOfSpec,
    ObjectSchema,
    OptionalSpec,
    PrimitiveSpec,
    SchemaLike,
    SchemaSpec,
    compile_schema,
)
from .utils.type_names import ARRAY, OBJECT, UNDEFINED, field_value, is_array, is_structured, type_name

ROOT_PATH = "root"


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    expected: str
    actual: str
    message: str

    def __str__(self) -> str:
        return self.message


class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[ValidationIssue] = None


VALID = ValidationResult(True, None)


def _issue(path: str, expected: str, value: Any) -> ValidationIssue:
    actual = type_name(value)
    return ValidationIssue(
        path=path,
        expected=expected,
        actual=actual,
        message=f"Expected {expected} at '{path}', got {actual}",
    )


def _prefixed(issue: ValidationIssue, prefix: str) -> ValidationIssue:
    path = f"{prefix}.{issue.path}"
    return ValidationIssue(
        path=path,
        expected=issue.expected,
        actual=issue.actual,
        message=f"Expected {issue.expected} at '{path}', got {issue.actual}",
    )


def _check_tag(value: Any, tag: str, path: str) -> Optional[ValidationIssue]:
    if type_name(value) != tag:
        return _issue(path, tag, value)
    return None


def _check_value(value: Any, spec: SchemaSpec, path: str) -> Optional[ValidationIssue]:
    if isinstance(spec, OptionalSpec):
        # None is a value, not an absent field
        if value is UNDEFINED:
            return None
        return _check_tag(value, spec.tag, path)

    if isinstance(spec, PrimitiveSpec):
        return _check_tag(value, spec.tag, path)

    if isinstance(spec, ArrayOfSpec):
        if not is_array(value):
            return _issue(path, ARRAY, value)
        for idx, item in enumerate(value):
            issue = _check_value(item, spec.item, f"{path}[{idx}]")
            if issue is not None:
                return issue
        return None

    if not is_structured(value):
        return _issue(path, OBJECT, value)
    issue = _check_fields(value, spec)
    if issue is not None:
        return _prefixed(issue, path)
    return None


def _check_fields(value: Any, schema: ObjectSchema) -> Optional[ValidationIssue]:
    for name, spec in schema.fields:
        issue = _check_value(field_value(value, name), spec, name)
        if issue is not None:
            return issue
    return None


def validate(value: Any, schema: SchemaLike) -> ValidationResult:
    """Check ``value`` against ``schema``.

    Args:
        value: Decoded value; must be an object to pass at all
        schema: Declaration mapping or compiled :class:`ObjectSchema`

    Returns:
        ``ValidationResult(True, None)`` or ``ValidationResult(False, issue)``
        for the first failing field. Fields absent from the schema are
        ignored.

    Raises:
        SchemaDefinitionError: If ``schema`` is not a valid declaration.
    """
    compiled = compile_schema(schema)
    if not is_structured(value):
        return ValidationResult(False, _issue(ROOT_PATH, OBJECT, value))
    issue = _check_fields(value, compiled)
    if issue is not None:
        return ValidationResult(False, issue)
    return VALID


def assert_valid(value: Any, schema: SchemaLike) -> None:
    """Raise :class:`SchemaMismatchError` when ``value`` does not match."""
    valid, issue = validate(value, schema)
    if not valid:
        raise SchemaMismatchError(issue)