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

"""Runtime type naming shared by validation and error reporting."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class _Undefined:
    """Marker for an absent value (a missing field or a dropped node)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
OBJECT = "object"
ARRAY = "array"
NULL = "null"
UNDEFINED_NAME = "undefined"

SCHEMA_TAGS = (STRING, NUMBER, BOOLEAN, OBJECT, ARRAY)

# Interoperable integer range of an IEEE-754 double.
MAX_SAFE_INTEGER = 2**53 - 1


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_structured(value: Any) -> bool:
    """Return True for values that :func:`type_name` calls ``object``."""
    return type_name(value) == OBJECT


def field_value(value: Any, name: str) -> Any:
    """Read field ``name``; non-mapping objects have no fields."""
    if isinstance(value, Mapping):
        return value.get(name, UNDEFINED)
    return UNDEFINED


def type_name(value: Any) -> str:
    """Map any value to one of the runtime type names.

    The result is always one of ``string``, ``number``, ``boolean``,
    ``object``, ``array``, ``null`` or ``undefined``. Values without a
    closer match (dates, sets, class instances) land in ``object``.
    """
    if value is UNDEFINED:
        return UNDEFINED_NAME
    if value is None:
        return NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if is_array(value):
        return ARRAY
    return OBJECT


def is_big_integer(value: Any) -> bool:
    """Return True for integers a double cannot hold exactly."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and abs(value) > MAX_SAFE_INTEGER
    )
