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

"""Safe serialization.

A single graph walk prepares the value for :func:`json.dumps`. For every node
it applies, in order: the caller's replacer, date conversion, big integer
conversion and cycle detection. Composites already emitted once during the
same call are replaced with ``"[Circular]"``; this also flags shared
(non-cyclic) references that appear a second time.

``stringify`` returns ``None`` on failure and ``try_stringify`` returns the
exception instead, so no error escapes to the caller.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import math
from collections.abc import Mapping, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

from .exceptions import SerializationError
from .parsing import parse
from .utils.dates import DateMode, DatesOption, is_temporal, resolve_date_mode, serialize_date
from .utils.type_names import UNDEFINED, is_array, is_big_integer

logger = logging.getLogger(__name__)

CIRCULAR = "[Circular]"
BIGINT_SUFFIX = "n"

Replacer = Callable[[str, Any], Any]


@dataclass
class StringifyOptions:
    space: Optional[int] = None
    replacer: Optional[Replacer] = None
    dates: DatesOption = False


class StringifyResult(NamedTuple):
    text: Optional[str]
    error: Optional[Exception]


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


class _GraphEncoder:
    """Turn an arbitrary value graph into a tree ``json.dumps`` accepts."""

    def __init__(self, replacer: Optional[Replacer], date_mode: Optional[DateMode]):
        self.replacer = replacer
        self.date_mode = date_mode
        # id -> object; holding the object keeps its id from being reused
        self._seen: Dict[int, Any] = {}

    def encode(self, value: Any) -> Any:
        return self._visit("", value)

    def _mark(self, value: Any) -> bool:
        """Record a composite; return False if it was emitted before."""
        if id(value) in self._seen:
            return False
        self._seen[id(value)] = value
        return True

    def _visit(self, key: str, value: Any) -> Any:
        if self.replacer is not None:
            value = self.replacer(key, value)
        return self._encode(value)

    def _encode(self, value: Any) -> Any:
        if is_temporal(value):
            return serialize_date(value, self.date_mode)

        if is_big_integer(value):
            return f"{value}{BIGINT_SUFFIX}"

        if value is None or isinstance(value, (str, bool, int)):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else None
        if isinstance(value, Enum):
            return self._encode(value.value)

        if isinstance(value, Mapping):
            if not self._mark(value):
                return CIRCULAR
            return self._visit_fields(value.items())

        if is_array(value):
            if not self._mark(value):
                return CIRCULAR
            items = []
            for idx, item in enumerate(value):
                encoded = self._visit(str(idx), item)
                items.append(None if encoded is UNDEFINED else encoded)
            return items

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            if not self._mark(value):
                return CIRCULAR
            return self._visit_fields(
                (f.name, getattr(value, f.name)) for f in dataclasses.fields(value)
            )

        if value is UNDEFINED or callable(value):
            return UNDEFINED

        if isinstance(value, (Set, bytes, bytearray)) or hasattr(value, "__dict__"):
            if not self._mark(value):
                return CIRCULAR
            return {}

        raise SerializationError(f"Object of type {type(value).__name__} is not JSON serializable")

    def _visit_fields(self, items) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for raw_key, item in items:
            key = _key_text(raw_key)
            encoded = self._visit(key, item)
            if encoded is not UNDEFINED:
                fields[key] = encoded
        return fields


def _dump(tree: Any, space: Optional[int]) -> str:
    if space and space > 0:
        return json.dumps(tree, indent=space, ensure_ascii=False, allow_nan=False)
    return json.dumps(tree, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _stringify(value: Any, options: StringifyOptions) -> Optional[str]:
    encoder = _GraphEncoder(options.replacer, resolve_date_mode(options.dates))
    tree = encoder.encode(value)
    if tree is UNDEFINED:
        # Nothing to encode at the root
        return None
    return _dump(tree, options.space)


def _coerce_options(options: Union[StringifyOptions, int, None], overrides: Dict[str, Any]) -> StringifyOptions:
    if isinstance(options, StringifyOptions):
        return dataclasses.replace(options, **overrides) if overrides else options
    if isinstance(options, int) and not isinstance(options, bool):
        return StringifyOptions(space=options, **overrides)
    if options is None:
        return StringifyOptions(**overrides)
    raise TypeError(f"Invalid stringify options: {options!r}")


def stringify(
    value: Any,
    *,
    space: Optional[int] = None,
    replacer: Optional[Replacer] = None,
    dates: DatesOption = False,
) -> Optional[str]:
    """Serialize ``value`` to JSON text, returning None on any failure.

    Args:
        value: Value graph to encode; cycles are allowed
        space: Indentation width; falsy means compact output
        replacer: ``(key, value) -> value`` hook run first at every node
        dates: ``False``, ``True``/``"iso"`` or ``"timestamp"``

    Returns:
        JSON text, or None if encoding failed or the root is omitted.
    """
    text, _ = try_stringify(value, StringifyOptions(space=space, replacer=replacer, dates=dates))
    return text


def try_stringify(value: Any, options: Union[StringifyOptions, int, None] = None, **overrides) -> StringifyResult:
    """Serialize ``value`` and return ``(text, None)`` or ``(None, error)``.

    ``options`` may be an indentation width, a :class:`StringifyOptions` or
    omitted in favour of keyword arguments.
    """
    try:
        opts = _coerce_options(options, overrides)
        return StringifyResult(_stringify(value, opts), None)
    except Exception as exc:
        logger.debug(f"Serialization failed: {exc!r}")
        return StringifyResult(None, exc)


def format_json(value: Any, space: int = 2) -> Optional[str]:
    """Pretty-print ``value``. Strings are treated as JSON text and reparsed."""
    if isinstance(value, str):
        parsed = parse(value)
        if parsed is None:
            return None
        return stringify(parsed, space=space)
    return stringify(value, space=space)


def minify(value: Any) -> Optional[str]:
    """Compact ``value``. Strings are treated as JSON text and reparsed."""
    return format_json(value, space=0)
