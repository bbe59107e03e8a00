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

"""Input hygiene gates for untrusted JSON: size, nesting depth and key names."""

from collections.abc import Mapping
from typing import Any, List, Optional, Set, Tuple, Union

from .exceptions import DepthLimitError, SizeLimitError
from .utils.type_names import is_array

# Keys that can reach an object's prototype in JavaScript consumers
DANGEROUS_KEYS = frozenset({"__proto__", "constructor", "prototype"})


def check_size(text: Union[str, bytes, bytearray], max_size: Optional[int]) -> None:
    """Reject input longer than ``max_size`` (characters, or bytes for binary input)."""
    if max_size is None:
        return
    if len(text) > max_size:
        unit = "bytes" if isinstance(text, (bytes, bytearray)) else "characters"
        raise SizeLimitError(f"Input exceeds maximum size of {max_size} {unit} (got {len(text)})")


def _children(value: Any):
    if isinstance(value, Mapping):
        return value.values()
    if is_array(value):
        return value
    return None


def measure_depth(value: Any, limit: Optional[int] = None) -> int:
    """Return the nesting depth of ``value``.

    Scalars have depth 0 and every enclosing object or array adds one, so
    ``{"a": [1]}`` has depth 2. When ``limit`` is given the walk stops as
    soon as a node deeper than ``limit`` is found.

    Raises:
        ValueError: If ``value`` contains itself and no ``limit`` is given.
    """
    deepest = 0
    on_path: Set[int] = set()
    # (node, depth, leaving); leaving entries pop a container off the path
    stack: List[Tuple[Any, int, bool]] = [(value, 0, False)]
    while stack:
        node, depth, leaving = stack.pop()
        if leaving:
            on_path.discard(id(node))
            continue
        children = _children(node)
        if children is None:
            continue
        if id(node) in on_path:
            if limit is not None:
                return limit + 1
            raise ValueError("Cannot measure the depth of a circular structure")
        depth += 1
        if depth > deepest:
            deepest = depth
            if limit is not None and deepest > limit:
                return deepest
        on_path.add(id(node))
        stack.append((node, depth, True))
        stack.extend((child, depth, False) for child in children)
    return deepest


def check_depth(value: Any, max_depth: Optional[int]) -> None:
    if max_depth is None:
        return
    depth = measure_depth(value, limit=max_depth)
    if depth > max_depth:
        raise DepthLimitError(f"Maximum nesting depth of {max_depth} exceeded")


def sanitize_keys(value: Any) -> Any:
    """Drop ``__proto__``, ``constructor`` and ``prototype`` keys at every level.

    Containers are copied only when something below them was removed;
    untouched subtrees, and the input itself when clean, are returned as is.
    """
    if isinstance(value, Mapping):
        changed = False
        cleaned = {}
        for key, item in value.items():
            if key in DANGEROUS_KEYS:
                changed = True
                continue
            new_item = sanitize_keys(item)
            changed = changed or new_item is not item
            cleaned[key] = new_item
        return cleaned if changed else value

    if is_array(value):
        items = [sanitize_keys(item) for item in value]
        if any(new is not old for new, old in zip(items, value)):
            return type(value)(items)
        return value

    return value
