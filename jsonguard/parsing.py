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

"""Guarded JSON parsing.

The pipeline runs these stages in a fixed order and stops at the first
failure:

  1. size gate      (``max_size``)
  2. decode         (``json.loads`` plus optional date revival and ``reviver``)
  3. depth gate     (``max_depth``)
  4. key sanitizing (``safe_keys``)
  5. schema check   (``schema``)

:func:`parse` collapses every failure to ``default``; :func:`parse_detailed`
reports which stage rejected the input and, for syntax errors, where.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Union

from .diagnostics import extract_position, format_error, get_context
from .exceptions import DecodeError, GuardError, JsonGuardError, ReviverError
from .models.schema import ObjectSchema, SchemaLike, compile_schema
from .security import check_depth, check_size, sanitize_keys
from .utils.dates import DatesOption, parse_iso, resolve_date_mode
from .utils.type_names import UNDEFINED
from .validator import ValidationIssue, assert_valid

logger = logging.getLogger(__name__)

Reviver = Callable[[str, Any], Any]
JsonText = Union[str, bytes, bytearray]

INVALID_OPTIONS = "invalid_options"


@dataclass
class ParseOutcome:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    stage: Optional[str] = None
    position: Optional[int] = None
    context: Optional[str] = None
    issue: Optional[ValidationIssue] = None


class ParseResult(NamedTuple):
    data: Any
    error: Optional[Exception]


def _reject_constant(name: str):
    raise ValueError(f"Unexpected token {name} in JSON")


def _revive(holder_key: str, value: Any, revive: Reviver) -> Any:
    """Walk ``value`` bottom-up, replacing each node with ``revive(key, node)``.

    An ``UNDEFINED`` result removes an object entry; array slots keep the
    marker so indices stay stable.
    """
    if isinstance(value, dict):
        for key in list(value):
            revived = _revive(key, value[key], revive)
            if revived is UNDEFINED:
                del value[key]
            else:
                value[key] = revived
    elif isinstance(value, list):
        for idx, item in enumerate(value):
            value[idx] = _revive(str(idx), item, revive)
    return revive(holder_key, value)


def _make_reviver(reviver: Optional[Reviver], dates_active: bool) -> Optional[Reviver]:
    if not dates_active:
        return reviver

    def revive(key: str, value: Any) -> Any:
        if isinstance(value, str):
            parsed = parse_iso(value)
            if parsed is not None:
                value = parsed
        return reviver(key, value) if reviver is not None else value

    return revive


def _decode(text: JsonText, reviver: Optional[Reviver] = None, dates: DatesOption = False) -> Any:
    """Decode ``text``; raises DecodeError or ReviverError."""
    revive = _make_reviver(reviver, resolve_date_mode(dates) is not None)

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as exc:
        raise DecodeError(str(exc)) from exc

    if revive is None:
        return data
    try:
        data = _revive("", data, revive)
    except Exception as exc:
        raise ReviverError(f"Reviver failed: {exc}") from exc
    return None if data is UNDEFINED else data


def _compile(schema: Optional[SchemaLike]) -> Optional[ObjectSchema]:
    return None if schema is None else compile_schema(schema)


def _run_pipeline(
    text: JsonText,
    *,
    reviver: Optional[Reviver],
    dates: DatesOption,
    schema: Optional[ObjectSchema],
    max_size: Optional[int],
    max_depth: Optional[int],
    safe_keys: bool,
) -> Any:
    check_size(text, max_size)
    data = _decode(text, reviver, dates)
    check_depth(data, max_depth)
    if safe_keys:
        data = sanitize_keys(data)
    if schema is not None:
        assert_valid(data, schema)
    return data


def parse_strict(
    text: JsonText,
    *,
    reviver: Optional[Reviver] = None,
    dates: DatesOption = False,
    schema: Optional[SchemaLike] = None,
    max_size: Optional[int] = None,
    max_depth: Optional[int] = None,
    safe_keys: bool = False,
) -> Any:
    """Run the guarded pipeline and raise on failure.

    Raises:
        GuardError: A subclass naming the stage that rejected the input.
        SchemaDefinitionError: If ``schema`` is not a valid declaration.
    """
    return _run_pipeline(
        text,
        reviver=reviver,
        dates=dates,
        schema=_compile(schema),
        max_size=max_size,
        max_depth=max_depth,
        safe_keys=safe_keys,
    )


def parse(
    text: JsonText,
    *,
    default: Any = None,
    reviver: Optional[Reviver] = None,
    dates: DatesOption = False,
    schema: Optional[SchemaLike] = None,
    max_size: Optional[int] = None,
    max_depth: Optional[int] = None,
    safe_keys: bool = False,
) -> Any:
    """Parse JSON text, returning ``default`` on any failure.

    Args:
        text: JSON text (``str`` or UTF-8/16/32 ``bytes``)
        default: Value returned when any stage fails
        reviver: ``(key, value) -> value`` hook applied bottom-up; returning
            ``UNDEFINED`` removes the entry
        dates: Revive ISO-8601 strings as aware datetimes when truthy
        schema: Declaration mapping or compiled schema the result must match
        max_size: Maximum input length checked before decoding
        max_depth: Maximum nesting depth of the decoded value
        safe_keys: Strip ``__proto__``/``constructor``/``prototype`` keys

    Returns:
        The decoded value, or ``default``. A value that decodes but fails a
        later stage is discarded.
    """
    try:
        return parse_strict(
            text,
            reviver=reviver,
            dates=dates,
            schema=schema,
            max_size=max_size,
            max_depth=max_depth,
            safe_keys=safe_keys,
        )
    except Exception as exc:
        logger.debug(f"Parse failed, returning default: {exc}")
        return default


def parse_detailed(
    text: JsonText,
    *,
    reviver: Optional[Reviver] = None,
    dates: DatesOption = False,
    schema: Optional[SchemaLike] = None,
    max_size: Optional[int] = None,
    max_depth: Optional[int] = None,
    safe_keys: bool = False,
) -> ParseOutcome:
    """Run the guarded pipeline and describe the outcome.

    ``position`` and ``context`` are filled in only for syntax errors, and
    only when the decoder message names a position or line. ``issue`` is
    set only for schema mismatches.
    """
    try:
        compiled = _compile(schema)
        resolve_date_mode(dates)
    except (JsonGuardError, ValueError) as exc:
        return ParseOutcome(ok=False, error=str(exc), stage=INVALID_OPTIONS)

    try:
        data = _run_pipeline(
            text,
            reviver=reviver,
            dates=dates,
            schema=compiled,
            max_size=max_size,
            max_depth=max_depth,
            safe_keys=safe_keys,
        )
    except DecodeError as exc:
        cause = exc.__cause__ or exc
        position = extract_position(cause)
        context = None
        if position is not None:
            source = text if isinstance(text, str) else bytes(text).decode("utf-8", errors="replace")
            context = get_context(source, position)
        logger.debug(f"Decode failed: {cause}")
        return ParseOutcome(
            ok=False,
            error=format_error(cause, position, context),
            stage=exc.stage,
            position=position,
            context=context,
        )
    except GuardError as exc:
        logger.debug(f"Input rejected at stage {exc.stage}: {exc}")
        return ParseOutcome(
            ok=False,
            error=str(exc),
            stage=exc.stage,
            issue=getattr(exc, "issue", None),
        )
    except Exception as exc:
        logger.debug(f"Parse failed: {exc!r}")
        return ParseOutcome(ok=False, error=str(exc) or type(exc).__name__, stage=GuardError.stage)

    return ParseOutcome(ok=True, data=data)


def try_parse(text: JsonText, reviver: Optional[Reviver] = None, dates: DatesOption = False) -> ParseResult:
    """Decode ``text`` and return ``(data, None)`` or ``(None, error)``.

    The error is the decoder's (or the reviver's) own exception.
    """
    try:
        return ParseResult(_decode(text, reviver, dates), None)
    except GuardError as exc:
        return ParseResult(None, exc.__cause__ or exc)
    except Exception as exc:
        return ParseResult(None, exc)


def is_valid(text: JsonText) -> bool:
    """Return True if ``text`` is well-formed JSON."""
    try:
        json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError):
        return False
    return True
