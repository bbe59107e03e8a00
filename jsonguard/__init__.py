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

"""Defensive JSON helpers.

Parsing and serialization functions here never raise: failures come back as
``None``/a default, a ``(value, error)`` pair or a :class:`ParseOutcome`.
"""

import logging

from .diagnostics import extract_position, format_error, get_context
from .exceptions import (
    DecodeError,
    DepthLimitError,
    GuardError,
    JsonGuardError,
    ReviverError,
    SchemaDefinitionError,
    SchemaMismatchError,
    SerializationError,
    SizeLimitError,
)
from .models import ObjectSchema, compile_schema, load_schema_file
from .parsing import ParseOutcome, ParseResult, is_valid, parse, parse_detailed, parse_strict, try_parse
from .security import DANGEROUS_KEYS, check_depth, check_size, measure_depth, sanitize_keys
from .serialization import StringifyOptions, StringifyResult, format_json, minify, stringify, try_stringify
from .stream import StreamResult, parse_stream
from .utils.dates import DateMode
from .utils.type_names import UNDEFINED, type_name
from .validator import ValidationIssue, ValidationResult, assert_valid, validate

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
