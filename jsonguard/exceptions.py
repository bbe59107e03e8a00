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

"""Custom exceptions for jsonguard.

Public parse/stringify functions never let these escape; they are raised by
internal helpers and converted to return values at the API boundary.
"""


class JsonGuardError(Exception):
    """Base exception for jsonguard related errors."""
    pass


class SchemaDefinitionError(JsonGuardError):
    """Exception raised when a schema declaration is malformed."""

    def __init__(self, message: str, issues=None):
        super().__init__(message)
        self.issues = list(issues or [])


class GuardError(JsonGuardError):
    """Base exception for payloads rejected by the guarded parse pipeline."""

    stage = "rejected"


class SizeLimitError(GuardError):
    """Exception raised when the input text exceeds the configured size."""

    stage = "too_large"


class DepthLimitError(GuardError):
    """Exception raised when the decoded value nests deeper than allowed."""

    stage = "too_deep"


class SchemaMismatchError(GuardError):
    """Exception raised when a decoded value does not match its schema."""

    stage = "schema_mismatch"

    def __init__(self, issue):
        super().__init__(issue.message)
        self.issue = issue


class DecodeError(GuardError):
    """Exception raised when the input is not valid JSON text.

    The decoder's own exception is kept as ``__cause__``.
    """

    stage = "invalid_syntax"


class ReviverError(GuardError):
    """Exception raised when a custom reviver fails during decoding."""

    stage = "reviver_error"


class SerializationError(JsonGuardError):
    """Exception raised when a value cannot be encoded."""
    pass
