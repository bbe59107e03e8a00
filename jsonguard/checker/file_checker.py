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

"""Checks a single JSON file through the guarded parse pipeline."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.schema import ObjectSchema
from ..parsing import parse_detailed
from ..security import DANGEROUS_KEYS, sanitize_keys
from .report import CheckResult

logger = logging.getLogger(__name__)


def _line_of(text: str, position: Optional[int]) -> Optional[int]:
    if position is None or position > len(text):
        return None
    return text.count("\n", 0, position) + 1


class FileChecker:
    """Decode, gate and validate one file, recording problems on a CheckResult."""

    def __init__(self, schema: Optional[ObjectSchema] = None, options: Optional[Dict[str, Any]] = None):
        self.schema = schema
        self.options = dict(options or {})

    def check(self, file_path: Path, result: CheckResult):
        """Check a file.

        Args:
            file_path: Path to the file to check
            result: CheckResult to add errors/warnings to
        """
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            result.add_error(f"Failed to read file: {exc}")
            return

        logger.debug(f"Checking {file_path}")
        outcome = parse_detailed(text, schema=self.schema, **self.options)
        if not outcome.ok:
            # Context lines are for terminals; keep the first line only
            message = (outcome.error or "Unknown error").splitlines()[0]
            result.add_error(
                message,
                line=_line_of(text, outcome.position),
                position=outcome.position,
                json_path=outcome.issue.path if outcome.issue is not None else None,
            )
            return

        if not self.options.get("safe_keys") and sanitize_keys(outcome.data) is not outcome.data:
            result.add_warning(
                "Document contains prototype-sensitive keys: " + ", ".join(sorted(DANGEROUS_KEYS))
            )
