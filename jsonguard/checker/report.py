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

"""Per-file results for the JSON checker."""

from pathlib import Path
from typing import Any, Dict, List, Optional


class CheckResult:
    """Container for checking results for a single file."""

    def __init__(self, file_path: Path):
        """Initialize check result.

        Args:
            file_path: Path to the file being checked
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    @staticmethod
    def _entry(
        message: str,
        line: Optional[int],
        position: Optional[int],
        json_path: Optional[str],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'message': message}
        if line is not None:
            entry['line'] = line
        if position is not None:
            entry['position'] = position
        if json_path is not None:
            entry['json_path'] = json_path
        return entry

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        position: Optional[int] = None,
        json_path: Optional[str] = None,
    ):
        """Add an error message.

        Args:
            message: Error message
            line: Optional 1-based line number where the error occurred
            position: Optional character offset where the error occurred
            json_path: Optional validation path such as ``users[1].name``
        """
        self.errors.append(self._entry(message, line, position, json_path))

    def add_warning(
        self,
        message: str,
        line: Optional[int] = None,
        position: Optional[int] = None,
        json_path: Optional[str] = None,
    ):
        """Add a warning message."""
        self.warnings.append(self._entry(message, line, position, json_path))

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': str(self.file_path),
            'errors': self.errors,
            'warnings': self.warnings,
        }
