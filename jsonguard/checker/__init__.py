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

"""JSON file checker built on the guarded parse pipeline."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.schema import ObjectSchema
from .file_checker import FileChecker
from .report import CheckResult

__all__ = ['check_files', 'CheckResult']


def check_files(
    file_paths: List[Path],
    schema: Optional[ObjectSchema] = None,
    options: Optional[Dict[str, Any]] = None,
) -> List[CheckResult]:
    """Check a list of JSON files.

    Args:
        file_paths: List of file paths to check
        schema: Optional compiled schema every document must match
        options: Guarded pipeline options (``max_size``, ``max_depth``, ...)

    Returns:
        List of CheckResult objects, one per file
    """
    results = []

    file_checker = FileChecker(schema=schema, options=options)

    for file_path in file_paths:
        result = CheckResult(file_path)
        try:
            file_checker.check(file_path, result)
        except Exception as e:
            result.add_error(f"Unexpected error during checking: {str(e)}")
        results.append(result)

    return results
