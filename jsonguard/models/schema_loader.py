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

"""Schema declaration file loader (JSON or YAML) with caching."""

import json
import logging
from pathlib import Path
from typing import Dict, Tuple, Union

import yaml

from ..exceptions import SchemaDefinitionError
from .schema import ObjectSchema, compile_schema

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")

# Compiled schema cache keyed by resolved path; entries carry the file mtime
_SCHEMA_CACHE: Dict[Path, Tuple[float, ObjectSchema]] = {}


def _read_declaration(path: Path):
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            declaration = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise SchemaDefinitionError(f"Failed to parse YAML schema file {path}: {exc}") from exc
        return {} if declaration is None else declaration

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise SchemaDefinitionError(
            f"Invalid JSON in schema file {path}: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from exc


def load_schema_file(file_path: Union[str, Path]) -> ObjectSchema:
    """Load and compile a schema declaration file.

    ``.yaml``/``.yml`` files are read with ``yaml.safe_load``; anything else
    is read as JSON.

    Args:
        file_path: Path to the declaration file

    Returns:
        The compiled schema

    Raises:
        SchemaDefinitionError: If the file is missing, unreadable or does
            not hold a valid declaration
    """
    path = Path(file_path)
    if not path.exists():
        raise SchemaDefinitionError(f"Schema file not found: {path}")
    if not path.is_file():
        raise SchemaDefinitionError(f"Schema path is not a file: {path}")

    resolved = path.resolve()
    mtime = resolved.stat().st_mtime
    cached = _SCHEMA_CACHE.get(resolved)
    if cached is not None and cached[0] == mtime:
        logger.debug(f"Loading schema from cache: {resolved}")
        return cached[1]

    logger.debug(f"Loading schema file: {resolved}")
    try:
        declaration = _read_declaration(resolved)
    except OSError as exc:
        raise SchemaDefinitionError(f"Failed to read schema file {path}: {exc}") from exc

    try:
        schema = compile_schema(declaration)
    except SchemaDefinitionError as exc:
        raise SchemaDefinitionError(f"{path}: {exc}", exc.issues) from exc

    _SCHEMA_CACHE[resolved] = (mtime, schema)
    return schema


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()
