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

"""Configuration management for jsonguard."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import JsonGuardError
from .stream import DEFAULT_CHUNK_SIZE
from .utils.dates import DatesOption, resolve_date_mode
from .utils.logging_utils import configure_split_stream_logging

ENV_PREFIX = "JSONGUARD_"


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(ENV_PREFIX + name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise JsonGuardError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_dates(raw: str) -> DatesOption:
    value = raw.strip().lower()
    if value in ("", "false", "0", "off", "none"):
        return False
    if value in ("true", "1", "on"):
        return True
    return value


@dataclass
class GuardConfig:
    """Default options for the guarded parse pipeline and the CLI."""
    max_size: Optional[int] = None
    max_depth: Optional[int] = None
    safe_keys: bool = False
    dates: DatesOption = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    log_level: str = "INFO"
    print_level: str = "WARNING"

    def __post_init__(self):
        try:
            resolve_date_mode(self.dates)
        except ValueError as exc:
            raise JsonGuardError(str(exc)) from exc
        if self.chunk_size <= 0:
            raise JsonGuardError(f"chunk_size must be positive, got {self.chunk_size}")

    @classmethod
    def from_env(cls) -> 'GuardConfig':
        """Create configuration from environment variables."""
        return cls(
            max_size=_env_int('MAX_SIZE'),
            max_depth=_env_int('MAX_DEPTH'),
            safe_keys=os.getenv('JSONGUARD_SAFE_KEYS', 'false').lower() == 'true',
            dates=_env_dates(os.getenv('JSONGUARD_DATES', '')),
            chunk_size=_env_int('CHUNK_SIZE') or DEFAULT_CHUNK_SIZE,
            log_level=os.getenv('JSONGUARD_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('JSONGUARD_PRINT_LEVEL', 'WARNING'),
        )

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'GuardConfig':
        """Load a YAML mapping of options over the environment defaults."""
        path = Path(file_path)
        if not path.is_file():
            raise JsonGuardError(f"Configuration file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise JsonGuardError(f"Failed to parse YAML file {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise JsonGuardError(f"Configuration file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise JsonGuardError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")

        values = vars(cls.from_env())
        values.update(data)
        return cls(**values)

    def parse_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``parse``/``parse_detailed``/``parse_strict``."""
        return {
            "max_size": self.max_size,
            "max_depth": self.max_depth,
            "safe_keys": self.safe_keys,
            "dates": self.dates,
        }

    def stream_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``parse_stream``."""
        return {**self.parse_options(), "chunk_size": self.chunk_size}

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)


# Global configuration instance
guard_config = GuardConfig.from_env()
