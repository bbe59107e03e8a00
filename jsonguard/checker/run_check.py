#!/usr/bin/env python3
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

"""CLI entry point for checking JSON files."""

import argparse
import json
import sys
from pathlib import Path
from typing import List

from ..config import GuardConfig, guard_config
from ..exceptions import JsonGuardError
from ..models.schema_loader import load_schema_file
from . import check_files


def find_json_files(paths: List[str]) -> List[Path]:
    """Find all JSON files in given paths."""
    json_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            # Explicit files are checked whatever their extension
            json_files.append(path)
        elif path.is_dir():
            json_files.extend(path.rglob('*.json'))
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    return sorted(set(json_files))


def build_config(args: argparse.Namespace) -> GuardConfig:
    config = GuardConfig.from_file(args.config) if args.config else guard_config
    overrides = {}
    if args.max_size is not None:
        overrides['max_size'] = args.max_size
    if args.max_depth is not None:
        overrides['max_depth'] = args.max_depth
    if args.safe_keys:
        overrides['safe_keys'] = True
    if args.dates is not None:
        overrides['dates'] = args.dates
    if not overrides:
        return config
    values = {**vars(config), **overrides}
    return GuardConfig(**values)


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the checker CLI."""
    parser = argparse.ArgumentParser(
        description='Check JSON files for syntax, size, depth and schema problems',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to check (default: current directory)',
    )
    parser.add_argument('--schema', help='Schema declaration file (.json, .yaml or .yml)')
    parser.add_argument('--max-size', type=int, default=None, help='Maximum input size in characters')
    parser.add_argument('--max-depth', type=int, default=None, help='Maximum nesting depth')
    parser.add_argument(
        '--safe-keys',
        action='store_true',
        help='Strip __proto__/constructor/prototype keys instead of warning about them',
    )
    parser.add_argument(
        '--dates',
        choices=['iso', 'timestamp'],
        default=None,
        help='Revive ISO-8601 strings as dates before schema validation',
    )
    parser.add_argument('--config', help='YAML file with default options')
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )

    args = parser.parse_args(argv)

    if not args.paths:
        args.paths = ['.']

    try:
        config = build_config(args)
        schema = load_schema_file(args.schema) if args.schema else None
    except JsonGuardError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger = config.set_logging()

    json_files = find_json_files(args.paths)

    if not json_files:
        print("No JSON files found.", file=sys.stderr)
        sys.exit(1)

    logger.debug(f"Checking {len(json_files)} file(s)")
    results = check_files(json_files, schema=schema, options=config.parse_options())

    # Print results in requested format
    if args.format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'warnings': sum(len(r.warnings) for r in results),
            'results': [r.to_dict() for r in results],
        }
        print(json.dumps(output, indent=2))
    elif args.format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
            for warning in result.warnings:
                print(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")
    else:  # human-readable
        for result in results:
            if result.errors or result.warnings:
                print(f"\n{result.file_path}:")
                for error in result.errors:
                    line_info = f":{error['line']}" if 'line' in error else ""
                    path_info = f" [{error['json_path']}]" if 'json_path' in error else ""
                    print(f"  ERROR{line_info}{path_info}: {error['message']}")
                for warning in result.warnings:
                    line_info = f":{warning['line']}" if 'line' in warning else ""
                    print(f"  WARNING{line_info}: {warning['message']}")

    # Exit with error code if any errors found
    total_errors = sum(len(r.errors) for r in results)
    if total_errors > 0:
        sys.exit(1)
    if args.format == 'human':
        print(f"Checked {len(results)} file(s) with no errors.")
    sys.exit(0)


if __name__ == '__main__':
    main()
