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

"""Best-effort position and context extraction for decode errors.

Positions are read from the decoder's message text. ``line N`` messages are
converted with a fixed line width, so such positions are approximate.
"""

import re
from typing import Optional

POSITION_PATTERN = re.compile(r"(?:position|char) (\d+)", re.IGNORECASE)
LINE_PATTERN = re.compile(r"line (\d+)", re.IGNORECASE)

AVERAGE_LINE_WIDTH = 80
DEFAULT_CONTEXT_RADIUS = 20
FALLBACK_CONTEXT_WIDTH = 50


def extract_position(error: Optional[BaseException]) -> Optional[int]:
    message = str(error) if error is not None else ""

    match = POSITION_PATTERN.search(message)
    if match:
        return int(match.group(1))

    match = LINE_PATTERN.search(message)
    if match:
        return (int(match.group(1)) - 1) * AVERAGE_LINE_WIDTH

    return None


def get_context(text: str, position: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """Return up to ``2 * radius`` characters of ``text`` around ``position``.

    Out of range positions yield the start of the text instead. Newlines,
    carriage returns and tabs are escaped for single-line display.
    """
    if position < 0 or position >= len(text):
        return text[:FALLBACK_CONTEXT_WIDTH]

    start = max(0, position - radius)
    end = min(len(text), position + radius)
    return text[start:end].replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")


def format_error(
    error: Optional[BaseException],
    position: Optional[int] = None,
    context: Optional[str] = None,
) -> str:
    message = str(error) if error is not None else "Unknown error"

    if position is not None and context:
        return f"Invalid JSON at position {position}: {message}\nContext: ...{context}..."
    if position is not None:
        return f"Invalid JSON at position {position}: {message}"
    return f"Invalid JSON: {message}"
