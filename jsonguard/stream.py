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

"""Chunked parsing of large JSON inputs.

This is not an incremental parser: chunks are appended to a buffer and the
whole buffer is re-parsed after each chunk when progress is requested, then
once more through the guarded pipeline at end of input.
"""

import codecs
import logging
from typing import Any, Callable, Iterable, Iterator, NamedTuple, Optional, Union

from .exceptions import SizeLimitError
from .parsing import parse_strict, try_parse

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024

Chunk = Union[str, bytes, bytearray]
StreamSource = Union[Chunk, Iterable[Chunk], Any]


class StreamResult(NamedTuple):
    data: Any
    error: Optional[Exception]
    complete: bool


def _split(text: Chunk, chunk_size: int) -> Iterator[Chunk]:
    for start in range(0, len(text), chunk_size):
        yield text[start:start + chunk_size]


def iter_chunks(source: StreamSource, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Chunk]:
    """Yield raw chunks from a string, bytes, file object or chunk iterable."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if isinstance(source, (str, bytes, bytearray)):
        yield from _split(source, chunk_size)
        return

    read = getattr(source, "read", None)
    if callable(read):
        while True:
            chunk = read(chunk_size)
            if not chunk:
                return
            yield chunk

    yield from source


class _TextAssembler:
    """Accumulate str or UTF-8 bytes chunks into one text buffer."""

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._parts = []
        self._length = 0

    def feed(self, chunk: Chunk) -> None:
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        elif not isinstance(chunk, str):
            raise TypeError(f"Stream chunks must be str or bytes, got {type(chunk).__name__}")
        self._parts.append(chunk)
        self._length += len(chunk)

    def finish(self) -> None:
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._parts.append(tail)
            self._length += len(tail)

    def __len__(self) -> int:
        return self._length

    @property
    def text(self) -> str:
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""


def parse_stream(
    source: StreamSource,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: Optional[Callable[[Any], None]] = None,
    on_error: Optional[Callable[[Exception], None]] = None,
    **parse_options,
) -> StreamResult:
    """Read ``source`` chunk by chunk and parse the assembled text.

    Args:
        source: JSON text, UTF-8 bytes, a readable file object or an
            iterable of str/bytes chunks
        chunk_size: Chunk length used when splitting text or reading files
        on_progress: Called with the value each time the buffer read so far
            already decodes
        on_error: Called with the exception when the final parse fails
        **parse_options: Guarded pipeline options (``schema``, ``max_size``,
            ``max_depth``, ``safe_keys``, ``dates``, ``reviver``)

    Returns:
        ``StreamResult(data, None, True)`` or ``StreamResult(None, error, False)``.
    """
    max_size = parse_options.get("max_size")
    buffer = _TextAssembler()

    try:
        for chunk in iter_chunks(source, chunk_size):
            buffer.feed(chunk)
            if max_size is not None and len(buffer) > max_size:
                raise SizeLimitError(f"Input exceeds maximum size of {max_size} characters")
            if on_progress is not None:
                partial, error = try_parse(buffer.text)
                if error is None:
                    on_progress(partial)
        buffer.finish()

        data = parse_strict(buffer.text, **parse_options)
    except Exception as exc:
        logger.debug(f"Stream parse failed: {exc}")
        if on_error is not None:
            on_error(exc)
        return StreamResult(None, exc, False)

    return StreamResult(data, None, True)
