"""Chunked streaming line reader.

Reads a file in fixed-size byte windows and yields complete decoded lines,
carrying partial lines and partial multi-byte sequences across chunk
boundaries.
"""

from __future__ import annotations

import codecs
import logging
import os
import re
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Protocol

import aiofiles

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024

_LINE_SPLIT_RE = re.compile(r"\r?\n")

ProgressCallback = Callable[[float], None]


class AnalysisCancelled(Exception):
    """Raised when a cancellation token is set during a run."""


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


class LineSplitter:
    """Incremental bytes -> lines splitter.

    Incomplete trailing multi-byte sequences are held by the decoder; the
    unterminated trailing text fragment is held here until the next feed.
    """

    def __init__(self, *, encoding: str = "utf-8-sig", errors: str = "replace") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._fragment = ""

    def feed(self, data: bytes) -> list[str]:
        """Decode a chunk and return the lines it completes."""
        text = self._fragment + self._decoder.decode(data)
        parts = _LINE_SPLIT_RE.split(text)
        self._fragment = parts.pop()
        return parts

    def flush(self) -> list[str]:
        """Finish decoding and return the final unterminated line, if any."""
        text = self._fragment + self._decoder.decode(b"", final=True)
        self._fragment = ""
        return [text] if text else []


async def iter_lines(
    log_path: str | Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8-sig",
    decode_errors: str = "replace",
    on_progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> AsyncIterator[str]:
    """Yield every complete line of a file, reading ``chunk_size`` bytes at a time.

    ``on_progress`` receives the consumed percentage (0-100) after each chunk
    and reaches 100 exactly once. ``cancel`` is checked before each chunk read.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    total = os.path.getsize(path)
    splitter = LineSplitter(encoding=encoding, errors=decode_errors)
    consumed = 0

    async with aiofiles.open(path, "rb") as f:
        while consumed < total:
            if cancel is not None and cancel.is_set():
                raise AnalysisCancelled(f"Analysis of {path} cancelled at byte {consumed}")

            chunk = await f.read(chunk_size)
            if not chunk:
                break
            consumed += len(chunk)
            logger.debug("Read %d bytes from %s (%d/%d)", len(chunk), path, consumed, total)

            for line in splitter.feed(chunk):
                yield line

            if consumed < total:
                _report(on_progress, consumed, total)

    for line in splitter.flush():
        yield line

    _report(on_progress, total, total)


def _report(on_progress: ProgressCallback | None, consumed: int, total: int) -> None:
    if on_progress is None:
        return
    pct = 100.0 if total <= 0 else min(consumed, total) * 100.0 / total
    on_progress(pct)
