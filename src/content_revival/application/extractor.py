"""
Streaming report extractor – single responsibility: turn a model's streamed text
into a live thinking narrative and, once the stream ends, a RevivalStrategy.

The model is prompted to think inside <thinking>...</thinking> and then emit
the report as a fenced ```json block. Neither convention can be enforced, so
extraction is strict about the block and lenient about its contents.
"""

import asyncio
import json
import re
from typing import Any, AsyncIterable, Callable, Iterable, Optional

from content_revival.domain.errors import (
    MALFORMED_PAYLOAD,
    NO_BLOCK_FOUND,
    AnalysisCancelled,
    ExtractionError,
)
from content_revival.domain.models import RevivalStrategy

OPEN_TAG = "<thinking>"
CLOSE_TAG = "</thinking>"

# Wrappers some model outputs put around the real payload
WRAPPER_KEYS = ("RevivalStrategy", "revivalStrategy")

DEFAULT_METADATA = {
    "title": "Unknown Title",
    "publishDate": "Unknown Date",
    "currentViews": 0,
}

# First fenced block, with or without a json tag in any case
_JSON_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


class StreamingReportExtractor:
    """
    Accumulates one response stream. Not reusable: create one per analysis.

    on_thinking receives the full narrative each time it changes and must
    replace what it shows, not append to it.
    """

    def __init__(self, on_thinking: Optional[Callable[[str], None]] = None):
        self._on_thinking = on_thinking
        self._buffer = ""
        self._scanned = 0  # buffer offset the tag search has covered
        self._open_end: Optional[int] = None  # offset just past <thinking>
        self._close_start: Optional[int] = None
        self._narrative: Optional[str] = None
        self._cancelled = False

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def narrative(self) -> Optional[str]:
        return self._narrative

    @property
    def thinking_closed(self) -> bool:
        return self._close_start is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def feed(self, fragment: Optional[str]) -> None:
        """Append one fragment and refresh the narrative."""
        if self._cancelled or not fragment:
            return
        self._buffer += fragment
        self._scan()

    def _scan(self) -> None:
        # Only the unscanned tail is searched, backed up by a tag length so
        # a tag split across fragments is still found.
        if self._close_start is not None:
            return
        if self._open_end is None:
            start = max(0, self._scanned - len(OPEN_TAG) + 1)
            pos = self._buffer.find(OPEN_TAG, start)
            if pos == -1:
                self._scanned = len(self._buffer)
                return
            self._open_end = pos + len(OPEN_TAG)
            self._scanned = self._open_end

        start = max(self._open_end, self._scanned - len(CLOSE_TAG) + 1)
        pos = self._buffer.find(CLOSE_TAG, start)
        if pos == -1:
            self._scanned = len(self._buffer)
            self._emit(self._buffer[self._open_end:])
        else:
            self._close_start = pos
            self._scanned = pos + len(CLOSE_TAG)
            self._emit(self._buffer[self._open_end:pos])

    def _emit(self, narrative: str) -> None:
        if narrative == self._narrative:
            return
        self._narrative = narrative
        if self._on_thinking is not None:
            self._on_thinking(narrative)

    def cancel(self) -> None:
        """Stop emitting and drop everything received. finalize() will refuse to run."""
        self._cancelled = True
        self._buffer = ""
        self._narrative = None

    def finalize(self) -> RevivalStrategy:
        """Parse the report out of the finished stream."""
        if self._cancelled:
            raise AnalysisCancelled("Analysis was cancelled before the stream finished.")

        match = _JSON_BLOCK.search(self._buffer)
        if not match:
            raise ExtractionError(NO_BLOCK_FOUND)

        raw = match.group(1)
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            # RecursionError: nesting deeper than the decoder can follow
            raise ExtractionError(MALFORMED_PAYLOAD, raw=raw) from exc

        return _repair(_unwrap(payload))

    def consume(self, fragments: Iterable[str]) -> RevivalStrategy:
        """Drain a blocking fragment iterator, then finalize."""
        try:
            for fragment in fragments:
                if self._cancelled:
                    close = getattr(fragments, "close", None)
                    if close is not None:
                        close()
                    break
                self.feed(fragment)
        except KeyboardInterrupt:
            self.cancel()
            raise
        if self._cancelled:
            raise AnalysisCancelled("Analysis was cancelled before the stream finished.")
        return self.finalize()

    async def aconsume(self, fragments: AsyncIterable[str]) -> RevivalStrategy:
        """Drain an async fragment stream, then finalize."""
        try:
            async for fragment in fragments:
                if self._cancelled:
                    aclose = getattr(fragments, "aclose", None)
                    if aclose is not None:
                        await aclose()
                    break
                self.feed(fragment)
        except asyncio.CancelledError:
            self.cancel()
            raise
        if self._cancelled:
            raise AnalysisCancelled("Analysis was cancelled before the stream finished.")
        return self.finalize()


def _unwrap(payload: Any) -> Any:
    # Any other shape (deeper nesting, arrays) is passed through as is.
    if isinstance(payload, dict):
        for key in WRAPPER_KEYS:
            nested = payload.get(key)
            if isinstance(nested, dict):
                return nested
    return payload


def _repair(strategy: Any) -> Any:
    # Deliberately lenient: an analysis that only lost its metadata still
    # shows its report instead of failing outright.
    if isinstance(strategy, dict) and not strategy.get("originalVideoMetadata"):
        print("  ⚠️  Missing originalVideoMetadata, attempting to reconstruct...")
        strategy["originalVideoMetadata"] = dict(DEFAULT_METADATA)
    return strategy


def process_stream(
    fragments: Iterable[str],
    on_thinking: Optional[Callable[[str], None]] = None,
) -> RevivalStrategy:
    """One-shot helper: consume a fragment stream and return the report."""
    return StreamingReportExtractor(on_thinking).consume(fragments)
