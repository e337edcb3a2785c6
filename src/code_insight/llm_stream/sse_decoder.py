"""
Incremental Server-Sent-Event Decoder

Turns an incrementally delivered chat-completion body into text fragments.

Keeps a carry-over buffer, splits on newline, decodes every complete line
and retains the trailing partial line for the next segment. Each
``data:`` record is one JSON envelope; the first choice's ``delta.content``
is the fragment. The ``[DONE]`` terminal marker is recognized and dropped.

Author: System Architect
Date: 2026-03-04
"""

from typing import Any

import orjson

from code_insight.core.config.constants import SSE_DATA_PREFIX, SSE_DONE_MARKER
from code_insight.core.exceptions import MalformedStreamRecord
from code_insight.core.logging import get_logger

logger = get_logger(__name__)


def extract_delta(envelope: Any) -> str | None:
    """Return the first choice's non-empty ``delta.content``, if present."""
    if not isinstance(envelope, dict):
        return None
    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


def parse_record(line: str) -> str | None:
    """
    Decode one line of the stream.

    Returns:
        The text fragment, or None for non-data lines, the terminal
        marker and envelopes without content

    Raises:
        MalformedStreamRecord: If a data payload is not valid JSON
    """
    line = line.rstrip("\r")
    if not line.startswith(SSE_DATA_PREFIX):
        return None

    payload = line[len(SSE_DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    if payload.strip() == SSE_DONE_MARKER:
        return None

    try:
        envelope = orjson.loads(payload)
    except orjson.JSONDecodeError as exc:
        raise MalformedStreamRecord(
            "Undecodable stream record", details={"payload_length": len(payload)}
        ) from exc

    return extract_delta(envelope)


class SSELineDecoder:
    """
    Stateful line splitter for one response body.

    Usage:
        decoder = SSELineDecoder()
        async for text in response.aiter_text():
            for fragment in decoder.feed(text):
                ...
        for fragment in decoder.flush():
            ...
    """

    def __init__(self) -> None:
        self._buffer = ""
        self.skipped_records = 0

    def feed(self, text: str) -> list[str]:
        """Append a body segment and return fragments from every completed line."""
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        return self._decode(lines)

    def flush(self) -> list[str]:
        """Decode whatever is left once the body has ended."""
        remainder, self._buffer = self._buffer, ""
        if not remainder.strip():
            return []
        return self._decode([remainder])

    def _decode(self, lines: list[str]) -> list[str]:
        fragments = []
        for line in lines:
            try:
                fragment = parse_record(line)
            except MalformedStreamRecord as exc:
                self.skipped_records += 1
                logger.debug("Skipping malformed stream record", details=exc.details)
                continue
            if fragment:
                fragments.append(fragment)
        return fragments
