"""
Clipboard-like sinks for exported text.

Copying is fire-and-forget: :func:`copy_to_clipboard` never raises, and
a failed copy has no effect on the curve or on the text that was already
returned to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ClipboardSink(Protocol):
    async def write_text(self, text: str) -> None:
        ...


class MemoryClipboard:
    """Holds the most recently copied text."""

    def __init__(self) -> None:
        self.text: Optional[str] = None

    async def write_text(self, text: str) -> None:
        self.text = text


async def copy_to_clipboard(sink: ClipboardSink, text: str) -> bool:
    """Write ``text`` to ``sink``; return False if the sink failed."""
    try:
        await sink.write_text(text)
    except Exception as exc:
        logger.debug("clipboard copy failed: %s", exc)
        return False
    return True
