"""Rendered output stream for live conversation text.

Fragments are written as they arrive, with no separators and no
buffering delay. Styling is left to the console banner; the rendered
stream stays plain so it can be piped.
"""

import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)

CLOSING_LINE = "End of thread!"


class Renderer:
    """Writes conversation text to a stream, flushing every write."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.closed = False

    def fragment(self, text: str) -> None:
        print(text, end="", file=self.stream, flush=True)

    def newline(self) -> None:
        print(file=self.stream, flush=True)

    def close(self, closing_line: str = CLOSING_LINE) -> None:
        """Emit the closing line. Later calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        print(f"\n{closing_line}", file=self.stream, flush=True)
