"""Index helpers for Google Docs offsets.

Google Docs indexes are UTF-16 code unit offsets. Body content starts at
index 1; header and footer segments each have their own index space starting
at 0.
"""

from __future__ import annotations

from dataclasses import dataclass

BODY_START_INDEX = 1
SEGMENT_START_INDEX = 0


def utf16_len(text: str) -> int:
    """Calculate the length of a string in UTF-16 code units.

    Characters outside the BMP (code points > 0xFFFF) use surrogate pairs
    in UTF-16, consuming 2 code units.
    """
    length = 0
    for char in text:
        if ord(char) > 0xFFFF:
            length += 2
        else:
            length += 1
    return length


@dataclass(frozen=True)
class Range:
    """A half-open ``[start, end)`` offset range."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def shrink_end(self, count: int = 1) -> Range:
        """Return the range without its last ``count`` code units."""
        return Range(self.start, self.end - count)

    def tail(self, count: int = 1) -> Range:
        """Return the last ``count`` code units of the range."""
        return Range(self.end - count, self.end)
