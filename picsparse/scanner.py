"""
Signature Scanner — find every image header inside a byte buffer.

Each header is located with bytes.find(), restarting ONE byte past the
previous hit so overlapping look-alike sequences are never skipped. The
per-signature hit lists are merged and sorted by offset; the sort is stable,
so two signatures matching at the same offset keep table order.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from .signatures import ImageFormat, SignatureSpec, SIGNATURE_TABLE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchPosition:
    """A header occurrence in the source buffer."""
    offset: int
    format: ImageFormat
    signature: SignatureSpec


def find_all(data: bytes, pattern: bytes) -> list[int]:
    """Return all positions of `pattern` in `data`."""
    positions = []
    if not pattern:
        return positions
    start = 0
    while True:
        pos = data.find(pattern, start)
        if pos == -1:
            break
        positions.append(pos)
        start = pos + 1
    return positions


def scan_signatures(
    data: bytes,
    table: Sequence[SignatureSpec] = SIGNATURE_TABLE,
) -> list[MatchPosition]:
    """Locate every header of every signature in `table`, sorted by offset."""
    matches: list[MatchPosition] = []
    for sig in table:
        for pos in find_all(data, sig.header):
            matches.append(MatchPosition(offset=pos, format=sig.format, signature=sig))

    matches.sort(key=lambda m: m.offset)
    logger.debug("Scanned %d bytes: %d header match(es)", len(data), len(matches))
    return matches
