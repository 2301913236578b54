"""
Boundary Resolver — decide where an embedded image ends.

Embedded images carry no length prefix, so the end offset is inferred by an
ordered chain of strategies. The first strategy that returns an offset wins:

  1. footer      — first footer marker at/after the header, + end_adjustment
  2. next match  — the following header bounds this image
  3. size cap    — min(start + 1 MiB, len(buffer)) for a trailing image

Each strategy is a pure function (data, start, context) -> Optional[int]
so it can be exercised on its own.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .errors import ResolutionError
from .scanner import MatchPosition
from .signatures import ImageFormat, SignatureSpec

logger = logging.getLogger(__name__)

# Hard cap for a trailing image with no footer.
MAX_TRAILING_IMAGE_BYTES = 1024 * 1024

# Anything shorter is treated as an accidental signature match.
MIN_IMAGE_BYTES = 100


@dataclass(frozen=True)
class CandidateImage:
    """A resolved byte range, copied out of the source buffer."""
    format: ImageFormat
    start: int
    end: int                    # exclusive
    data: bytes

    @property
    def size(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ResolutionContext:
    signature: SignatureSpec
    next_offset: Optional[int] = None


Strategy = Callable[[bytes, int, ResolutionContext], Optional[int]]


def end_from_footer(data: bytes, start: int, ctx: ResolutionContext) -> Optional[int]:
    """End of the first footer marker found from `start` onwards."""
    footer = ctx.signature.footer
    if not footer:
        return None
    pos = data.find(footer, start)
    if pos == -1:
        return None
    return pos + ctx.signature.end_adjustment


def end_from_next_match(data: bytes, start: int, ctx: ResolutionContext) -> Optional[int]:
    """The next header's offset, when there is one."""
    return ctx.next_offset


def end_from_size_cap(data: bytes, start: int, ctx: ResolutionContext) -> Optional[int]:
    return min(start + MAX_TRAILING_IMAGE_BYTES, len(data))


BOUNDARY_STRATEGIES: tuple[Strategy, ...] = (
    end_from_footer,
    end_from_next_match,
    end_from_size_cap,
)


def resolve_end(
    data: bytes,
    start: int,
    ctx: ResolutionContext,
    strategies: Sequence[Strategy] = BOUNDARY_STRATEGIES,
) -> Optional[int]:
    for strategy in strategies:
        end = strategy(data, start, ctx)
        if end is not None:
            logger.debug("Offset %d: end %d via %s", start, end, strategy.__name__)
            return end
    return None


def resolve_boundary(
    data: bytes,
    positions: Sequence[MatchPosition],
    index: int,
    strategies: Sequence[Strategy] = BOUNDARY_STRATEGIES,
) -> CandidateImage:
    """
    Resolve positions[index] into a CandidateImage.

    Raises ResolutionError when no strategy yields an end offset or the
    range is not start < end <= len(data).
    """
    match = positions[index]
    next_offset = positions[index + 1].offset if index + 1 < len(positions) else None
    ctx = ResolutionContext(signature=match.signature, next_offset=next_offset)

    start = match.offset
    end = resolve_end(data, start, ctx, strategies)
    if end is None or not (start < end <= len(data)):
        raise ResolutionError(start, -1 if end is None else end, len(data))

    return CandidateImage(
        format=match.format,
        start=start,
        end=end,
        data=bytes(data[start:end]),
    )
