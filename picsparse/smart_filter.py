"""
Smart Filter — drop accidental signature matches by pixel size.

Random binary data regularly contains FF D8 FF or a GIF header by chance.
Such matches decode to tiny or absurd dimensions, so by default anything
under 20×20 is discarded. Callers may supply their own minimum, or switch
dimension filtering off entirely (the 100-byte gate in boundary still
applies).
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MIN_DIMENSION = 20


def effective_minimum(min_dimensions: Optional[tuple[int, int]] = None) -> tuple[int, int]:
    if min_dimensions is not None:
        return min_dimensions
    return DEFAULT_MIN_DIMENSION, DEFAULT_MIN_DIMENSION


def passes_filter(
    width: int,
    height: int,
    include_all: bool = False,
    min_dimensions: Optional[tuple[int, int]] = None,
) -> bool:
    """True if an image of width×height should be kept."""
    if include_all:
        return True
    min_w, min_h = effective_minimum(min_dimensions)
    if width < min_w or height < min_h:
        logger.info("Skipping small image: %dx%d px (minimum %dx%d)",
                    width, height, min_w, min_h)
        return False
    return True
