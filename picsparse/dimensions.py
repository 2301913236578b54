"""
Dimension reader — pixel width/height without decoding image data.

Dimensions only feed the size filter, so this lookup NEVER fails:

  • Pillow first — Image.open() is lazy and only parses the header.
  • Manual fallback — fixed header fields per format:
      JPEG  walk marker segments to SOF0–SOF3 (BE height, width)
      PNG   IHDR width/height, BE u32 at offsets 16 and 20
      GIF   logical screen descriptor, LE u16 at offsets 6 and 8
  • Anything unresolvable → PLACEHOLDER_DIMENSIONS (assume plausible).
"""

from __future__ import annotations

import io
import struct
import logging
from typing import NamedTuple, Optional

from PIL import Image

logger = logging.getLogger(__name__)

# Carved images can be large; Pillow is only asked for a header here.
Image.MAX_IMAGE_PIXELS = None

PLACEHOLDER_DIMENSIONS = (100, 100)
MIN_HEADER_BYTES = 10

_JPEG_MAGIC = b"\xFF\xD8\xFF"
_PNG_MAGIC = b"\x89PNG\r\n\x1A\n"
_GIF_MAGICS = (b"GIF87a", b"GIF89a")


class Dimensions(NamedTuple):
    width: int
    height: int
    resolved: bool = True


def read_dimensions(data: bytes, use_pillow: bool = True) -> Dimensions:
    """Return the image size in pixels; see module docstring for the chain."""
    if use_pillow:
        size = _pillow_dimensions(data)
        if size is not None:
            return Dimensions(*size)
    return parse_dimensions_manually(data)


def _pillow_dimensions(data: bytes) -> Optional[tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except Exception as e:
        logger.debug("Pillow could not size %d bytes: %s", len(data), e)
        return None
    return width, height


def parse_dimensions_manually(data: bytes) -> Dimensions:
    if len(data) < MIN_HEADER_BYTES:
        return Dimensions(0, 0, resolved=False)

    size = None
    if data.startswith(_JPEG_MAGIC):
        size = parse_jpeg_dimensions(data)
    elif data.startswith(_PNG_MAGIC):
        size = parse_png_dimensions(data)
    elif data[:6] in _GIF_MAGICS:
        size = parse_gif_dimensions(data)

    if size is None:
        return Dimensions(*PLACEHOLDER_DIMENSIONS, resolved=False)
    return Dimensions(*size)


def parse_jpeg_dimensions(data: bytes) -> Optional[tuple[int, int]]:
    """Walk JPEG marker segments until a baseline/progressive SOF marker."""
    pos = 2
    while pos + 4 < len(data):
        if data[pos] != 0xFF:
            pos += 1
            continue
        marker = data[pos + 1]
        if 0xC0 <= marker <= 0xC3:
            if pos + 9 > len(data):
                return None
            height, width = struct.unpack(">HH", data[pos + 5:pos + 9])
            return width, height
        seg_len = struct.unpack(">H", data[pos + 2:pos + 4])[0]
        pos += seg_len + 2
    return None


def parse_png_dimensions(data: bytes) -> Optional[tuple[int, int]]:
    if len(data) < 24:
        return None
    return struct.unpack(">II", data[16:24])


def parse_gif_dimensions(data: bytes) -> Optional[tuple[int, int]]:
    if len(data) < 10:
        return None
    return struct.unpack("<HH", data[6:10])
