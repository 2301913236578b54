"""
Image Signature Table — what counts as an embedded image.

DESIGN RATIONALE
────────────────
Container files (UHTML and friends) carry images as raw byte runs with no
reliable length prefix. The only things we can trust are the magic bytes at
the start of each format and, when present, its structural end marker:

  • JPEG   — SOI  FF D8 FF           … EOI  FF D9
  • PNG    — 89 'PNG' 0D 0A 1A 0A     … 'IEND' + CRC (AE 42 60 82)
  • GIF    — 'GIF87a' / 'GIF89a'      … 00 3B (block terminator + trailer)

`end_adjustment` is the distance from the footer offset to the exclusive
end of the image. Adding a format means adding one SignatureSpec to
SIGNATURE_TABLE; nothing else changes.

Exported:
  • ImageFormat      — format tag carrying its MIME type
  • SignatureSpec    — one (header, footer, adjustment) entry
  • SIGNATURE_TABLE  — the default table, in tie-break order
  • extension_for_mime()
"""

from dataclasses import dataclass
from enum import Enum


class ImageFormat(Enum):
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


@dataclass(frozen=True)
class SignatureSpec:
    """One header/footer pair for a recoverable image format."""
    name: str
    format: ImageFormat
    header: bytes
    footer: bytes
    end_adjustment: int         # footer offset + this = exclusive end

    @property
    def mime_type(self) -> str:
        return self.format.mime_type


# ── JPEG ──
SIG_JPEG = SignatureSpec(
    name="JPEG", format=ImageFormat.JPEG,
    header=b"\xFF\xD8\xFF",
    footer=b"\xFF\xD9",
    end_adjustment=2,
)

# ── PNG ──  (IEND chunk type + its fixed CRC)
SIG_PNG = SignatureSpec(
    name="PNG", format=ImageFormat.PNG,
    header=b"\x89PNG\r\n\x1A\n",
    footer=b"IEND\xAE\x42\x60\x82",
    end_adjustment=8,
)

# ── GIF ──
SIG_GIF87A = SignatureSpec(
    name="GIF87a", format=ImageFormat.GIF,
    header=b"GIF87a",
    footer=b"\x00\x3B",
    end_adjustment=2,
)

SIG_GIF89A = SignatureSpec(
    name="GIF89a", format=ImageFormat.GIF,
    header=b"GIF89a",
    footer=b"\x00\x3B",
    end_adjustment=2,
)

# Declaration order is the tie-break order for matches at the same offset.
SIGNATURE_TABLE: tuple[SignatureSpec, ...] = (
    SIG_JPEG,
    SIG_PNG,
    SIG_GIF87A,
    SIG_GIF89A,
)

# webp / bmp are reserved: no signature produces them yet.
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}

DEFAULT_EXTENSION = ".img"


def extension_for_mime(mime_type: str) -> str:
    """Map a MIME type to the file extension used for saved images."""
    return MIME_EXTENSIONS.get(mime_type, DEFAULT_EXTENSION)
