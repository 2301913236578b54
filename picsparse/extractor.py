"""
Extractor — the buffer-level pipeline.

    scan_signatures → resolve_boundary → 100-byte gate
                    → read_dimensions → passes_filter

Candidates are processed in ascending offset order. Accepted images are
numbered by their position in the accepted list, so rejected candidates
never consume an output index.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .boundary import MIN_IMAGE_BYTES, CandidateImage, resolve_boundary
from .dimensions import read_dimensions
from .errors import ResolutionError
from .scanner import scan_signatures
from .signatures import ImageFormat, SignatureSpec, SIGNATURE_TABLE, extension_for_mime
from .smart_filter import passes_filter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionOptions:
    include_all: bool = False
    min_dimensions: Optional[tuple[int, int]] = None    # overrides 20×20
    use_pillow: bool = True


@dataclass(frozen=True)
class ExtractedImage:
    """An accepted image ready to be written out."""
    index: int
    format: ImageFormat
    start: int
    end: int
    data: bytes
    width: int
    height: int
    dimensions_resolved: bool = True

    @property
    def mime_type(self) -> str:
        return self.format.mime_type

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return extension_for_mime(self.mime_type)

    @property
    def filename(self) -> str:
        return f"image_{self.index:03d}{self.extension}"


def extract_images(
    data: bytes,
    options: Optional[ExtractionOptions] = None,
    table: Sequence[SignatureSpec] = SIGNATURE_TABLE,
) -> list[ExtractedImage]:
    """Extract every acceptable embedded image from `data`, left to right."""
    if options is None:
        options = ExtractionOptions()

    positions = scan_signatures(data, table)
    images: list[ExtractedImage] = []

    for i, match in enumerate(positions):
        try:
            candidate = resolve_boundary(data, positions, i)
        except ResolutionError as e:
            logger.debug("Dropping %s match at %d: %s", match.signature.name, match.offset, e)
            continue

        if candidate.size < MIN_IMAGE_BYTES:
            logger.debug("Dropping %s at %d: only %d bytes",
                         match.signature.name, candidate.start, candidate.size)
            continue

        image = _accept(candidate, len(images), options)
        if image is not None:
            images.append(image)

    logger.debug("Accepted %d of %d candidate(s)", len(images), len(positions))
    return images


def _accept(
    candidate: CandidateImage,
    index: int,
    options: ExtractionOptions,
) -> Optional[ExtractedImage]:
    dims = read_dimensions(candidate.data, use_pillow=options.use_pillow)
    if not passes_filter(dims.width, dims.height,
                         options.include_all, options.min_dimensions):
        return None
    return ExtractedImage(
        index=index,
        format=candidate.format,
        start=candidate.start,
        end=candidate.end,
        data=candidate.data,
        width=dims.width,
        height=dims.height,
        dimensions_resolved=dims.resolved,
    )
