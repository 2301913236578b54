"""
Extraction Manager — file and directory front-end.

Owns everything that touches the filesystem: validating source paths,
reading a container into memory, writing accepted images out as
image_000.jpg, image_001.png, …, and exporting a JSON report. The
extractor itself never sees a path.
"""

import os
import json
import time
import logging
import functools
from dataclasses import dataclass, field
from typing import Optional

from .errors import ExtractionError, SourcePathError
from .extractor import ExtractedImage, ExtractionOptions, extract_images
from .parallel import ParallelBatchConfig, map_files

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".uhtml"


@dataclass(frozen=True)
class ExtractionSummary:
    """Outcome of extracting one source file."""
    source_file: str
    output_directory: str
    total_images: int
    saved_images: int
    error: Optional[str] = None
    saved_paths: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None


def default_output_dir(source_path: str) -> str:
    """<parent>/<stem> for a source file."""
    parent = os.path.dirname(os.path.abspath(source_path))
    stem = os.path.splitext(os.path.basename(source_path))[0]
    return os.path.join(parent, stem)


def _has_extension(path: str, source_extension: str) -> bool:
    return os.path.splitext(path)[1] == source_extension


def read_source(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ExtractionError(f"Cannot read {path}: {e}") from e


def save_image(output_dir: str, image: ExtractedImage) -> str:
    """Write one image into output_dir under its generated name."""
    path = os.path.join(output_dir, image.filename)
    with open(path, "wb") as f:
        f.write(image.data)
    return path


def extract_images_from_file(
    path: str,
    output_dir: Optional[str] = None,
    options: Optional[ExtractionOptions] = None,
    source_extension: str = SOURCE_EXTENSION,
) -> ExtractionSummary:
    """
    Extract and save every image embedded in one container file.

    Raises SourcePathError for a missing path, a non-file, or the wrong
    extension; ExtractionError when the file or output directory cannot be
    used. Individual image write failures are logged and only lower
    saved_images.
    """
    if not os.path.exists(path):
        raise SourcePathError(f"File does not exist: {path}")
    if not os.path.isfile(path):
        raise SourcePathError(f"Not a file: {path}")
    if not _has_extension(path, source_extension):
        raise SourcePathError(
            f"Unsupported file type {os.path.splitext(path)[1] or '(none)'!r}: {path}")

    if not output_dir:
        output_dir = default_output_dir(path)
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise ExtractionError(f"Cannot create output directory {output_dir}: {e}") from e

    data = read_source(path)
    images = extract_images(data, options)

    saved: list[str] = []
    for image in images:
        try:
            saved_path = save_image(output_dir, image)
        except OSError as e:
            logger.warning("Save failed for image %d of %s: %s", image.index, path, e)
            continue
        logger.info("Saved %s (%dx%d, %d bytes)",
                    saved_path, image.width, image.height, image.size)
        saved.append(saved_path)

    return ExtractionSummary(
        source_file=path,
        output_directory=output_dir,
        total_images=len(images),
        saved_images=len(saved),
        saved_paths=tuple(saved),
    )


def find_source_files(
    directory: str,
    recursive: bool = False,
    source_extension: str = SOURCE_EXTENSION,
) -> list[str]:
    found = []
    if recursive:
        for root, _dirs, files in os.walk(directory):
            for name in files:
                if _has_extension(name, source_extension):
                    found.append(os.path.join(root, name))
    else:
        for name in os.listdir(directory):
            full = os.path.join(directory, name)
            if os.path.isfile(full) and _has_extension(name, source_extension):
                found.append(full)
    return sorted(found)


def _process_file(
    path: str,
    options: Optional[ExtractionOptions] = None,
    source_extension: str = SOURCE_EXTENSION,
) -> ExtractionSummary:
    """Batch wrapper: one file's failure becomes an error summary."""
    try:
        return extract_images_from_file(path, None, options, source_extension)
    except (ExtractionError, OSError) as e:
        logger.error("Failed to process %s: %s", path, e)
        return ExtractionSummary(
            source_file=path,
            output_directory="",
            total_images=0,
            saved_images=0,
            error=str(e),
        )


def extract_images_from_directory(
    directory: str,
    recursive: bool = False,
    options: Optional[ExtractionOptions] = None,
    source_extension: str = SOURCE_EXTENSION,
    workers: int = 1,
) -> list[ExtractionSummary]:
    """Extract images from every matching file in `directory`.

    Each file lands in its own <parent>/<stem> directory.
    """
    if not os.path.isdir(directory):
        raise SourcePathError(f"Directory does not exist or is not a directory: {directory}")

    files = find_source_files(directory, recursive, source_extension)
    if not files:
        logger.info("No %s files found in %s", source_extension, directory)
        return []

    logger.info("Found %d %s file(s) in %s", len(files), source_extension, directory)
    func = functools.partial(_process_file, options=options,
                             source_extension=source_extension)
    return map_files(func, files, ParallelBatchConfig(num_workers=workers))


# ─── Reports ──────────────────────────────────────────────

def export_report_json(summaries: list[ExtractionSummary], filepath: str):
    report = {
        "date": time.strftime("%Y-%m-%d %H:%M:%S"),
        "total_files": len(summaries),
        "successful_files": sum(1 for s in summaries if s.ok),
        "total_images": sum(s.total_images for s in summaries),
        "saved_images": sum(s.saved_images for s in summaries),
        "files": [
            {
                "source": s.source_file,
                "output_directory": s.output_directory,
                "total_images": s.total_images,
                "saved_images": s.saved_images,
                "error": s.error,
                "saved": list(s.saved_paths),
            }
            for s in summaries
        ],
    }
    with open(filepath, "w") as f:
        json.dump(report, f, indent=2, default=str)
