"""Exceptions raised by the extraction engine."""


class ExtractionError(RuntimeError):
    """Base class for extraction failures."""


class SourcePathError(ExtractionError):
    """Source path is missing, of the wrong kind, or has the wrong extension."""


class ResolutionError(ExtractionError):
    """A candidate's byte range could not be resolved to a valid slice."""

    def __init__(self, start: int, end: int, buffer_len: int):
        super().__init__(
            f"invalid image range [{start}, {end}) in {buffer_len}-byte buffer"
        )
        self.start = start
        self.end = end
        self.buffer_len = buffer_len
