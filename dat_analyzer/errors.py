"""Decode errors for world files."""
from contextlib import contextmanager
from typing import Iterator, List, Optional


class DecodeError(Exception):
    """Base class for world decoding failures.

    Carries the byte offset where decoding stopped and the logical path
    (section, field and array index segments) of the value being decoded.
    The path is filled in from the inside out as the error propagates
    through ``decode_context`` blocks.
    """

    def __init__(self, reason: str, offset: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.offset = offset
        self.path: List[str] = []

    def push_path(self, segment: str) -> None:
        """Prepend a path segment."""
        self.path.insert(0, segment)

    @property
    def location(self) -> str:
        """Dotted path, e.g. ``world_objects[3].properties[1].value``."""
        text = ''
        for segment in self.path:
            if segment.startswith('[') or not text:
                text += segment
            else:
                text += '.' + segment
        return text

    def __str__(self) -> str:
        message = self.reason
        if self.offset is not None:
            message += f" at offset 0x{self.offset:08X}"
        if self.path:
            message += f" ({self.location})"
        return message


class UnexpectedEof(DecodeError):
    """Fewer bytes remain than a field or array requires."""

    def __init__(self, needed: int, available: int, offset: int):
        super().__init__(
            f"Unexpected end of data: need {needed} bytes, {available} available",
            offset
        )
        self.needed = needed
        self.available = available


class InvalidOffset(DecodeError):
    """A header or section offset lies outside the source."""

    def __init__(self, target: int, length: int, section: Optional[str] = None):
        what = f"{section} offset" if section else "Offset"
        super().__init__(
            f"{what} {target} is outside the source (length {length})"
        )
        self.target = target
        self.length = length
        self.section = section


class UnknownPropertyTag(DecodeError):
    """A property type tag has no known payload layout."""

    def __init__(self, tag: int, offset: Optional[int] = None):
        super().__init__(f"Unknown property type tag {tag}", offset)
        self.tag = tag


class InconsistentLength(DecodeError):
    """A declared size or count disagrees with the decoded data (strict mode)."""

    def __init__(self, reason: str, declared: int, actual: int,
                 offset: Optional[int] = None):
        super().__init__(f"{reason}: declared {declared}, actual {actual}", offset)
        self.declared = declared
        self.actual = actual


@contextmanager
def decode_context(segment: str) -> Iterator[None]:
    """Annotate any DecodeError raised inside the block with ``segment``."""
    try:
        yield
    except DecodeError as e:
        e.push_path(segment)
        raise
