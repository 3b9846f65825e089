"""Base section decoder and shared aggregate routines."""
from contextlib import nullcontext
from typing import Any, Callable, List, Optional, Tuple, TypeVar
import logging

from ..errors import DecodeError, InconsistentLength, decode_context
from ..options import DecodeOptions
from ..reader import ByteCursor

logger = logging.getLogger(__name__)

T = TypeVar('T')


def decode_text(raw: bytes, encoding: str, offset: int) -> str:
    """Decode string bytes read at ``offset``."""
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Invalid {encoding} text: {e.reason} at byte {e.start}",
            offset + e.start
        ) from None


def read_lstring(cursor: ByteCursor, encoding: str = 'latin-1') -> str:
    """Read a string with a 16-bit length prefix (no terminator)."""
    length = cursor.read_u16()
    if length == 0:
        return ''
    offset = cursor.position
    return decode_text(cursor.read_bytes(length), encoding, offset)


def read_lstring32(cursor: ByteCursor, encoding: str = 'latin-1') -> str:
    """Read a string with a 32-bit length prefix."""
    length = cursor.read_u32()
    if length == 0:
        return ''
    offset = cursor.position
    return decode_text(cursor.read_bytes(length), encoding, offset)


def read_array(cursor: ByteCursor,
               count: int,
               decode_one: Callable[[ByteCursor], T],
               name: Optional[str] = None) -> Tuple[T, ...]:
    """Decode exactly ``count`` elements in file order.

    A failing element is reported as ``name[i]``; nothing decoded so far is
    returned in that case.
    """
    items: List[T] = []
    with decode_context(name) if name else nullcontext():
        for i in range(count):
            with decode_context(f"[{i}]"):
                items.append(decode_one(cursor))
    return tuple(items)


class BaseSection:
    """Base class for section decoders.

    A section decoder is handed a cursor already positioned at the section
    start. It reads forward only and returns an immutable value; it never
    seeks. Non-fatal findings go to ``warnings`` (shared with the caller)
    and the module logger.
    """

    #: Whether the section starts with a u32 count/length prefix
    HAS_PREFIX = True

    def __init__(self,
                 cursor: ByteCursor,
                 options: Optional[DecodeOptions] = None,
                 warnings: Optional[List[str]] = None):
        self.cursor = cursor
        self.options = options or DecodeOptions()
        self.warnings = warnings if warnings is not None else []

    def parse(self) -> Any:
        """Decode the section.

        Raises:
            DecodeError: If the section data is truncated or malformed
        """
        raise NotImplementedError("Subclasses must implement parse()")

    def read_prefix(self) -> Optional[int]:
        """Read only the section prefix, used for deferred sections."""
        if not self.HAS_PREFIX:
            return None
        return self.cursor.read_u32()

    def read_lstring(self) -> str:
        return read_lstring(self.cursor, self.options.encoding)

    def read_lstring32(self) -> str:
        return read_lstring32(self.cursor, self.options.encoding)

    def read_array(self, count: int, decode_one: Callable[[ByteCursor], T],
                   name: Optional[str] = None) -> Tuple[T, ...]:
        return read_array(self.cursor, count, decode_one, name)

    def read_counted(self, decode_one: Callable[[ByteCursor], T],
                     name: Optional[str] = None,
                     width: int = 4) -> Tuple[T, ...]:
        """Read a count prefix (u8/u16/u32) then that many elements."""
        if width == 1:
            count = self.cursor.read_u8()
        elif width == 2:
            count = self.cursor.read_u16()
        else:
            count = self.cursor.read_u32()
        return self.read_array(count, decode_one, name)

    def read_blob(self) -> bytes:
        """Read a u32 length followed by that many opaque bytes."""
        return self.cursor.read_bytes(self.cursor.read_u32())

    def check_length(self, reason: str, declared: int, actual: int,
                     offset: Optional[int] = None) -> None:
        """Report a declared/actual mismatch as a warning, or fail in strict mode."""
        if declared == actual:
            return
        if self.options.strict:
            raise InconsistentLength(reason, declared, actual, offset)
        message = f"{reason}: declared {declared}, actual {actual}"
        if offset is not None:
            message += f" at offset 0x{offset:08X}"
        logger.warning(message)
        self.warnings.append(message)
