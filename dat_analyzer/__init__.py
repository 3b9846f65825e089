# dat_analyzer/__init__.py
"""LithTech world (.dat) file analyzer package."""
from .errors import (
    DecodeError,
    InconsistentLength,
    InvalidOffset,
    UnexpectedEof,
    UnknownPropertyTag
)
from .options import DecodeOptions
from .parser import (
    DeferredSection,
    SectionName,
    SectionRegistry,
    WorldDocument,
    WorldFileParser,
    decode_world
)
from .writer import WorldWriter, encode_world

__version__ = '0.1.0'

__all__ = [
    'DecodeError',
    'InconsistentLength',
    'InvalidOffset',
    'UnexpectedEof',
    'UnknownPropertyTag',
    'DecodeOptions',
    'DeferredSection',
    'SectionName',
    'SectionRegistry',
    'WorldDocument',
    'WorldFileParser',
    'decode_world',
    'WorldWriter',
    'encode_world'
]
