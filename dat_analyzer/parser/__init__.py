# dat_analyzer/parser/__init__.py
"""World file parser module."""
from .file_parser import SectionRegistry, WorldFileParser, decode_world
from .document import DeferredSection, WorldDocument
from ..sections.constants import SectionName

__all__ = [
    'WorldFileParser',
    'SectionRegistry',
    'SectionName',
    'WorldDocument',
    'DeferredSection',
    'decode_world'
]
