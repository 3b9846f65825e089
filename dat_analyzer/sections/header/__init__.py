# dat_analyzer/sections/header/__init__.py
"""File header and world info."""
from .parser import HEADER_SCHEMA, HeaderSection, WorldInfoSection
from .entry import HEADER_SIZE, Header, WorldInfo

__all__ = ['HEADER_SCHEMA', 'HEADER_SIZE', 'Header', 'HeaderSection', 'WorldInfo', 'WorldInfoSection']
