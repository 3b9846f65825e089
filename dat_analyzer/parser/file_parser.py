"""World file parser."""
from typing import Any, Dict, List, Optional, Type
import logging
from pathlib import Path

from ..errors import InvalidOffset, decode_context
from ..options import DecodeOptions
from ..reader import ByteCursor, Source
from ..sections.base import BaseSection
from ..sections.blind_objects import BlindObjectsSection
from ..sections.constants import SectionName
from ..sections.header import Header, HeaderSection, WorldInfoSection
from ..sections.lightgrid import LightGridSection
from ..sections.objects import WorldObjectsSection
from ..sections.polygons import ParticleBlockerSection, PhysicsSection
from ..sections.render import RenderDataSection
from ..sections.world_tree import WorldTreeSection
from .document import DeferredSection, WorldDocument

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS: Dict[SectionName, Type[BaseSection]] = {
    SectionName.WORLD_OBJECTS: WorldObjectsSection,
    SectionName.BLIND_OBJECTS: BlindObjectsSection,
    SectionName.LIGHTGRID: LightGridSection,
    SectionName.PHYSICS: PhysicsSection,
    SectionName.PARTICLE_BLOCKERS: ParticleBlockerSection,
    SectionName.RENDER_DATA: RenderDataSection,
}


class SectionRegistry:
    """Maps each offset-addressed section to its decoder class.

    Replacing one entry leaves the other sections untouched, so a newly
    reverse-engineered layout can be tried without forking the parser.
    """

    def __init__(self, sections: Optional[Dict[SectionName, Type[BaseSection]]] = None):
        self._sections = dict(DEFAULT_SECTIONS)
        if sections:
            for name, decoder in sections.items():
                self.register(name, decoder)

    def register(self, name: SectionName, decoder: Type[BaseSection]) -> None:
        self._sections[SectionName(name)] = decoder

    def get(self, name: SectionName) -> Type[BaseSection]:
        return self._sections[SectionName(name)]


class WorldFileParser:
    """Main parser for world files.

    Decoding order:
    1. Header at offset 0, all section offsets validated up front
    2. With ``options.world_tree``, the world info and world tree read
       sequentially after the header
    3. The six sections, each at its header offset, decoded or deferred
    """

    def __init__(self,
                 options: Optional[DecodeOptions] = None,
                 registry: Optional[SectionRegistry] = None):
        self.options = options or DecodeOptions()
        self.registry = registry or SectionRegistry()
        self._deferred = {SectionName(name) for name in self.options.deferred_sections}

    def _validate_offsets(self, header: Header, length: int) -> None:
        """Reject zero offsets and offsets past the end of the source."""
        for name, offset in header.section_offsets().items():
            if offset == 0 or offset > length:
                raise InvalidOffset(offset, length, name.value)

    def _decode_section(self,
                        cursor: ByteCursor,
                        name: SectionName,
                        offset: int,
                        warnings: List[str]) -> Any:
        decoder = self.registry.get(name)(cursor, self.options, warnings)
        with decode_context(name.value):
            cursor.seek_absolute(offset)
            if name in self._deferred:
                logger.debug(f"Deferring {name.value} at 0x{offset:08X}")
                return DeferredSection(offset, decoder.read_prefix())
            logger.debug(f"Decoding {name.value} at 0x{offset:08X}")
            return decoder.parse()

    def parse(self, source: Source) -> WorldDocument:
        """Decode a world file from bytes or a seekable binary stream.

        Raises:
            DecodeError: On the first malformed or truncated section; no
                partial document is returned
        """
        cursor = ByteCursor(source)
        warnings: List[str] = []

        with decode_context('header'):
            header = HeaderSection(cursor, self.options, warnings).parse()
        self._validate_offsets(header, cursor.length)

        world_info = world_tree = None
        if self.options.world_tree:
            with decode_context('world_info'):
                world_info = WorldInfoSection(cursor, self.options, warnings).parse()
            with decode_context('world_tree'):
                world_tree = WorldTreeSection(cursor, self.options, warnings).parse()

        sections = {
            name: self._decode_section(cursor, name, offset, warnings)
            for name, offset in header.section_offsets().items()
        }

        return WorldDocument(
            header=header,
            world_info=world_info,
            world_tree=world_tree,
            world_objects=sections[SectionName.WORLD_OBJECTS],
            blind_objects=sections[SectionName.BLIND_OBJECTS],
            lightgrid=sections[SectionName.LIGHTGRID],
            physics=sections[SectionName.PHYSICS],
            particle_blockers=sections[SectionName.PARTICLE_BLOCKERS],
            render_data=sections[SectionName.RENDER_DATA],
            warnings=tuple(warnings)
        )

    def parse_file(self, file_path: Path) -> WorldDocument:
        """Decode a world file from disk."""
        with open(file_path, 'rb') as f:
            logger.debug(f"Parsing {file_path}")
            return self.parse(f)


def decode_world(source: Source, options: Optional[DecodeOptions] = None) -> WorldDocument:
    """Decode a world file with the default section decoders."""
    return WorldFileParser(options).parse(source)
