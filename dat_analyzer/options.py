"""Decoder configuration."""
import codecs
from dataclasses import dataclass
from typing import FrozenSet

# Sections whose payload layout is only partly reverse-engineered. They are
# located and left undecoded unless a caller asks for them.
DEFAULT_DEFERRED = frozenset({'lightgrid', 'render_data'})


@dataclass(frozen=True)
class DecodeOptions:
    """Options shared by every section decoder.

    Attributes:
        strict: Raise InconsistentLength on declared size/count mismatches
            instead of recording a warning
        vertex_tangents: Render vertices carry tangent and binormal vectors
            (68-byte layout). Older v85 worlds omit them (44 bytes).
        encoding: Text encoding for length-prefixed strings. The default
            maps every byte to one character so strings survive re-encoding.
        deferred_sections: Section names that are only located, not decoded
        world_tree: Read the world info block and BSP world tree stored
            directly after the header. Off by default; files that place a
            section there cannot be read with it on.
    """
    strict: bool = False
    vertex_tangents: bool = True
    encoding: str = 'latin-1'
    deferred_sections: FrozenSet[str] = DEFAULT_DEFERRED
    world_tree: bool = False

    def __post_init__(self):
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown string encoding '{self.encoding}'") from None

    @classmethod
    def full(cls, **overrides) -> 'DecodeOptions':
        """Options that decode every section and the world tree."""
        values = dict(deferred_sections=frozenset(), world_tree=True)
        values.update(overrides)
        return cls(**values)
