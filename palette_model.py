"""
Palette document model: Palette -> Group -> Color.

The canonical serialized form (used by persistence and share tokens) is

    {"name": str, "groups": [{"name": str, "colors": [{"hex": "#rrggbb"}]}]}

Ids are internal: they are never serialized and are minted fresh whenever a
palette is loaded from its serialized form.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from color_space import normalize_hex
from palette_errors import InvalidColor


def new_id() -> str:
    """Return a new opaque, unique identifier."""
    return uuid.uuid4().hex


@dataclass
class Color:
    hex: str
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.hex = normalize_hex(self.hex)


@dataclass
class Group:
    name: str
    colors: list[Color] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def find_color(self, color_id: str) -> Optional[Color]:
        for color in self.colors:
            if color.id == color_id:
                return color
        return None

    def index_of(self, color_id: str) -> int:
        """Position of a color in this group, or -1."""
        for i, color in enumerate(self.colors):
            if color.id == color_id:
                return i
        return -1


@dataclass
class Palette:
    name: str = ''
    groups: list[Group] = field(default_factory=list)

    @classmethod
    def from_colors(cls, name: str, hexes, group_name: str = 'Main') -> 'Palette':
        """Build a one-group palette, as produced by generation."""
        return cls(name=name, groups=[Group(group_name, [Color(h) for h in hexes])])

    @property
    def is_empty(self) -> bool:
        return len(self.groups) == 0

    def find_group(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def find_color(self, color_id: str) -> tuple[Optional[Group], Optional[Color]]:
        """Locate a color anywhere in the palette, returning (group, color)."""
        for group in self.groups:
            color = group.find_color(color_id)
            if color is not None:
                return group, color
        return None, None

    def all_colors(self) -> list[Color]:
        """All colors flattened in group order."""
        return [color for group in self.groups for color in group.colors]

    def total_colors(self) -> int:
        return sum(len(group.colors) for group in self.groups)

    def copy(self) -> 'Palette':
        """Deep copy that keeps ids."""
        return Palette(
            name=self.name,
            groups=[
                Group(g.name, [Color(c.hex, id=c.id) for c in g.colors], id=g.id)
                for g in self.groups
            ],
        )

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'groups': [
                {'name': g.name, 'colors': [{'hex': c.hex} for c in g.colors]}
                for g in self.groups
            ],
        }

    @classmethod
    def from_dict(cls, data) -> 'Palette':
        """
        Build a palette from its serialized form, minting fresh ids.

        Extra keys (such as ids written by older versions) are ignored.

        Raises:
            ValueError: If the data does not match the palette schema.
        """
        if not isinstance(data, dict):
            raise ValueError("Palette must be an object")
        name = data.get('name')
        if not isinstance(name, str):
            raise ValueError("Palette 'name' must be a string")
        groups = data.get('groups')
        if not isinstance(groups, list):
            raise ValueError("Palette 'groups' must be an array")

        palette = cls(name=name)
        for i, group_data in enumerate(groups):
            if not isinstance(group_data, dict):
                raise ValueError(f"Group {i} must be an object")
            group_name = group_data.get('name')
            if not isinstance(group_name, str) or not group_name.strip():
                raise ValueError(f"Group {i} needs a non-empty 'name'")
            colors = group_data.get('colors', [])
            if not isinstance(colors, list):
                raise ValueError(f"Group {i} 'colors' must be an array")

            group = Group(group_name)
            for color_data in colors:
                if not isinstance(color_data, dict):
                    raise ValueError(f"Colors in group {i} must be objects")
                try:
                    group.colors.append(Color(color_data.get('hex')))
                except InvalidColor as e:
                    raise ValueError(f"Group {i}: {e}") from None
            palette.groups.append(group)

        return palette
