"""
The palette workspace: one mutable palette document plus selection state.

All structural edits go through `Workspace`. Each operation either commits
completely or leaves the document untouched, and every committed mutation is
announced on the event bus as PALETTE_UPDATED.

Drag-reorder is a two-state machine (Idle / Dragging) advanced by the single
pure function `drag_transition`. Drops and drag ends always return to Idle.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from color_space import normalize_hex
from generate_palette import GeneratedPalette
from palette_errors import NoGroupAvailable, UnsavablePalette
from palette_events import EventBus, PALETTE_GENERATED, PALETTE_SAVED, PALETTE_UPDATED
from palette_model import Color, Group, Palette

logger = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = 'Main'


# =============================================================================
# Drag-reorder state machine
# =============================================================================

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    source_group_id: str
    color_id: str


@dataclass(frozen=True)
class DragStart:
    group_id: str
    color_id: str


@dataclass(frozen=True)
class Drop:
    dest_group_id: str
    dest_index: Optional[int] = None


@dataclass(frozen=True)
class DragEnd:
    pass


DragState = Union[Idle, Dragging]
DragEvent = Union[DragStart, Drop, DragEnd]

IDLE = Idle()


def drag_transition(state: DragState, event: DragEvent, palette: Palette) -> DragState:
    """
    Next drag state for an event.

    Only a drag starting on an existing color enters Dragging. Drops and
    drag ends, successful or not, always land in Idle.
    """
    if isinstance(event, DragStart):
        group = palette.find_group(event.group_id)
        if group is not None and group.find_color(event.color_id) is not None:
            return Dragging(event.group_id, event.color_id)
        return IDLE
    return IDLE


# =============================================================================
# Workspace
# =============================================================================

class Workspace:
    """
    Owner of the current palette document.

    Subscribes itself to PALETTE_GENERATED so any generator publishing on the
    same bus replaces the document.
    """

    def __init__(self, bus: Optional[EventBus] = None, palette: Optional[Palette] = None):
        self.bus = bus or EventBus()
        self.palette = palette or Palette()
        self.active_group_id: Optional[str] = None
        self.selected_color_id: Optional[str] = None
        self.drag_state: DragState = IDLE
        self._reset_selection()
        self.bus.subscribe(PALETTE_GENERATED, self.load_generated)

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self.palette.is_empty

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.drag_state, Dragging)

    @property
    def active_group(self) -> Optional[Group]:
        if self.active_group_id is None:
            return None
        return self.palette.find_group(self.active_group_id)

    def total_colors(self) -> int:
        return self.palette.total_colors()

    def snapshot(self) -> dict:
        """Serialized copy of the document for read-only consumers."""
        return self.palette.to_dict()

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def _reset_selection(self):
        self.active_group_id = self.palette.groups[0].id if self.palette.groups else None
        self.selected_color_id = None

    def _reconcile_selection(self):
        """Drop selection references to items that no longer exist."""
        if self.active_group_id is not None and self.palette.find_group(self.active_group_id) is None:
            self.active_group_id = self.palette.groups[0].id if self.palette.groups else None
        if self.selected_color_id is not None:
            _, color = self.palette.find_color(self.selected_color_id)
            if color is None:
                self.selected_color_id = None

    def _changed(self):
        self._reconcile_selection()
        self.bus.publish(PALETTE_UPDATED, self)

    def set_active_group(self, group_id: str) -> bool:
        if self.palette.find_group(group_id) is None:
            return False
        self.active_group_id = group_id
        self._changed()
        return True

    def select_color(self, group_id: str, color_id: str) -> bool:
        """Select a color and make its group the active one."""
        group = self.palette.find_group(group_id)
        if group is None or group.find_color(color_id) is None:
            return False
        self.active_group_id = group_id
        self.selected_color_id = color_id
        self._changed()
        return True

    # -------------------------------------------------------------------------
    # Structural edits
    # -------------------------------------------------------------------------

    def create_group(self, name: str) -> Optional[Group]:
        """Append an empty group and make it active. Blank names are ignored."""
        name = (name or '').strip()
        if not name:
            return None
        group = Group(name)
        self.palette.groups.append(group)
        self.active_group_id = group.id
        logger.debug("Created group %r", name)
        self._changed()
        return group

    def add_color_to_active_group(self, value: str) -> Color:
        """
        Append a color to the active group, defaulting to the first group.

        Raises:
            InvalidColor: If the value is not a valid color.
            NoGroupAvailable: If the palette has no groups.
        """
        color = Color(value)
        if not self.palette.groups:
            raise NoGroupAvailable("Create or select a group first")

        group = self.active_group
        if group is None:
            group = self.palette.groups[0]
            self.active_group_id = group.id

        group.colors.append(color)
        self._changed()
        return color

    def set_color_hex(self, group_id: str, color_id: str, value: str) -> bool:
        """
        Replace a color's hex in place.

        Raises:
            InvalidColor: If the value is not a valid color; the old hex is kept.
        """
        new_hex = normalize_hex(value)
        group = self.palette.find_group(group_id)
        color = group.find_color(color_id) if group is not None else None
        if color is None:
            return False
        color.hex = new_hex
        self._changed()
        return True

    def remove_color(self, group_id: str, color_id: str) -> bool:
        group = self.palette.find_group(group_id)
        if group is None:
            return False
        index = group.index_of(color_id)
        if index == -1:
            return False
        del group.colors[index]
        self._changed()
        return True

    def remove_group(self, group_id: str) -> bool:
        group = self.palette.find_group(group_id)
        if group is None:
            return False
        self.palette.groups.remove(group)
        logger.debug("Removed group %r with %d color(s)", group.name, len(group.colors))
        self._changed()
        return True

    def rename_group(self, group_id: str, name: str) -> bool:
        group = self.palette.find_group(group_id)
        if group is None or not (name or '').strip():
            return False
        group.name = name
        self._changed()
        return True

    def rename_palette(self, name: str):
        self.palette.name = name
        self._changed()

    def move_color(self, source_group_id: str, color_id: str,
                   dest_group_id: str, dest_index: Optional[int] = None) -> bool:
        """
        Move a color to another position, possibly in another group.

        `dest_index` is a position in the destination after the color has
        been detached; missing or out of range means append. Unknown group or
        color ids make this a no-op.
        """
        source = self.palette.find_group(source_group_id)
        dest = self.palette.find_group(dest_group_id)
        if source is None or dest is None:
            return False

        index = source.index_of(color_id)
        if index == -1:
            return False

        color = source.colors.pop(index)
        if dest_index is not None and 0 <= dest_index <= len(dest.colors):
            dest.colors.insert(dest_index, color)
        else:
            dest.colors.append(color)

        logger.debug("Moved color %s from %r to %r", color.hex, source.name, dest.name)
        self._changed()
        return True

    # -------------------------------------------------------------------------
    # Whole-document operations
    # -------------------------------------------------------------------------

    def replace(self, palette: Palette):
        """Substitute the whole document and reset selection and drag state."""
        self.palette = palette
        self.drag_state = IDLE
        self._reset_selection()
        self._changed()

    def load_generated(self, result: GeneratedPalette):
        self.replace(Palette.from_colors(result.name, result.colors, DEFAULT_GROUP_NAME))

    def load_palette(self, palette: Palette):
        """Load a copy of a stored or shared palette."""
        self.replace(palette.copy())

    def clear(self):
        self.replace(Palette())

    def save(self, gateway) -> int:
        """
        Append a snapshot of the document to a persistence gateway.

        Returns:
            Index of the saved entry

        Raises:
            UnsavablePalette: If the palette has no name or no groups.
        """
        if not self.palette.name.strip() or self.palette.is_empty:
            raise UnsavablePalette("Please name your palette and add at least one group")
        index = gateway.append(self.palette)
        self.bus.publish(PALETTE_SAVED, index)
        return index

    # -------------------------------------------------------------------------
    # Drag-reorder
    # -------------------------------------------------------------------------

    def begin_drag(self, group_id: str, color_id: str) -> bool:
        self.drag_state = drag_transition(self.drag_state, DragStart(group_id, color_id), self.palette)
        return self.is_dragging

    def drop(self, dest_group_id: str, dest_index: Optional[int] = None) -> bool:
        """Drop the dragged color. Returns True if the document changed."""
        state = self.drag_state
        try:
            if not isinstance(state, Dragging):
                return False
            return self.move_color(state.source_group_id, state.color_id, dest_group_id, dest_index)
        finally:
            self.drag_state = drag_transition(state, Drop(dest_group_id, dest_index), self.palette)

    def end_drag(self):
        self.drag_state = drag_transition(self.drag_state, DragEnd(), self.palette)

    cancel_drag = end_drag
