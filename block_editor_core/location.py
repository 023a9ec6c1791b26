"""
Block locations.

A location describes where a block sits at one instant: either attached to a
parent (through a named input, or through the parent's next-statement
connector when no input name is given) or detached at an absolute coordinate.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .models import Block, Coordinate


@dataclass(frozen=True)
class AttachedLocation:
    """Attached to a parent block; input_name is None for the statement chain."""
    parent_id: str
    input_name: Optional[str] = None


@dataclass(frozen=True)
class DetachedLocation:
    """Free-floating at an absolute coordinate."""
    coordinate: Coordinate


Location = Union[AttachedLocation, DetachedLocation]


def read_location(block: Block) -> Location:
    """Classify the block's current attachment state."""
    parent = block.get_parent()
    if parent is None:
        return DetachedLocation(block.get_relative_to_surface_xy())
    input_ = parent.get_input_with_block(block)
    return AttachedLocation(parent.id, input_.name if input_ else None)


def location_to_fields(location: Optional[Location]
                       ) -> Tuple[Optional[str], Optional[str], Optional[Coordinate]]:
    """Flatten a location into (parent_id, input_name, coordinate)."""
    if isinstance(location, AttachedLocation):
        return location.parent_id, location.input_name, None
    if isinstance(location, DetachedLocation):
        return None, None, location.coordinate
    return None, None, None


def location_from_fields(parent_id: Optional[str], input_name: Optional[str],
                         coordinate: Optional[Coordinate]) -> Optional[Location]:
    # A coordinate wins over a parent id, matching replay order.
    if coordinate is not None:
        return DetachedLocation(coordinate)
    if parent_id:
        return AttachedLocation(parent_id, input_name or None)
    return None
