"""
Block move event.

Created before a structural mutation to capture the block's old location;
record_new() captures the new location once the mutation has landed. The
event can then be replayed forward (redo) or backward (undo).
"""

from typing import Any, Dict, Optional
import math

from ..exceptions import EventDeserializationError, EventError
from ..location import Location, location_from_fields, location_to_fields, read_location
from ..models import Block, Coordinate
from ..replayer import replay_move
from .base import MOVE, BlockEvent, register_event


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_coordinate(coordinate: Coordinate) -> str:
    """Format a coordinate as "x,y" with both components rounded to integers."""
    if not (math.isfinite(coordinate.x) and math.isfinite(coordinate.y)):
        raise EventError(f"Cannot encode non-finite coordinate ({coordinate.x}, {coordinate.y})",
                         event_type=MOVE)
    return f"{_round_half_up(coordinate.x)},{_round_half_up(coordinate.y)}"


def parse_coordinate(value: str) -> Coordinate:
    """Parse an "x,y" pair of base-10 numbers."""
    parts = value.split(',')
    if len(parts) != 2:
        raise EventDeserializationError(
            f"Expected 'x,y' coordinate pair, got {value!r}",
            event_type=MOVE, field_name='newCoordinate'
        )
    try:
        x, y = float(parts[0]), float(parts[1])
    except ValueError:
        raise EventDeserializationError(
            f"Coordinate components must be numbers, got {value!r}",
            event_type=MOVE, field_name='newCoordinate'
        ) from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise EventDeserializationError(
            f"Coordinate components must be finite, got {value!r}",
            event_type=MOVE, field_name='newCoordinate'
        )
    return Coordinate(x, y)


class BlockMove(BlockEvent):
    """Records a block moving between two locations."""

    type = MOVE

    def __init__(self, block: Optional[Block] = None):
        super().__init__(block)
        self.old_location: Optional[Location] = None
        self.new_location: Optional[Location] = None
        if block is None:
            return  # Blank event to be populated by from_json.
        if block.is_shadow:
            # Shadow moves are implied by their parent's events.
            self.record_undo = False
        self.old_location = read_location(block)

    def record_new(self, block: Optional[Block] = None):
        """Record the block's new location. Called once, after the move."""
        if block is None:
            block = self.get_event_workspace().get_block_by_id(self.block_id)
            if block is None:
                raise EventError(f"Can't record location of non-existent block: {self.block_id}",
                                 event_type=self.type)
        self.new_location = read_location(block)

    def is_null(self) -> bool:
        return self.old_location == self.new_location

    def run(self, forward: bool) -> bool:
        return replay_move(self, forward)

    @property
    def old_parent_id(self) -> Optional[str]:
        return location_to_fields(self.old_location)[0]

    @property
    def old_input_name(self) -> Optional[str]:
        return location_to_fields(self.old_location)[1]

    @property
    def old_coordinate(self) -> Optional[Coordinate]:
        return location_to_fields(self.old_location)[2]

    @property
    def new_parent_id(self) -> Optional[str]:
        return location_to_fields(self.new_location)[0]

    @property
    def new_input_name(self) -> Optional[str]:
        return location_to_fields(self.new_location)[1]

    @property
    def new_coordinate(self) -> Optional[Coordinate]:
        return location_to_fields(self.new_location)[2]

    def to_json(self) -> Dict[str, Any]:
        json = super().to_json()
        parent_id, input_name, coordinate = location_to_fields(self.new_location)
        if parent_id:
            json['newParentId'] = parent_id
        if input_name:
            json['newInputName'] = input_name
        if coordinate is not None:
            json['newCoordinate'] = format_coordinate(coordinate)
        if not self.record_undo:
            json['recordUndo'] = self.record_undo
        return json

    def from_json(self, json: Dict[str, Any]):
        super().from_json(json)
        coordinate = None
        if json.get('newCoordinate'):
            coordinate = parse_coordinate(json['newCoordinate'])
        self.new_location = location_from_fields(
            json.get('newParentId'), json.get('newInputName'), coordinate
        )
        record_undo = json.get('recordUndo')
        if record_undo is not None:
            if not isinstance(record_undo, bool):
                raise EventDeserializationError(
                    f"recordUndo must be a boolean, got {record_undo!r}",
                    event_type=MOVE, field_name='recordUndo'
                )
            self.record_undo = record_undo


register_event(MOVE, BlockMove)
