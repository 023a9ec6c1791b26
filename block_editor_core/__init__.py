"""
Block Editor Core - block workspace with undoable move events.

This package records where a block sits before and after a structural mutation
and can replay that move forward (redo) or backward (undo) against the live
workspace.
"""

__version__ = "0.1.0"
__author__ = "Block Editor Development Team"

from .models import (
    Block, BlockWorkspace, Connection, ConnectionType, Coordinate, Input, InputType
)
from .location import AttachedLocation, DetachedLocation, Location, read_location
from .events import BlockEvent, BlockMove, MOVE, event_from_json, register_event
from .replayer import replay_move
from .history import UndoHistory
from .config import EditorConfig, load_config
from .exceptions import (
    BlockEditorError, ConnectionError, EventError,
    EventDeserializationError, UnknownEventTypeError
)

__all__ = [
    "Block",
    "BlockWorkspace",
    "Connection",
    "ConnectionType",
    "Coordinate",
    "Input",
    "InputType",
    "AttachedLocation",
    "DetachedLocation",
    "Location",
    "read_location",
    "BlockEvent",
    "BlockMove",
    "MOVE",
    "event_from_json",
    "register_event",
    "replay_move",
    "UndoHistory",
    "EditorConfig",
    "load_config",
    "BlockEditorError",
    "ConnectionError",
    "EventError",
    "EventDeserializationError",
    "UnknownEventTypeError",
]
