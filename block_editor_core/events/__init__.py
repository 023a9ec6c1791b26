"""Workspace events."""

from .base import (
    BlockEvent, MOVE,
    register_event, get_event_class, event_from_json
)
from .block_move import BlockMove, format_coordinate, parse_coordinate

__all__ = [
    "BlockEvent",
    "BlockMove",
    "MOVE",
    "register_event",
    "get_event_class",
    "event_from_json",
    "format_coordinate",
    "parse_coordinate",
]
