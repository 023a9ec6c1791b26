"""
Base class and registry for workspace events.

Every event kind shares the same identity fields (type tag, block id, group id)
and the same JSON framing. Concrete kinds register themselves by type tag so a
stored JSON event can be turned back into a runnable event object.
"""

from typing import Any, Dict, Optional, Type
import logging

from ..exceptions import EventError, UnknownEventTypeError
from ..models import Block, BlockWorkspace


logger = logging.getLogger(__name__)


# Event type tags
MOVE = "move"


class BlockEvent:
    """Base class for events that concern a single block."""

    type: str = ""

    def __init__(self, block: Optional[Block] = None):
        self.is_blank = block is None
        self.block_id: Optional[str] = block.id if block is not None else None
        self.workspace_id: Optional[str] = block.workspace.id if block is not None else None
        self.group = ""
        self.record_undo = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(block_id={self.block_id!r})"

    def get_event_workspace(self) -> BlockWorkspace:
        """Resolve the workspace this event belongs to."""
        workspace = None
        if self.workspace_id:
            workspace = BlockWorkspace.get_by_id(self.workspace_id)
        if workspace is None:
            raise EventError(
                "Workspace is missing. Event must be created from a live workspace "
                "or decoded with event_from_json().",
                event_type=self.type,
                details={'workspace_id': self.workspace_id}
            )
        return workspace

    def to_json(self) -> Dict[str, Any]:
        """Encode the shared event fields."""
        json = {'type': self.type}
        if self.group:
            json['group'] = self.group
        if self.block_id:
            json['blockId'] = self.block_id
        return json

    def from_json(self, json: Dict[str, Any]):
        """Decode the shared event fields."""
        self.is_blank = False
        self.block_id = json.get('blockId')
        self.group = json.get('group', '')

    def is_null(self) -> bool:
        """Does this event record no change of state?"""
        return False

    def run(self, forward: bool) -> bool:
        """Replay the event; forward for redo, backward for undo."""
        raise NotImplementedError(f"Event type {self.type!r} cannot be replayed")


_EVENT_REGISTRY: Dict[str, Type[BlockEvent]] = {}


def register_event(event_type: str, event_class: Type[BlockEvent]):
    """Register an event class under its type tag."""
    if event_type in _EVENT_REGISTRY and _EVENT_REGISTRY[event_type] is not event_class:
        logger.warning("Replacing event class for type %r: %s -> %s", event_type,
                       _EVENT_REGISTRY[event_type].__name__, event_class.__name__)
    _EVENT_REGISTRY[event_type] = event_class


def get_event_class(event_type: str) -> Type[BlockEvent]:
    try:
        return _EVENT_REGISTRY[event_type]
    except KeyError:
        raise UnknownEventTypeError(f"Unknown event type: {event_type!r}",
                                    event_type=event_type) from None


def event_from_json(json: Dict[str, Any], workspace: BlockWorkspace) -> BlockEvent:
    """Decode a JSON event into a blank event of its registered class."""
    event = get_event_class(json.get('type'))()
    event.from_json(json)
    event.workspace_id = workspace.id
    return event
