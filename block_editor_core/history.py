"""
Undo/redo history for workspace events.

Events that change nothing, and events flagged as not undoable (such as moves of
shadow blocks), never reach the stacks. Recording a new event clears the redo
stack; the oldest undo entries are dropped once max_undo is exceeded.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional
import logging

from .config import load_config
from .events.base import BlockEvent
from .events.block_move import BlockMove
from .models import Block


class UndoHistory:
    """Undo and redo stacks of replayable events."""

    def __init__(self, max_undo: Optional[int] = None):
        self.max_undo = max_undo if max_undo is not None else load_config().max_undo
        self._undo_stack: List[BlockEvent] = []
        self._redo_stack: List[BlockEvent] = []
        self.logger = logging.getLogger(__name__)

    @property
    def undo_stack(self) -> List[BlockEvent]:
        return list(self._undo_stack)

    @property
    def redo_stack(self) -> List[BlockEvent]:
        return list(self._redo_stack)

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()

    def fire(self, event: BlockEvent) -> bool:
        """Offer an event to the history. Returns True if it was recorded."""
        if event.is_null():
            self.logger.debug("Discarding null %s event for block %s", event.type, event.block_id)
            return False
        if not event.record_undo:
            self.logger.debug("Skipping non-undoable %s event for block %s", event.type, event.block_id)
            return False

        self._undo_stack.append(event)
        self._redo_stack.clear()

        overflow = len(self._undo_stack) - self.max_undo
        if overflow > 0:
            del self._undo_stack[:overflow]
            self.logger.debug("Dropped %d oldest undo entries (max_undo=%d)", overflow, self.max_undo)
        return True

    def undo(self) -> Optional[BlockEvent]:
        """Undo the most recent event. Returns the event, or None if empty."""
        return self._step(self._undo_stack, self._redo_stack, forward=False)

    def redo(self) -> Optional[BlockEvent]:
        """Redo the most recently undone event. Returns the event, or None if empty."""
        return self._step(self._redo_stack, self._undo_stack, forward=True)

    def _step(self, source: List[BlockEvent], destination: List[BlockEvent],
              forward: bool) -> Optional[BlockEvent]:
        if not source:
            return None
        event = source.pop()
        if not event.run(forward):
            self.logger.warning("%s of %s event for block %s did not complete",
                                "Redo" if forward else "Undo", event.type, event.block_id)
        destination.append(event)
        return event

    @contextmanager
    def record_move(self, block: Block):
        """
        Record a structural mutation of a block as a move event.

        The old location is captured on entry and the new one on a clean exit,
        after which the event is fired. If the body raises, the event is
        discarded and the exception propagates.
        """
        event = BlockMove(block)
        yield event
        event.record_new(block)
        self.fire(event)

    def to_json(self) -> List[Dict[str, Any]]:
        """Encode the undo stack, oldest first."""
        return [event.to_json() for event in self._undo_stack]
