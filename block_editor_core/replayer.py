"""
Replay of recorded block moves.

Replaying drives the workspace back to a recorded location using only live
workspace state. Blocks and parents referenced by id may have been deleted, and
inputs may have been renamed or removed since the event was recorded; all of
these abort the step with a warning instead of raising.
"""

from typing import Optional
import logging

from .exceptions import ConnectionError
from .location import AttachedLocation, DetachedLocation
from .models import Block, Connection, ConnectionType


logger = logging.getLogger(__name__)


def resolve_parent_connection(parent: Block, input_name: Optional[str],
                              block_connection: Connection) -> Optional[Connection]:
    """Find the parent-side connector a block should attach to."""
    if input_name:
        input_ = parent.get_input(input_name)
        return input_.connection if input_ is not None else None
    if block_connection.type == ConnectionType.PREVIOUS_STATEMENT:
        return parent.next_connection
    return None


def replay_move(event, forward: bool) -> bool:
    """Move the event's block to its new (forward) or old (backward) location.

    Returns True if the block reached the target location.
    """
    workspace = event.get_event_workspace()
    block = workspace.get_block_by_id(event.block_id)
    if block is None:
        logger.warning("Can't move non-existent block: %s", event.block_id)
        return False

    target = event.new_location if forward else event.old_location
    if target is None:
        logger.warning("No %s location recorded for block: %s",
                       "new" if forward else "old", block.id)
        return False

    parent_block = None
    if isinstance(target, AttachedLocation):
        parent_block = workspace.get_block_by_id(target.parent_id)
        if parent_block is None:
            logger.warning("Can't connect to non-existent block: %s", target.parent_id)
            return False

    if block.get_parent() is not None:
        block.unplug()

    if isinstance(target, DetachedLocation):
        block.move_to(target.coordinate)
        logger.debug("Moved block %s to (%s, %s)", block.id,
                     target.coordinate.x, target.coordinate.y)
        return True

    block_connection = block.outward_connection()
    if block_connection is None:
        logger.warning("Block %s has no output or previous connection", block.id)
        return False

    parent_connection = resolve_parent_connection(parent_block, target.input_name,
                                                  block_connection)
    if parent_connection is None:
        logger.warning("Can't connect to non-existent input: %s", target.input_name)
        return False

    try:
        block_connection.connect(parent_connection)
    except ConnectionError as e:
        logger.warning("Can't reattach block %s to block %s: %s",
                       block.id, parent_block.id, e)
        return False

    logger.debug("Attached block %s to block %s (input=%s)",
                 block.id, parent_block.id, target.input_name)
    return True
