"""
Core data models for the Block Editor.

This module defines the block workspace that move events record and replay against:
blocks, their typed connectors and named inputs, and the workspace that owns them.
A block's parent is whichever block holds the connector its outward connector is
joined to, so attachment state always lives on the connectors themselves.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
from enum import Enum, IntEnum
import logging
import uuid
import weakref

from .exceptions import ConnectionError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    """An absolute position on the workspace surface."""
    x: float = 0.0
    y: float = 0.0

    def translate(self, dx: float, dy: float) -> 'Coordinate':
        """Return a new coordinate offset by the given delta."""
        return Coordinate(self.x + dx, self.y + dy)

    def __sub__(self, other: 'Coordinate') -> 'Coordinate':
        return Coordinate(self.x - other.x, self.y - other.y)


class ConnectionType(IntEnum):
    """Enumeration of connector types."""
    INPUT_VALUE = 1
    OUTPUT_VALUE = 2
    NEXT_STATEMENT = 3
    PREVIOUS_STATEMENT = 4


OPPOSITE_TYPE: Dict[ConnectionType, ConnectionType] = {
    ConnectionType.INPUT_VALUE: ConnectionType.OUTPUT_VALUE,
    ConnectionType.OUTPUT_VALUE: ConnectionType.INPUT_VALUE,
    ConnectionType.NEXT_STATEMENT: ConnectionType.PREVIOUS_STATEMENT,
    ConnectionType.PREVIOUS_STATEMENT: ConnectionType.NEXT_STATEMENT,
}


class InputType(Enum):
    """Kinds of named inputs a block can expose."""
    VALUE = "value"
    STATEMENT = "statement"


class Connection:
    """A typed attachment point owned by one block."""

    def __init__(self, source_block: 'Block', type: ConnectionType):
        self.source_block = source_block
        self.type = type
        self.target_connection: Optional['Connection'] = None

    def __repr__(self) -> str:
        return f"Connection({self.source_block.id!r}, {self.type.name})"

    def is_superior(self) -> bool:
        """Parent-side connectors hold children; inferior ones attach upward."""
        return self.type in (ConnectionType.INPUT_VALUE, ConnectionType.NEXT_STATEMENT)

    def is_connected(self) -> bool:
        return self.target_connection is not None

    def target_block(self) -> Optional['Block']:
        """Get the block on the other side of this connector, if any."""
        if self.target_connection is None:
            return None
        return self.target_connection.source_block

    def can_connect_with(self, other: Optional['Connection']) -> bool:
        """Check type compatibility and that the join would not create a cycle."""
        if other is None or other.source_block is self.source_block:
            return False
        if OPPOSITE_TYPE[self.type] != other.type:
            return False
        parent_conn, child_conn = (self, other) if self.is_superior() else (other, self)
        ancestor = parent_conn.source_block
        while ancestor is not None:
            if ancestor is child_conn.source_block:
                return False
            ancestor = ancestor.get_parent()
        return True

    def connect(self, other: 'Connection'):
        """Join this connector to another compatible connector.

        The child side is unplugged from wherever it was. If the parent side
        is already occupied, its current occupant is disconnected and left as
        a top-level block at its last position.
        """
        if other is None:
            raise ConnectionError("Cannot connect to a missing connection",
                                  source_block_id=self.source_block.id)
        if self.target_connection is other:
            return
        if not self.can_connect_with(other):
            raise ConnectionError(
                f"Cannot connect {self.type.name} of block {self.source_block.id} "
                f"to {other.type.name} of block {other.source_block.id}",
                source_block_id=self.source_block.id,
                target_block_id=other.source_block.id
            )

        parent_conn, child_conn = (self, other) if self.is_superior() else (other, self)

        if child_conn.is_connected():
            child_conn.disconnect()
        if parent_conn.is_connected():
            orphan = parent_conn.target_block()
            parent_conn.disconnect()
            logger.debug("Displaced block %s from block %s", orphan.id, parent_conn.source_block.id)

        parent_conn.target_connection = child_conn
        child_conn.target_connection = parent_conn

    def disconnect(self):
        """Break the join on both sides."""
        other = self.target_connection
        if other is None:
            return
        other.target_connection = None
        self.target_connection = None


@dataclass
class Input:
    """A named slot on a block that may hold a child block."""
    name: str
    type: InputType
    connection: Connection


class Block:
    """Represents a block in the workspace."""

    def __init__(self, workspace: 'BlockWorkspace', block_type: str,
                 block_id: Optional[str] = None, is_shadow: bool = False,
                 xy: Optional[Coordinate] = None):
        self.id = block_id or str(uuid.uuid4())
        self.type = block_type
        self.workspace = workspace
        self.is_shadow = is_shadow
        self.xy = xy or Coordinate()
        self.inputs: List[Input] = []
        self.output_connection: Optional[Connection] = None
        self.previous_connection: Optional[Connection] = None
        self.next_connection: Optional[Connection] = None
        self.disposed = False

    def __repr__(self) -> str:
        return f"Block({self.id!r}, type={self.type!r})"

    # ----- connectors -----

    def set_output(self, has_output: bool) -> 'Block':
        if has_output:
            if self.previous_connection is not None:
                raise ValueError("Remove previous connection prior to adding output connection.")
            if self.output_connection is None:
                self.output_connection = Connection(self, ConnectionType.OUTPUT_VALUE)
        elif self.output_connection is not None:
            if self.output_connection.is_connected():
                raise ValueError("Must disconnect output before removing connection.")
            self.output_connection = None
        return self

    def set_previous_statement(self, has_previous: bool) -> 'Block':
        if has_previous:
            if self.output_connection is not None:
                raise ValueError("Remove output connection prior to adding previous connection.")
            if self.previous_connection is None:
                self.previous_connection = Connection(self, ConnectionType.PREVIOUS_STATEMENT)
        elif self.previous_connection is not None:
            if self.previous_connection.is_connected():
                raise ValueError("Must disconnect previous statement before removing connection.")
            self.previous_connection = None
        return self

    def set_next_statement(self, has_next: bool) -> 'Block':
        if has_next:
            if self.next_connection is None:
                self.next_connection = Connection(self, ConnectionType.NEXT_STATEMENT)
        elif self.next_connection is not None:
            if self.next_connection.is_connected():
                raise ValueError("Must disconnect next statement before removing connection.")
            self.next_connection = None
        return self

    def outward_connection(self) -> Optional[Connection]:
        """The connector this block attaches to a parent through."""
        return self.output_connection or self.previous_connection

    # ----- inputs -----

    def append_value_input(self, name: str) -> Input:
        return self._append_input(name, InputType.VALUE, ConnectionType.INPUT_VALUE)

    def append_statement_input(self, name: str) -> Input:
        return self._append_input(name, InputType.STATEMENT, ConnectionType.NEXT_STATEMENT)

    def remove_input(self, name: str) -> bool:
        """Remove a named input, unplugging whatever block it holds."""
        for i, input_ in enumerate(self.inputs):
            if input_.name == name:
                input_.connection.disconnect()
                del self.inputs[i]
                return True
        return False

    def get_input(self, name: str) -> Optional[Input]:
        """Get an input by name."""
        for input_ in self.inputs:
            if input_.name == name:
                return input_
        return None

    def get_input_with_block(self, block: 'Block') -> Optional[Input]:
        """Get the input that holds the given child block."""
        for input_ in self.inputs:
            if input_.connection.target_block() is block:
                return input_
        return None

    def _append_input(self, name: str, input_type: InputType,
                      connection_type: ConnectionType) -> Input:
        if self.get_input(name) is not None:
            raise ValueError(f"Block {self.id} already has an input named {name!r}")
        input_ = Input(name=name, type=input_type,
                       connection=Connection(self, connection_type))
        self.inputs.append(input_)
        return input_

    # ----- tree -----

    def get_parent(self) -> Optional['Block']:
        conn = self.outward_connection()
        if conn is None:
            return None
        return conn.target_block()

    def get_children(self) -> List['Block']:
        """Blocks directly attached to this block's inputs and next connector."""
        children = [input_.connection.target_block() for input_ in self.inputs]
        if self.next_connection is not None:
            children.append(self.next_connection.target_block())
        return [child for child in children if child is not None]

    def get_descendants(self) -> List['Block']:
        descendants = [self]
        for child in self.get_children():
            descendants.extend(child.get_descendants())
        return descendants

    def unplug(self):
        """Detach this block (and its children) from its parent."""
        conn = self.outward_connection()
        if conn is not None and conn.is_connected():
            conn.disconnect()

    # ----- geometry -----

    def get_relative_to_surface_xy(self) -> Coordinate:
        return self.xy

    def move_by(self, dx: float, dy: float):
        """Translate this block and everything attached below it."""
        for block in self.get_descendants():
            block.xy = block.xy.translate(dx, dy)

    def move_to(self, coordinate: Coordinate):
        """Translate by the delta to an absolute coordinate, landing on it exactly."""
        delta = coordinate - self.xy
        self.move_by(delta.x, delta.y)
        # x + (t - x) can miss t by one ulp.
        self.xy = coordinate

    def dispose(self):
        """Remove this block and its children from the workspace."""
        if self.disposed:
            return
        self.unplug()
        for child in self.get_children():
            child.dispose()
        self.disposed = True
        self.workspace.remove_block(self.id)


class BlockWorkspace:
    """Owns the blocks of one editing surface."""

    # Events reference workspaces by id only.
    _workspaces: 'weakref.WeakValueDictionary[str, BlockWorkspace]' = weakref.WeakValueDictionary()

    def __init__(self, workspace_id: Optional[str] = None):
        self.id = workspace_id or str(uuid.uuid4())
        self.blocks: Dict[str, Block] = {}
        BlockWorkspace._workspaces[self.id] = self

    @classmethod
    def get_by_id(cls, workspace_id: str) -> Optional['BlockWorkspace']:
        return cls._workspaces.get(workspace_id)

    def new_block(self, block_type: str, block_id: Optional[str] = None,
                  is_shadow: bool = False, xy: Optional[Coordinate] = None) -> Block:
        """Create a top-level block in this workspace."""
        if block_id is not None and block_id in self.blocks:
            raise ValueError(f"Block id {block_id!r} already exists in workspace {self.id}")
        block = Block(self, block_type, block_id=block_id, is_shadow=is_shadow, xy=xy)
        self.blocks[block.id] = block
        return block

    def get_block_by_id(self, block_id: Optional[str]) -> Optional[Block]:
        if block_id is None:
            return None
        return self.blocks.get(block_id)

    def remove_block(self, block_id: str) -> bool:
        """Remove a block from the lookup table."""
        if block_id not in self.blocks:
            return False
        del self.blocks[block_id]
        return True
