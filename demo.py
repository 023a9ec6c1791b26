#!/usr/bin/env python3
"""
Demo script for the Block Editor Core.

Builds a small workspace, records a few moves, and walks the undo/redo history.
"""

import json
import logging

from block_editor_core import BlockWorkspace, Coordinate, UndoHistory, load_config
from block_editor_core.events import event_from_json


def describe(workspace, block_id):
    block = workspace.get_block_by_id(block_id)
    parent = block.get_parent()
    if parent is None:
        return f"{block_id} detached at ({block.xy.x}, {block.xy.y})"
    input_ = parent.get_input_with_block(block)
    slot = input_.name if input_ else "next"
    return f"{block_id} attached to {parent.id}.{slot}"


def main():
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    print("=== Block Editor Core Demo ===")

    workspace = BlockWorkspace()
    history = UndoHistory(max_undo=config.max_undo)

    print_block = workspace.new_block('text_print', block_id='print', xy=Coordinate(100, 100))
    print_block.set_previous_statement(True).set_next_statement(True)
    print_block.append_value_input('TEXT')

    text_block = workspace.new_block('text', block_id='text', xy=Coordinate(10, 20))
    text_block.set_output(True)

    second = workspace.new_block('text_print', block_id='print2', xy=Coordinate(300, 40))
    second.set_previous_statement(True).set_next_statement(True)

    print("\n1. Plug 'text' into print.TEXT")
    with history.record_move(text_block):
        text_block.output_connection.connect(print_block.get_input('TEXT').connection)
    print(f"   {describe(workspace, 'text')}")

    print("\n2. Stack 'print2' under 'print'")
    with history.record_move(second):
        second.previous_connection.connect(print_block.next_connection)
    print(f"   {describe(workspace, 'print2')}")

    print("\n3. Drag 'print' to (240, 160)")
    with history.record_move(print_block):
        print_block.move_to(Coordinate(240, 160))
    print(f"   {describe(workspace, 'print')}")

    print("\n4. A drag that ends where it started records nothing")
    with history.record_move(print_block) as event:
        print_block.move_by(15, 0)
        print_block.move_by(-15, 0)
    print(f"   null event: {event.is_null()}, undo depth: {len(history.undo_stack)}")

    print("\n=== Undo history ===")
    print(json.dumps(history.to_json(), indent=2))

    print("\n=== Undo everything ===")
    while history.can_undo():
        event = history.undo()
        print(f"   undid {event.type} of {event.block_id}: {describe(workspace, event.block_id)}")

    print("\n=== Redo everything ===")
    while history.can_redo():
        event = history.redo()
        print(f"   redid {event.type} of {event.block_id}: {describe(workspace, event.block_id)}")

    print("\n=== Replay a decoded event ===")
    decoded = event_from_json({'type': 'move', 'blockId': 'text', 'newCoordinate': '50,60'}, workspace)
    decoded.run(forward=True)
    print(f"   {describe(workspace, 'text')}")


if __name__ == "__main__":
    main()
