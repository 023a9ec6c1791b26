"""
History API - Flask Blueprint exposing block moves and undo/redo over HTTP.

Every move made through this API is wrapped in UndoHistory.record_move, so the
HTTP surface and in-process callers share the same create → mutate →
record_new ordering.
"""

import logging
import math

from flask import Blueprint, request, jsonify

from block_editor_core.exceptions import ConnectionError
from block_editor_core.location import location_to_fields, read_location
from block_editor_core.models import Coordinate
from block_editor_core.replayer import resolve_parent_connection

# ---------------------------------------------------------------------------
# Blueprint & Globals
# ---------------------------------------------------------------------------
history_bp = Blueprint('history', __name__)
logger = logging.getLogger('block_editor.web.history')

_workspace = None
_history = None


def init_history_api(app, workspace, history):
    """Bind the blueprint to a workspace and its history, then register it."""
    global _workspace, _history
    _workspace = workspace
    _history = history
    app.register_blueprint(history_bp)


def _block_to_dict(block):
    parent_id, input_name, coordinate = location_to_fields(read_location(block))
    return {
        'id': block.id,
        'type': block.type,
        'is_shadow': block.is_shadow,
        'position': [block.xy.x, block.xy.y],
        'parent_id': parent_id,
        'input_name': input_name,
        'coordinate': [coordinate.x, coordinate.y] if coordinate is not None else None,
    }


def _history_state():
    return {
        'can_undo': _history.can_undo(),
        'can_redo': _history.can_redo(),
        'undo_depth': len(_history.undo_stack),
        'redo_depth': len(_history.redo_stack),
    }


@history_bp.route('/api/workspace/blocks', methods=['GET'])
def list_blocks():
    """Get all blocks with their current locations."""
    return jsonify({
        'success': True,
        'data': [_block_to_dict(block) for block in _workspace.blocks.values()]
    })


@history_bp.route('/api/workspace/blocks/<block_id>/move', methods=['POST'])
def move_block(block_id):
    """Move a block into a parent's input, onto its statement chain, or to (x, y)."""
    data = request.get_json(silent=True) or {}
    block = _workspace.get_block_by_id(block_id)
    if block is None:
        return jsonify({'success': False, 'error': f'Block not found: {block_id}'}), 404

    parent_connection = None
    coordinate = None
    if data.get('parent_id'):
        parent = _workspace.get_block_by_id(data['parent_id'])
        if parent is None:
            return jsonify({'success': False, 'error': f"Block not found: {data['parent_id']}"}), 404
        block_connection = block.outward_connection()
        if block_connection is not None:
            parent_connection = resolve_parent_connection(parent, data.get('input_name'), block_connection)
        if parent_connection is None or not block_connection.can_connect_with(parent_connection):
            return jsonify({
                'success': False,
                'error': f"Block {block_id} cannot attach to input {data.get('input_name')!r} of {parent.id}"
            }), 400
    else:
        try:
            coordinate = Coordinate(float(data['x']), float(data['y']))
        except (KeyError, TypeError, ValueError):
            return jsonify({'success': False, 'error': "Expected 'parent_id' or numeric 'x' and 'y'"}), 400
        if not (math.isfinite(coordinate.x) and math.isfinite(coordinate.y)):
            return jsonify({'success': False, 'error': "Coordinates 'x' and 'y' must be finite"}), 400

    try:
        with _history.record_move(block) as event:
            block.unplug()
            if parent_connection is not None:
                block.outward_connection().connect(parent_connection)
            else:
                block.move_to(coordinate)
    except ConnectionError as e:
        logger.warning("Move of block %s rejected: %s", block_id, e)
        return jsonify({'success': False, 'error': str(e)}), 400

    recorded = bool(_history.undo_stack) and _history.undo_stack[-1] is event
    return jsonify({
        'success': True,
        'data': {
            'block': _block_to_dict(block),
            'event': event.to_json(),
            'recorded': recorded,
            'history': _history_state(),
        }
    })


@history_bp.route('/api/history/undo', methods=['POST'])
def undo():
    event = _history.undo()
    return jsonify({
        'success': True,
        'data': {
            'event': event.to_json() if event is not None else None,
            'history': _history_state(),
        }
    })


@history_bp.route('/api/history/redo', methods=['POST'])
def redo():
    event = _history.redo()
    return jsonify({
        'success': True,
        'data': {
            'event': event.to_json() if event is not None else None,
            'history': _history_state(),
        }
    })


@history_bp.route('/api/history', methods=['GET'])
def get_history():
    """Get the encoded undo and redo stacks."""
    return jsonify({
        'success': True,
        'data': {
            'undo': _history.to_json(),
            'redo': [event.to_json() for event in _history.redo_stack],
            **_history_state(),
        }
    })
