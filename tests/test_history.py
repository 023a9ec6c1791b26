"""
Unit tests for the undo/redo history and editor configuration.
"""

import pytest
from block_editor_core.config import (
    DEFAULT_MAX_UNDO, EditorConfig, load_config, resolve_setting
)
from block_editor_core.events import BlockMove
from block_editor_core.exceptions import BlockEditorError
from block_editor_core.history import UndoHistory
from block_editor_core.location import AttachedLocation, DetachedLocation, read_location
from block_editor_core.models import BlockWorkspace, Coordinate


@pytest.fixture
def workspace():
    workspace = BlockWorkspace()
    b = workspace.new_block('text_print', block_id='B', xy=Coordinate(200, 200))
    b.set_previous_statement(True).set_next_statement(True)
    b.append_value_input('VALUE')
    a = workspace.new_block('text', block_id='A', xy=Coordinate(10, 20))
    a.set_output(True)
    return workspace


@pytest.fixture
def history():
    return UndoHistory(max_undo=10)


class TestUndoHistory:
    """Test cases for UndoHistory."""

    def test_empty_history(self, history):
        """Test undo and redo on an empty history."""
        assert history.can_undo() is False
        assert history.can_redo() is False
        assert history.undo() is None
        assert history.redo() is None

    def test_record_move_fires_event(self, workspace, history):
        """Test that record_move pushes the completed event."""
        a = workspace.get_block_by_id('A')
        b = workspace.get_block_by_id('B')

        with history.record_move(a) as event:
            a.output_connection.connect(b.get_input('VALUE').connection)

        assert history.undo_stack == [event]
        assert event.new_location == AttachedLocation('B', 'VALUE')

    def test_null_move_is_discarded(self, workspace, history):
        """Test that a drag back to the start is not recorded."""
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_by(10, 0)
            a.move_by(-10, 0)
        assert history.can_undo() is False

    def test_shadow_move_is_not_recorded(self, workspace, history):
        """Test that shadow block moves skip the stack."""
        shadow = workspace.new_block('math_number', is_shadow=True)
        with history.record_move(shadow) as event:
            shadow.move_by(1, 1)

        assert event.record_undo is False
        assert history.can_undo() is False

    def test_failed_mutation_discards_event(self, workspace, history):
        """Test that an exception inside record_move propagates and records nothing."""
        a = workspace.get_block_by_id('A')
        with pytest.raises(RuntimeError):
            with history.record_move(a):
                a.move_by(5, 5)
                raise RuntimeError("drag cancelled")
        assert history.can_undo() is False

    def test_undo_redo_round_trip(self, workspace, history):
        """Test undoing and redoing two moves in order."""
        a = workspace.get_block_by_id('A')
        b = workspace.get_block_by_id('B')
        with history.record_move(a):
            a.output_connection.connect(b.get_input('VALUE').connection)
        with history.record_move(b):
            b.move_to(Coordinate(0, 0))

        history.undo()
        assert b.xy == Coordinate(200, 200)
        history.undo()
        assert read_location(a) == DetachedLocation(Coordinate(10, 20))
        assert history.can_undo() is False
        assert len(history.redo_stack) == 2

        history.redo()
        assert read_location(a) == AttachedLocation('B', 'VALUE')
        history.redo()
        assert b.xy == Coordinate(0, 0)
        assert history.can_redo() is False

    def test_undo_fractional_drag_restores_exact_location(self, workspace, history):
        """Test that undo returns a fractional drag to its exact starting point."""
        a = workspace.get_block_by_id('A')
        a.move_to(Coordinate(0.1, 0))
        with history.record_move(a) as event:
            a.move_to(Coordinate(0.7, 0))

        history.undo()
        assert read_location(a) == event.old_location
        history.redo()
        assert read_location(a) == event.new_location

    def test_new_event_clears_redo(self, workspace, history):
        """Test that a new move clears the redo stack."""
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_by(1, 0)
        history.undo()
        assert history.can_redo() is True

        with history.record_move(a):
            a.move_by(0, 1)
        assert history.can_redo() is False

    def test_undo_of_deleted_block_still_moves_stack(self, workspace, history):
        """Test that a failed replay still moves the event between stacks."""
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_by(1, 0)
        a.dispose()

        event = history.undo()
        assert event is not None
        assert history.can_undo() is False
        assert history.can_redo() is True

    def test_max_undo_drops_oldest(self, workspace):
        """Test that the oldest events are dropped past max_undo."""
        history = UndoHistory(max_undo=3)
        a = workspace.get_block_by_id('A')
        events = []
        for i in range(5):
            with history.record_move(a) as event:
                a.move_by(1, 0)
            events.append(event)

        assert history.undo_stack == events[2:]

    def test_zero_max_undo_keeps_nothing(self, workspace):
        """Test that max_undo of zero disables undo."""
        history = UndoHistory(max_undo=0)
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_by(1, 0)
        assert history.can_undo() is False

    def test_fire_ignores_unfinished_null_event(self, workspace, history):
        """Test firing a blank event."""
        event = BlockMove()
        assert history.fire(event) is False

    def test_clear(self, workspace, history):
        """Test clearing both stacks."""
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_by(1, 0)
        history.undo()
        history.clear()
        assert history.undo_stack == [] and history.redo_stack == []

    def test_to_json(self, workspace, history):
        """Test encoding the undo stack."""
        a = workspace.get_block_by_id('A')
        with history.record_move(a):
            a.move_to(Coordinate(30.6, 40))

        assert history.to_json() == [
            {'type': 'move', 'blockId': 'A', 'newCoordinate': '31,40'}
        ]

    def test_default_max_undo_from_config(self, monkeypatch):
        """Test that max_undo defaults to the configured value."""
        monkeypatch.setenv('BLOCK_EDITOR_MAX_UNDO', '7')
        assert UndoHistory().max_undo == 7


class TestConfig:
    """Test cases for editor configuration."""

    def test_defaults(self, monkeypatch):
        """Test configuration with no environment overrides."""
        monkeypatch.delenv('BLOCK_EDITOR_MAX_UNDO', raising=False)
        monkeypatch.delenv('BLOCK_EDITOR_LOG_LEVEL', raising=False)
        assert load_config() == EditorConfig(max_undo=DEFAULT_MAX_UNDO, log_level='INFO')

    def test_env_overrides(self, monkeypatch):
        """Test environment variables overriding defaults."""
        monkeypatch.setenv('BLOCK_EDITOR_MAX_UNDO', '50')
        monkeypatch.setenv('BLOCK_EDITOR_LOG_LEVEL', 'debug')
        config = load_config()
        assert config.max_undo == 50
        assert config.log_level == 'DEBUG'

    def test_blank_env_uses_default(self, monkeypatch):
        """Test that a blank variable falls back to the default."""
        monkeypatch.setenv('BLOCK_EDITOR_LOG_LEVEL', '   ')
        assert resolve_setting('BLOCK_EDITOR_LOG_LEVEL', 'WARNING') == 'WARNING'

    def test_negative_max_undo_clamped(self, monkeypatch):
        """Test that a negative max_undo is clamped to zero."""
        monkeypatch.setenv('BLOCK_EDITOR_MAX_UNDO', '-5')
        assert load_config().max_undo == 0

    def test_invalid_max_undo(self, monkeypatch):
        """Test that a non-integer max_undo raises BlockEditorError."""
        monkeypatch.setenv('BLOCK_EDITOR_MAX_UNDO', 'lots')
        with pytest.raises(BlockEditorError) as exc_info:
            load_config()
        assert exc_info.value.details['env_var'] == 'BLOCK_EDITOR_MAX_UNDO'
