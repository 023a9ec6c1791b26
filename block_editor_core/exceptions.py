"""
Exceptions for the Block Editor Core.
"""

from typing import Optional, Any, Dict


class BlockEditorError(Exception):
    """Base exception for all block editor errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConnectionError(BlockEditorError):
    """Raised when two connectors cannot be joined."""
    
    def __init__(self, message: str, source_block_id: Optional[str] = None,
                 target_block_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.source_block_id = source_block_id
        self.target_block_id = target_block_id


class EventError(BlockEditorError):
    """Base exception for workspace event errors."""
    
    def __init__(self, message: str, event_type: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.event_type = event_type


class EventDeserializationError(EventError):
    """Raised when an event's JSON representation cannot be decoded."""
    
    def __init__(self, message: str, event_type: Optional[str] = None,
                 field_name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, event_type, details)
        self.field_name = field_name


class UnknownEventTypeError(EventError):
    """Raised when no event class is registered for a type."""
    pass
