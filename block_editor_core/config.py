"""
Runtime configuration for the Block Editor Core.

Settings resolve from environment variables first, then fall back to
hard-coded defaults.
"""

from dataclasses import dataclass
import os

from .exceptions import BlockEditorError


DEFAULT_MAX_UNDO = 1024
DEFAULT_LOG_LEVEL = "INFO"


def resolve_setting(env_var: str, default: str) -> str:
    """Two-tier resolution: env → default."""
    env_val = os.environ.get(env_var, '').strip()
    if env_val:
        return env_val
    return default


@dataclass
class EditorConfig:
    """Effective editor settings."""
    max_undo: int = DEFAULT_MAX_UNDO
    log_level: str = DEFAULT_LOG_LEVEL


def load_config() -> EditorConfig:
    raw_max_undo = resolve_setting('BLOCK_EDITOR_MAX_UNDO', str(DEFAULT_MAX_UNDO))
    try:
        max_undo = int(raw_max_undo)
    except ValueError:
        raise BlockEditorError(
            f"BLOCK_EDITOR_MAX_UNDO must be an integer, got {raw_max_undo!r}",
            details={'env_var': 'BLOCK_EDITOR_MAX_UNDO'}
        ) from None
    return EditorConfig(
        max_undo=max(0, max_undo),
        log_level=resolve_setting('BLOCK_EDITOR_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
    )
