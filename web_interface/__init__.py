"""Flask web interface for the Block Editor Core."""
