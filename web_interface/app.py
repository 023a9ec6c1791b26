"""
Flask web interface for the Block Editor Core.

This provides a REST API for moving blocks and stepping through undo/redo history.
"""

from flask import Flask, jsonify
from flask_cors import CORS
import logging

# Import our block editor components
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from block_editor_core.config import EditorConfig, load_config
from block_editor_core.history import UndoHistory
from block_editor_core.models import BlockWorkspace
from web_interface.history_api import init_history_api


def create_app(workspace=None, history=None, config: EditorConfig = None) -> Flask:
    config = config or load_config()
    app = Flask(__name__)
    CORS(app)

    workspace = workspace or BlockWorkspace()
    history = history or UndoHistory(max_undo=config.max_undo)
    app.config['BLOCK_EDITOR_WORKSPACE_ID'] = workspace.id
    init_history_api(app, workspace, history)

    @app.route('/api/test', methods=['GET'])
    def test_endpoint():
        """Simple test endpoint."""
        return jsonify({
            'success': True,
            'message': 'Block Editor API is working!',
            'workspace_id': workspace.id,
            'max_undo': history.max_undo,
        })

    return app


if __name__ == '__main__':
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    host = os.environ.get('BLOCK_EDITOR_HOST', '0.0.0.0')
    port = int(os.environ.get('BLOCK_EDITOR_PORT', '5003'))
    print(f"Access the interface at: http://localhost:{port}")

    create_app(config=config).run(debug=True, host=host, port=port)
