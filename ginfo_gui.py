#!/usr/bin/env python3
"""
GINFO GUI - Web-based viewer for the game info catalog
Serves the grid / detail / lightbox page and the JSON API it talks to.
"""

import argparse
import logging
import os
import threading
from functools import wraps
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, abort, jsonify, render_template, request, send_from_directory

import ginfo
from content_clients import ContentFetchError

load_dotenv()

# Initialize logging early so service module logs are captured
log_level = os.getenv('GINFO_LOG_LEVEL', 'INFO')
ginfo_logger = ginfo.setup_logging(log_level)
gui_logger = logging.getLogger('ginfo.gui')
gui_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
_log_file = os.getenv('GINFO_LOG_FILE')
if _log_file:
    try:
        os.makedirs(os.path.dirname(os.path.abspath(_log_file)), exist_ok=True)
        fh = logging.FileHandler(_log_file)
        fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        fh.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        gui_logger.addHandler(fh)
    except OSError:
        gui_logger.warning('Could not create log file handler for %s', _log_file)

# Site files are served by site_file(); no separate static folder
app = Flask(__name__, static_folder=None)

# Global viewer instance
viewer: Optional[ginfo.GameViewer] = None
viewer_lock = threading.Lock()
viewer_error: Optional[str] = None


def initialize_viewer(site_root: str = '.', config_path: str = ginfo.CONFIG_FILE,
                      token: Optional[str] = None) -> bool:
    """Create the viewer and load its catalog.

    Returns:
        True when a configuration was found (even if the catalog is empty).
    """
    global viewer, viewer_error
    with viewer_lock:
        try:
            new_viewer = ginfo.GameViewer(site_root=site_root, config_path=config_path, token=token)
        except ginfo.ConfigError as e:
            gui_logger.error('Configuration unavailable: %s', e)
            viewer = None
            viewer_error = str(e)
            return False
        result = new_viewer.load_catalog()
        viewer = new_viewer
        viewer_error = None
        gui_logger.info('Catalog ready: %d game(s)', len(result.entries))
        return True


def require_viewer(f):
    """Decorator to require a configured viewer"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if viewer is None:
            return jsonify({'error': viewer_error or 'Viewer not initialized'}), 503
        return f(*args, **kwargs)
    return decorated_function


@app.route('/')
def index():
    """Main page"""
    return render_template('index.html')


@app.route('/api/status')
def api_status():
    """Get application status"""
    if viewer is None:
        return jsonify({
            'ready': False,
            'message': viewer_error or 'Loading...',
        })
    return jsonify({
        'ready': True,
        'repo_info': viewer.config.repo_info_line(),
        'total_games': len(viewer.entries),
        'message': viewer.catalog_message,
        'has_token': bool(viewer.config.token),
        'state': viewer.state.to_dict(),
    })


# ===========================================================================================
# Catalog Endpoints
# ===========================================================================================

@app.route('/api/games')
@require_viewer
def api_games():
    """Placeholder cards for the grid, optionally filtered by ?q="""
    query = request.args.get('q', '')
    entries = viewer.search(query)
    cards = []
    for entry in entries:
        card = viewer.cards.cached(entry.name)
        data = card.to_dict() if card else {'name': entry.name, 'thumbnail_url': None,
                                            'summary': None, 'loaded': False}
        data['source_locator'] = entry.source_locator
        cards.append(data)
    message = viewer.catalog_message
    if not cards and query and not message:
        message = f'No games match "{query}".'
    return jsonify({'games': cards, 'count': len(cards), 'message': message})


@app.route('/api/games/<name>/card')
@require_viewer
def api_game_card(name):
    """Thumbnail and summary for one card, loaded when it becomes visible"""
    card = viewer.card(name)
    if card is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(card.to_dict())


@app.route('/api/games/<name>')
@require_viewer
def api_game_detail(name):
    """Open one game: text body, images and video embeds"""
    try:
        detail, applied = viewer.open_game(name)
    except KeyError:
        return jsonify({'error': 'Game not found'}), 404
    data = detail.to_dict()
    data['applied'] = applied
    data['fragment'] = viewer.state.fragment if applied else None
    return jsonify(data)


@app.route('/api/deeplink')
@require_viewer
def api_deeplink():
    """Resolve a #game=... fragment to a catalog entry name"""
    entry = viewer.entry_for_fragment(request.args.get('fragment', ''))
    return jsonify({'name': entry.name if entry else None})


@app.route('/api/token', methods=['POST'])
@require_viewer
def api_token():
    """Apply or clear the bearer token and reload the catalog"""
    data = request.get_json(silent=True) or {}
    result = viewer.set_token(data.get('token'))
    return jsonify({'success': True, 'total_games': len(result.entries), 'message': result.message})


@app.route('/api/reload', methods=['POST'])
@require_viewer
def api_reload():
    """Re-read the configuration and the catalog"""
    try:
        result = viewer.reload_config()
    except ginfo.ConfigError as e:
        gui_logger.error('Reload failed: %s', e)
        return jsonify({'success': False, 'error': str(e)}), 500
    return jsonify({'success': True, 'total_games': len(result.entries), 'message': result.message})


# ===========================================================================================
# View / Lightbox Endpoints
# ===========================================================================================

@app.route('/api/view/back', methods=['POST'])
@require_viewer
def api_view_back():
    """Leave the detail view"""
    viewer.back_to_grid()
    return jsonify(viewer.state.to_dict())


@app.route('/api/lightbox/open', methods=['POST'])
@require_viewer
def api_lightbox_open():
    """Open the lightbox on the current game's images"""
    data = request.get_json(silent=True) or {}
    try:
        index = int(data.get('index', 0))
    except (TypeError, ValueError):
        return jsonify({'error': 'index must be an integer'}), 400
    with viewer.lock:
        url = viewer.state.open_lightbox(index)
        state = viewer.state.to_dict()
    if url is None:
        return jsonify({'error': 'No images to show', 'state': state}), 409
    return jsonify(state)


@app.route('/api/lightbox/<action>', methods=['POST'])
@require_viewer
def api_lightbox_action(action):
    """next / prev / close / key"""
    with viewer.lock:
        state = viewer.state
        if action == 'next':
            if state.view == 'lightbox':
                state.lightbox.next()
        elif action == 'prev':
            if state.view == 'lightbox':
                state.lightbox.prev()
        elif action == 'close':
            state.close_lightbox()
        elif action == 'key':
            data = request.get_json(silent=True) or {}
            state.handle_key(str(data.get('key', '')))
        else:
            return jsonify({'error': f'Unknown action: {action}'}), 404
        return jsonify(state.to_dict())


# ===========================================================================================
# Site Files
# ===========================================================================================

@app.route('/<path:filename>')
@require_viewer
def site_file(filename):
    """Serve files below the site root (site-relative image paths point here)"""
    if any(part.startswith('.') for part in filename.split('/')):
        abort(404)
    try:
        path = viewer.fetcher.contained_path(filename)
    except ContentFetchError:
        gui_logger.warning('Refused site file outside the root: %s', filename)
        abort(404)
    if not os.path.isfile(path):
        abort(404)
    return send_from_directory(viewer.site_root, os.path.relpath(path, viewer.site_root))


def main():
    """Main entry point for GUI"""
    parser = argparse.ArgumentParser(description='GINFO Web GUI')
    parser.add_argument('--site-root', default='.', help='Folder holding config.json and Info/')
    parser.add_argument('--config', default=ginfo.CONFIG_FILE, help='Path to config file')
    parser.add_argument('--token', help='GitHub token sent as a bearer token')
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    args = parser.parse_args()

    initialize_viewer(site_root=args.site_root, config_path=args.config, token=args.token)

    print("\n" + "="*60)
    print("🎮 GINFO Web GUI is starting...")
    print("="*60)
    print("\nOpen your browser and go to:")
    print(f"  http://{args.host}:{args.port}")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=args.host, port=args.port, debug=False)
    except KeyboardInterrupt:
        print("\n\n" + "="*60)
        print("🛑 GINFO Web GUI stopped")
        print("="*60 + "\n")


if __name__ == "__main__":
    main()
