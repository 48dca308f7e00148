"""
Jigsaw Routes - Flask Blueprint
===============================

Routes for the jigsaw puzzle game. Every response carries a signed
session; the client posts it back with the next action.

Routes:
    /jigsaw/options  - Difficulty choices for the gallery
    /jigsaw/start    - Start a shuffled session for a gallery image
    /jigsaw/move     - Drop a piece onto a slot (swap-on-drop)
    /jigsaw/reset    - Reshuffle the current image
    /jigsaw/hint     - Toggle the reference picture
"""

from flask import Blueprint, current_app, jsonify, request

import jigsaw_handler
from content_models import DEMO_PUZZLE_IMAGES
from outcomes import NOT_FOUND
from puzzle_constants import difficulty_options, normalize_grid_size

jigsaw_bp = Blueprint('jigsaw', __name__)

ERROR_STATUS = {
    NOT_FOUND: 404,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _gallery():
    return current_app.extensions['puzzle_gallery']


def _load_session(data):
    """Restore the signed session and its image. Returns (session, image, error_response)."""
    try:
        session = jigsaw_handler.restore_session(data.get('session'))
    except ValueError as e:
        return None, None, (jsonify({'error': str(e)}), 400)

    gallery = _gallery()
    outcome = gallery.select(session.image_id, session.grid_size)
    if not outcome.ok and session.image_id in {image.id for image in DEMO_PUZZLE_IMAGES}:
        outcome = gallery.resolve(session.image_id, session.grid_size)
    if not outcome.ok:
        return None, None, (jsonify({'error': outcome.error, 'message': outcome.message}), 404)
    return session, outcome.value, None


def _seed(data):
    """Optional shuffle seed from the request body. Returns (seed, error_response)."""
    seed = data.get('seed')
    if seed is None or (isinstance(seed, (int, str)) and not isinstance(seed, bool)):
        return seed, None
    return None, (jsonify({'error': f"seed must be an integer or string, got {type(seed).__name__}"}), 400)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@jigsaw_bp.route('/options', methods=['GET'])
def jigsaw_options():
    """Difficulty choices shown in the gallery."""
    return jsonify({'difficulties': difficulty_options()})


@jigsaw_bp.route('/start', methods=['POST'])
def jigsaw_start():
    """Start a puzzle session. No image, or an unknown one, plays the demo image."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'No data provided'}), 400

    # 'image' is the older name for image_id
    image_id = data.get('image_id') or data.get('image')
    seed, error = _seed(data)
    if error:
        return error

    grid_size = normalize_grid_size(data.get('grid_size', data.get('size')))

    try:
        outcome = _gallery().resolve(image_id, grid_size)
        render = jigsaw_handler.start_session(outcome.value, grid_size, seed=seed)
        return jsonify(render)

    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500


@jigsaw_bp.route('/move', methods=['POST'])
def jigsaw_move():
    """Drop a piece onto a target slot."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    session, image, error = _load_session(data)
    if error:
        return error

    try:
        result = jigsaw_handler.handle_move(session, image, data.get('piece_id'), data.get('target'))
        if not result['ok']:
            return jsonify(result), ERROR_STATUS.get(result['error'], 409)
        return jsonify(result)
    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500


@jigsaw_bp.route('/reset', methods=['POST'])
def jigsaw_reset():
    """Reshuffle the pieces and restart the clock."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    seed, error = _seed(data)
    if error:
        return error

    session, image, error = _load_session(data)
    if error:
        return error

    try:
        return jsonify(jigsaw_handler.handle_reset(session, image, seed=seed))
    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500


@jigsaw_bp.route('/hint', methods=['POST'])
def jigsaw_hint():
    """Show or hide the reference picture."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    session, image, error = _load_session(data)
    if error:
        return error

    try:
        return jsonify(jigsaw_handler.handle_hint(session, image))
    except Exception as e:
        import traceback
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500
