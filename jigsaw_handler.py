"""
Jigsaw Handler - Session Render Engine
======================================

Turns puzzle sessions into render objects for the front end. The server
keeps no session table: every render carries the session state signed with
HMAC, and the client sends it back with the next action.
"""

import hashlib
import hmac
import json

import settings
from puzzle_engine import (
    PuzzleSession,
    elapsed_seconds,
    move_piece,
    piece_bounds,
    reset_puzzle,
    start_puzzle,
    toggle_hint,
)


def _sign_session(session_data):
    """Sign a session dict with HMAC. Returns {"data": ..., "sig": "..."}."""
    payload = json.dumps(session_data, sort_keys=True, separators=(',', ':'))
    sig = hmac.new(settings.SESSION_SECRET, payload.encode('utf-8'), hashlib.sha256).hexdigest()
    return {"data": session_data, "sig": sig}


def _verify_session(signed):
    """Verify and extract session data from a signed session. Raises ValueError on tamper."""
    if not isinstance(signed, dict) or "data" not in signed or "sig" not in signed:
        raise ValueError("Invalid session format — missing signature")
    payload = json.dumps(signed["data"], sort_keys=True, separators=(',', ':'))
    expected_sig = hmac.new(settings.SESSION_SECRET, payload.encode('utf-8'), hashlib.sha256).hexdigest()
    if not isinstance(signed["sig"], str) or not hmac.compare_digest(signed["sig"], expected_sig):
        raise ValueError("Session signature invalid — possible tampering")
    return signed["data"]


def restore_session(raw):
    """Restore a PuzzleSession from client-sent signed JSON."""
    return PuzzleSession.from_dict(_verify_session(raw))


def get_render(session, image):
    """Build the complete render object for the current state."""
    has_size = bool(image.width and image.height)

    pieces = []
    for piece in session.pieces:
        entry = {
            "id": piece.id,
            "index": list(piece.index),
            "correctSlot": list(piece.correct_slot),
            "currentSlot": list(piece.current_slot),
            "placed": piece.placed,
            "edges": dict(piece.edges),
        }
        if has_size:
            entry["bounds"] = list(piece_bounds(piece, session.grid_size, image.width, image.height))
        pieces.append(entry)

    return {
        "imageId": image.id,
        "imageUrl": image.source_url,
        "label": image.label,
        "gridSize": session.grid_size,
        "pieces": pieces,
        "placedCount": sum(1 for piece in session.pieces if piece.placed),
        "totalPieces": len(session.pieces),
        "moves": session.moves,
        "completed": session.completed,
        "hintVisible": session.hint_visible,
        "elapsedSeconds": elapsed_seconds(session),
        "session": _sign_session(session.to_dict()),
    }


def start_session(image, grid_size=None, seed=None):
    """Initialize a puzzle session. Returns the initial render."""
    session = start_puzzle(image, grid_size, seed=seed)
    print(f"[Jigsaw] Started {session.grid_size}×{session.grid_size} puzzle for image {image.id}")
    return get_render(session, image)


def handle_move(session, image, piece_id, target):
    """Apply a move. Returns {'ok': bool, 'error'?: str, 'message'?: str, 'render': {...}}."""
    outcome = move_piece(session, piece_id, target)
    result = outcome.to_dict()
    if outcome.ok:
        result["swappedWith"] = outcome.value["swapped_with"]
        if outcome.value["completed"] and outcome.value["moved"]:
            print(f"[Jigsaw] Puzzle {image.id} completed in {session.moves} moves")
    result["render"] = get_render(session, image)
    return result


def handle_reset(session, image, seed=None):
    reset_puzzle(session, seed=seed)
    return get_render(session, image)


def handle_hint(session, image):
    toggle_hint(session)
    return get_render(session, image)
