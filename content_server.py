#!/usr/bin/env python3
"""
Kids Content Server
===================

JSON API over the content store: coloring pages grouped by category, the
coloring browser, audio stories, books, games and the jigsaw puzzle
gallery. Jigsaw gameplay routes live in jigsaw_routes.py.

Usage:
    python content_server.py

Then open http://localhost:8080/api/coloring in your browser.
"""

from flask import Blueprint, Flask, current_app, jsonify, request

from category_index import build_category_index, index_to_list
from coloring_browser import ColoringBrowser, similar_items
from content_store_supabase import get_content_store
from jigsaw_routes import jigsaw_bp
from puzzle_constants import difficulty_options
from puzzle_gallery import PuzzleGallery

content_bp = Blueprint('content', __name__)


def create_app(store=None):
    """Build the Flask app around a content store (configured store if None)."""
    if store is None:
        store = get_content_store()
    print(f"Using content store: {type(store).__name__}")

    app = Flask(__name__)
    app.extensions['content_store'] = store
    app.extensions['puzzle_gallery'] = PuzzleGallery(store)

    app.register_blueprint(content_bp, url_prefix='/api')
    app.register_blueprint(jigsaw_bp, url_prefix='/jigsaw')
    return app


def _store():
    return current_app.extensions['content_store']


def _records(records):
    return [record.to_dict() for record in records]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@content_bp.route('/status')
def status():
    """Return server status including content backend type."""
    store_type = type(_store()).__name__
    return jsonify({
        'storage_backend': 'supabase' if store_type == 'ContentStoreSupabase' else 'file',
        'store_type': store_type,
        'connected': True,
    })


@content_bp.route('/coloring', methods=['GET'])
def list_coloring():
    """All coloring pages grouped by category and subcategory."""
    items = _store().get_coloring_list()
    return jsonify({
        'categories': index_to_list(build_category_index(items)),
        'total': len(items),
        'empty': not items,
    })


@content_bp.route('/coloring/browse', methods=['GET'])
def browse_coloring():
    """
    Coloring browser state for ?category=...&subcategory=...

    Unknown categories leave the selection where it was and report the
    reason next to the state, so the page still renders.
    """
    browser = ColoringBrowser(_store().get_coloring_list())
    category = request.args.get('category')
    subcategory = request.args.get('subcategory')

    outcome = None
    if category:
        outcome = browser.select_category(category)
    if subcategory and (outcome is None or outcome.ok):
        outcome = browser.select_subcategory(subcategory)
    if outcome is None:
        outcome = browser.empty_state()

    body = browser.to_dict()
    if outcome is not None and not outcome.ok:
        body['error'] = outcome.error
        body['message'] = outcome.message
    return jsonify(body)


@content_bp.route('/coloring/<slug>', methods=['GET'])
def get_coloring(slug):
    """A single coloring page plus others from its category."""
    item = _store().get_coloring_by_slug(slug)
    if item is None:
        return jsonify({'error': 'Coloring page not found'}), 404

    similar = similar_items(_store().get_coloring_list(), item)
    return jsonify({'item': item.to_dict(), 'similar': _records(similar)})


@content_bp.route('/audio-stories', methods=['GET'])
def list_audio_stories():
    return jsonify({'stories': _records(_store().get_audio_stories())})


@content_bp.route('/audio-stories/<slug>', methods=['GET'])
def get_audio_story(slug):
    story = _store().get_audio_story_by_slug(slug)
    if story is None:
        return jsonify({'error': 'Audio story not found'}), 404
    return jsonify(story.to_dict())


@content_bp.route('/books', methods=['GET'])
def list_books():
    return jsonify({'books': _records(_store().get_books())})


@content_bp.route('/books/<slug>', methods=['GET'])
def get_book(slug):
    book = _store().get_book_by_slug(slug)
    if book is None:
        return jsonify({'error': 'Book not found'}), 404
    return jsonify(book.to_dict())


@content_bp.route('/games', methods=['GET'])
def list_games():
    return jsonify({'games': _records(_store().get_games())})


@content_bp.route('/puzzles', methods=['GET'])
def list_puzzles():
    """Puzzle gallery grouped by category, with difficulty choices."""
    gallery = current_app.extensions['puzzle_gallery']
    return jsonify({
        'categories': index_to_list(gallery.categories()),
        'difficulties': difficulty_options(),
    })


if __name__ == '__main__':
    app = create_app()
    print("Starting Kids Content Server...")
    print("Open http://localhost:8080/api/coloring in your browser")
    app.run(debug=True, port=8080, host='0.0.0.0')
