"""
Puzzle Constants & Utilities — Shared Definitions
=================================================

Single source of truth for jigsaw difficulty options and grid-size
normalisation, used across puzzle_engine.py, puzzle_gallery.py and
jigsaw_routes.py.
"""

import settings
from content_models import SUPPORTED_GRID_SIZES

MIN_GRID_SIZE = min(SUPPORTED_GRID_SIZES)
MAX_GRID_SIZE = max(SUPPORTED_GRID_SIZES)

# Edge shapes for piece outlines
EDGE_FLAT = "flat"
EDGE_TAB = "tab"
EDGE_BLANK = "blank"


def difficulty_options():
    """Difficulty choices shown next to each gallery image: 3×3 (9), 4×4 (16), 5×5 (25)."""
    return [
        {"grid_size": size, "pieces": size * size, "label": f"{size}×{size} ({size * size})"}
        for size in SUPPORTED_GRID_SIZES
    ]


def default_grid_size():
    if settings.DEFAULT_GRID_SIZE in SUPPORTED_GRID_SIZES:
        return settings.DEFAULT_GRID_SIZE
    return MIN_GRID_SIZE


def normalize_grid_size(value):
    """Accept a grid size (3) or a piece count (9). Anything else → default size.

    Links from older pages pass ?size=9 while newer ones pass ?size=3.
    """
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default_grid_size()

    if value in SUPPORTED_GRID_SIZES:
        return value
    for size in SUPPORTED_GRID_SIZES:
        if size * size == value:
            return size
    return default_grid_size()
