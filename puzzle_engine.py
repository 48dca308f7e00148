"""
Puzzle Grid Engine
==================

Cuts a puzzle image into an N×N grid of pieces, shuffles them, applies
moves and detects completion.

Move policy is swap-on-drop: every slot always holds exactly one piece,
so dropping a piece onto an occupied slot exchanges the two pieces in a
single step. A session is terminal once solved; reset_puzzle() reshuffles
it for another round.
"""

import random
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from content_models import SUPPORTED_GRID_SIZES
from outcomes import INVALID_TRANSITION, NOT_FOUND, failure, success
from puzzle_constants import EDGE_BLANK, EDGE_FLAT, EDGE_TAB

Slot = Tuple[int, int]


@dataclass
class PuzzlePiece:
    id: int
    index: Slot
    correct_slot: Slot
    current_slot: Slot
    edges: Dict[str, str] = field(default_factory=dict)

    @property
    def placed(self) -> bool:
        return self.current_slot == self.correct_slot


@dataclass
class PuzzleSession:
    image_id: str
    grid_size: int
    pieces: List[PuzzlePiece]
    started_at: float
    completed: bool = False
    moves: int = 0
    hint_visible: bool = False

    def to_dict(self) -> Dict:
        """Compact, JSON-safe form: current slot per piece id."""
        return {
            "image_id": self.image_id,
            "grid_size": self.grid_size,
            "slots": [list(p.current_slot) for p in self.pieces],
            "started_at": self.started_at,
            "completed": self.completed,
            "moves": self.moves,
            "hint_visible": self.hint_visible,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PuzzleSession":
        """Rebuild a session from to_dict() output. Raises ValueError on inconsistent data."""
        if not isinstance(data, dict):
            raise ValueError("Invalid session data")
        grid_size = data.get("grid_size")
        _check_grid_size(grid_size)

        try:
            slots = [(int(row), int(col)) for row, col in data.get("slots") or []]
        except (TypeError, ValueError):
            raise ValueError("Session slots must be [row, col] pairs")
        expected = set(all_slots(grid_size))
        if len(slots) != grid_size * grid_size or set(slots) != expected:
            raise ValueError("Session slots are not a permutation of the grid")

        pieces = _new_pieces(grid_size)
        for piece, slot in zip(pieces, slots):
            piece.current_slot = slot

        session = cls(
            image_id=str(data.get("image_id", "")),
            grid_size=grid_size,
            pieces=pieces,
            started_at=float(data.get("started_at", 0.0)),
            moves=int(data.get("moves", 0)),
            hint_visible=bool(data.get("hint_visible", False)),
        )
        session.completed = is_solved(session)
        return session


def _check_grid_size(grid_size):
    if grid_size not in SUPPORTED_GRID_SIZES:
        raise ValueError(f"grid_size must be one of {SUPPORTED_GRID_SIZES}, got {grid_size!r}")


def all_slots(grid_size: int) -> List[Slot]:
    return [(row, col) for row in range(grid_size) for col in range(grid_size)]


def generate_piece_edges(grid_size: int) -> List[List[Dict[str, str]]]:
    """Tab/blank outline for every cell.

    Border edges are flat; the edge shared by two neighbours is a tab on one
    side and a blank on the other.
    """
    def complement(edge):
        if edge == EDGE_TAB:
            return EDGE_BLANK
        if edge == EDGE_BLANK:
            return EDGE_TAB
        return EDGE_FLAT

    last = grid_size - 1
    edges = [[{} for _ in range(grid_size)] for _ in range(grid_size)]
    for r in range(grid_size):
        for c in range(grid_size):
            piece = edges[r][c]
            piece["top"] = EDGE_FLAT if r == 0 else complement(edges[r - 1][c]["bottom"])
            piece["left"] = EDGE_FLAT if c == 0 else complement(edges[r][c - 1]["right"])
            if r == last:
                piece["bottom"] = EDGE_FLAT
            else:
                piece["bottom"] = EDGE_TAB if (r + c) % 2 == 0 else EDGE_BLANK
            if c == last:
                piece["right"] = EDGE_FLAT
            else:
                piece["right"] = EDGE_TAB if (r + c + 1) % 2 == 0 else EDGE_BLANK
    return edges


def _new_pieces(grid_size: int) -> List[PuzzlePiece]:
    edges = generate_piece_edges(grid_size)
    pieces = []
    for slot in all_slots(grid_size):
        row, col = slot
        pieces.append(PuzzlePiece(
            id=row * grid_size + col,
            index=slot,
            correct_slot=slot,
            current_slot=slot,
            edges=edges[row][col],
        ))
    return pieces


def _shuffle(session: PuzzleSession, rng: random.Random) -> None:
    """Assign a non-identity permutation of slots to the pieces."""
    slots = all_slots(session.grid_size)
    permutation = list(slots)
    while permutation == slots:
        rng.shuffle(permutation)
    for piece, slot in zip(session.pieces, permutation):
        piece.current_slot = slot


def _rng(seed, rng):
    if rng is not None:
        return rng
    return random.Random(seed)


def start_puzzle(image, grid_size: Optional[int] = None, seed=None, rng: Optional[random.Random] = None) -> PuzzleSession:
    """Start a shuffled session for an image. Same seed → same shuffle."""
    grid_size = image.grid_size if grid_size is None else grid_size
    _check_grid_size(grid_size)

    session = PuzzleSession(
        image_id=image.id,
        grid_size=grid_size,
        pieces=_new_pieces(grid_size),
        started_at=time.time(),
    )
    _shuffle(session, _rng(seed, rng))
    return session


def reset_puzzle(session: PuzzleSession, seed=None, rng: Optional[random.Random] = None) -> PuzzleSession:
    """Reshuffle in place and start the clock again."""
    _shuffle(session, _rng(seed, rng))
    session.completed = False
    session.moves = 0
    session.started_at = time.time()
    return session


def is_solved(session: PuzzleSession) -> bool:
    return all(piece.placed for piece in session.pieces)


def piece_at(session: PuzzleSession, slot: Slot) -> Optional[PuzzlePiece]:
    slot = tuple(slot)
    for piece in session.pieces:
        if piece.current_slot == slot:
            return piece
    return None


def _as_slot(value, grid_size) -> Optional[Slot]:
    try:
        row, col = value
        row, col = int(row), int(col)
    except (TypeError, ValueError):
        return None
    if not (0 <= row < grid_size and 0 <= col < grid_size):
        return None
    return row, col


def move_piece(session: PuzzleSession, piece_id, target_slot):
    """
    Drop a piece onto a slot.

    Returns an Outcome whose value is
        {"piece": id, "swapped_with": id or None, "completed": bool, "moved": bool}
    """
    if session.completed:
        return failure(INVALID_TRANSITION, "Puzzle is already complete — reset to play again")

    if isinstance(piece_id, bool) or not isinstance(piece_id, int) or not 0 <= piece_id < len(session.pieces):
        return failure(NOT_FOUND, f"No piece {piece_id!r} in this puzzle")
    piece = session.pieces[piece_id]

    target = _as_slot(target_slot, session.grid_size)
    if target is None:
        return failure(INVALID_TRANSITION, f"Slot {target_slot!r} is outside the {session.grid_size}×{session.grid_size} grid")

    if target == piece.current_slot:
        return success({"piece": piece.id, "swapped_with": None, "completed": session.completed, "moved": False})

    occupant = piece_at(session, target)
    piece.current_slot, occupant.current_slot = target, piece.current_slot

    session.moves += 1
    session.completed = is_solved(session)
    return success({
        "piece": piece.id,
        "swapped_with": occupant.id,
        "completed": session.completed,
        "moved": True,
    })


def toggle_hint(session: PuzzleSession) -> bool:
    session.hint_visible = not session.hint_visible
    return session.hint_visible


def elapsed_seconds(session: PuzzleSession, now: Optional[float] = None) -> int:
    now = time.time() if now is None else now
    return max(0, int(now - session.started_at))


def piece_bounds(piece: PuzzlePiece, grid_size: int, width: int, height: int) -> Tuple[int, int, int, int]:
    """Crop box (left, top, right, bottom) of a piece in a width×height image.

    Cuts fall on floor(k * size / grid_size), so piece areas differ by at
    most one pixel row/column and the boxes tile the image exactly.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}×{height}")
    row, col = piece.index
    left = col * width // grid_size
    right = (col + 1) * width // grid_size
    top = row * height // grid_size
    bottom = (row + 1) * height // grid_size
    return left, top, right, bottom
