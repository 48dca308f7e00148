"""Tests for the jigsaw grid engine."""

import random

import pytest

from content_models import PuzzleImage
from outcomes import INVALID_TRANSITION, NOT_FOUND
from puzzle_constants import EDGE_BLANK, EDGE_FLAT, EDGE_TAB
from puzzle_engine import (
    PuzzleSession,
    all_slots,
    generate_piece_edges,
    is_solved,
    move_piece,
    piece_at,
    piece_bounds,
    reset_puzzle,
    start_puzzle,
    toggle_hint,
)


def solve(session):
    """Place pieces one by one until the puzzle completes."""
    for piece in session.pieces:
        if session.completed:
            break
        outcome = move_piece(session, piece.id, piece.correct_slot)
        assert outcome.ok, outcome.message


@pytest.mark.parametrize("grid_size", [3, 4, 5])
def test_start_creates_full_grid(puzzle_image, grid_size):
    session = start_puzzle(puzzle_image, grid_size, seed=1)

    assert len(session.pieces) == grid_size * grid_size
    correct = [piece.correct_slot for piece in session.pieces]
    assert sorted(correct) == all_slots(grid_size), "Correct slots must cover every cell once"
    current = [piece.current_slot for piece in session.pieces]
    assert sorted(current) == all_slots(grid_size), "Current slots must be a permutation"
    for piece in session.pieces:
        assert piece.correct_slot == piece.index


@pytest.mark.parametrize("grid_size", [3, 4, 5])
def test_start_is_never_solved(puzzle_image, grid_size):
    for seed in range(50):
        session = start_puzzle(puzzle_image, grid_size, seed=seed)
        assert not session.completed
        assert not is_solved(session), f"seed {seed} produced a solved board"


def test_identity_shuffle_is_redrawn(puzzle_image):
    class IdentityFirst(random.Random):
        calls = 0

        def shuffle(self, x):
            self.calls += 1
            if self.calls > 1:
                super().shuffle(x)

    rng = IdentityFirst(0)
    session = start_puzzle(puzzle_image, 3, rng=rng)

    assert rng.calls >= 2
    assert not is_solved(session)


@pytest.mark.parametrize("grid_size", [1, 2, 6, 0, None])
def test_unsupported_grid_size_is_rejected(grid_size):
    image = PuzzleImage(id="x", source_url="/x.png", label="X", grid_size=3)
    if grid_size is None:
        image = PuzzleImage(id="x", source_url="/x.png", label="X", grid_size=2)
    with pytest.raises(ValueError):
        start_puzzle(image, grid_size)


def test_same_seed_same_shuffle(puzzle_image):
    a = start_puzzle(puzzle_image, 4, seed=42)
    b = start_puzzle(puzzle_image, 4, seed=42)

    assert [p.current_slot for p in a.pieces] == [p.current_slot for p in b.pieces]


def test_seed_42_swap_scenario(puzzle_image):
    session = start_puzzle(puzzle_image, 3, seed=42)
    mover = piece_at(session, (0, 0))
    occupant = piece_at(session, (1, 1))

    outcome = move_piece(session, mover.id, (1, 1))

    assert outcome.ok
    assert mover.current_slot == (1, 1)
    assert occupant.current_slot == (0, 0)
    assert outcome.value["swapped_with"] == occupant.id
    assert session.completed == is_solved(session)
    assert session.moves == 1


def test_move_then_inverse_round_trips(puzzle_image):
    checked = 0
    for seed in range(20):
        session = start_puzzle(puzzle_image, 3, seed=seed)
        before = [p.current_slot for p in session.pieces]
        piece = piece_at(session, (0, 0))

        move_piece(session, piece.id, (2, 1))
        if session.completed:
            continue
        move_piece(session, piece.id, (0, 0))

        assert [p.current_slot for p in session.pieces] == before
        checked += 1
    assert checked > 0


def test_same_slot_move_is_a_no_op(puzzle_image):
    session = start_puzzle(puzzle_image, 3, seed=7)
    piece = session.pieces[0]
    before = [p.current_slot for p in session.pieces]

    outcome = move_piece(session, piece.id, piece.current_slot)

    assert outcome.ok
    assert outcome.value["moved"] is False
    assert session.moves == 0
    assert [p.current_slot for p in session.pieces] == before


def test_unknown_piece_is_not_found(puzzle_image):
    session = start_puzzle(puzzle_image, 3, seed=7)

    assert move_piece(session, 99, (0, 0)).error == NOT_FOUND
    assert move_piece(session, "3", (0, 0)).error == NOT_FOUND
    assert move_piece(session, True, (0, 0)).error == NOT_FOUND


@pytest.mark.parametrize("target", [(3, 0), (-1, 0), (0, 5), None, "a", (1,)])
def test_target_outside_grid_is_rejected(puzzle_image, target):
    session = start_puzzle(puzzle_image, 3, seed=7)

    outcome = move_piece(session, 0, target)

    assert outcome.error == INVALID_TRANSITION


def test_completion_and_monotonic_until_reset(puzzle_image):
    session = start_puzzle(puzzle_image, 4, seed=3)

    solve(session)

    assert session.completed
    assert all(piece.placed for piece in session.pieces)

    outcome = move_piece(session, 0, (3, 3))
    assert outcome.error == INVALID_TRANSITION
    assert session.completed, "Completed must stay true until reset"

    reset_puzzle(session, seed=4)
    assert not session.completed
    assert session.moves == 0
    assert not is_solved(session)


def test_reset_is_reproducible(puzzle_image):
    a = start_puzzle(puzzle_image, 3, seed=1)
    b = start_puzzle(puzzle_image, 3, seed=2)

    reset_puzzle(a, seed=9)
    reset_puzzle(b, seed=9)

    assert [p.current_slot for p in a.pieces] == [p.current_slot for p in b.pieces]


def test_session_dict_round_trip(puzzle_image):
    session = start_puzzle(puzzle_image, 5, seed=11)
    move_piece(session, 0, (4, 4))
    toggle_hint(session)

    restored = PuzzleSession.from_dict(session.to_dict())

    assert restored.to_dict() == session.to_dict()
    assert restored.pieces[0].edges == session.pieces[0].edges


@pytest.mark.parametrize("slots", [
    [[0, 0]] * 9,
    [[0, 0], [0, 1]],
    "nonsense",
    [[0, 0, 0]] * 9,
])
def test_session_from_dict_rejects_bad_slots(slots):
    with pytest.raises(ValueError):
        PuzzleSession.from_dict({"image_id": "x", "grid_size": 3, "slots": slots})


def test_edges_are_complementary():
    size = 4
    edges = generate_piece_edges(size)
    opposite = {EDGE_TAB: EDGE_BLANK, EDGE_BLANK: EDGE_TAB}

    for r in range(size):
        assert edges[r][0]["left"] == EDGE_FLAT
        assert edges[r][size - 1]["right"] == EDGE_FLAT
        for c in range(size - 1):
            assert edges[r][c + 1]["left"] == opposite[edges[r][c]["right"]]
    for c in range(size):
        assert edges[0][c]["top"] == EDGE_FLAT
        assert edges[size - 1][c]["bottom"] == EDGE_FLAT
        for r in range(size - 1):
            assert edges[r + 1][c]["top"] == opposite[edges[r][c]["bottom"]]


def test_piece_bounds_tile_the_image(puzzle_image):
    session = start_puzzle(puzzle_image, 3, seed=0)
    width, height = 1000, 701

    boxes = [piece_bounds(p, 3, width, height) for p in session.pieces]

    assert sum((r - l) * (b - t) for l, t, r, b in boxes) == width * height
    assert boxes[0][:2] == (0, 0)
    assert boxes[-1][2:] == (width, height)
    widths = {r - l for l, t, r, b in boxes}
    assert max(widths) - min(widths) <= 1


def test_piece_bounds_rejects_empty_image(puzzle_image):
    session = start_puzzle(puzzle_image, 3, seed=0)
    with pytest.raises(ValueError):
        piece_bounds(session.pieces[0], 3, 0, 100)
