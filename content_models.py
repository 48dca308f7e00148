"""
Content Models
==============

Typed records handed from the content stores to the interactive core.
All records are frozen: once fetched they are not mutated for the rest of
the page view.
"""

from dataclasses import asdict, dataclass, field
from typing import List, Optional, Tuple

SUPPORTED_GRID_SIZES = (3, 4, 5)

GAME_TYPES = frozenset({"reaction", "puzzle", "jigsaw", "checkers", "runner"})


class MalformedRecord(ValueError):
    """A content row failed validation at the store boundary."""

    def __init__(self, kind, record_id, errors):
        self.kind = kind
        self.record_id = record_id
        self.errors = list(errors)
        super().__init__(f"Malformed {kind} record {record_id!r}: {'; '.join(self.errors)}")


@dataclass(frozen=True)
class ColoringItem:
    id: str
    title: str
    slug: str
    category: str
    subcategory: str
    image_url: str
    thumbnail_url: Optional[str] = None

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PuzzleImage:
    id: str
    source_url: str
    label: str
    grid_size: int = 3
    slug: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: str = ""
    subcategory: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class AudioStory:
    id: str
    title: str
    slug: str
    audio_url: str
    description: str = ""
    duration: str = ""

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BookPage:
    number: int
    content: str


@dataclass(frozen=True)
class Book:
    id: str
    title: str
    slug: str
    description: str = ""
    cover_color: str = "#ffffff"
    pages: Tuple[BookPage, ...] = field(default_factory=tuple)

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class GameMeta:
    id: str
    title: str
    slug: str
    description: str
    type: str

    def to_dict(self):
        return asdict(self)


GAMES_SEED: List[GameMeta] = [
    GameMeta(
        id="1",
        title="Reaction Game",
        slug="reaction",
        description="Click the button when it lights up!",
        type="reaction",
    ),
    GameMeta(
        id="2",
        title="Mini Puzzle",
        slug="puzzle",
        description="Match pairs of pictures.",
        type="puzzle",
    ),
    GameMeta(
        id="3",
        title="Puzzles",
        slug="jigsaw/gallery",
        description="Assemble puzzles from pictures.",
        type="jigsaw",
    ),
]

# Built-in jigsaw picture, played when no image is chosen or the chosen one is gone
DEFAULT_PUZZLE_IMAGE_ID = "city"

DEMO_PUZZLE_IMAGES: List[PuzzleImage] = [
    PuzzleImage(
        id=DEFAULT_PUZZLE_IMAGE_ID,
        source_url="/puzzles/warsaw.png",
        label="Warsaw (Demo)",
        grid_size=SUPPORTED_GRID_SIZES[0],
    ),
]
