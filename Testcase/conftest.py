"""Shared fixtures: sample content, a YAML content directory and a fake Supabase client."""

import os
import sys
from types import SimpleNamespace

import pytest
import yaml

# Add parent directory to path so the top-level modules import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from content_models import ColoringItem, PuzzleImage


def make_item(item_id, category, subcategory, slug=None):
    return ColoringItem(
        id=item_id,
        title=f"Item {item_id}",
        slug=slug or f"item-{item_id}",
        category=category,
        subcategory=subcategory,
        image_url=f"/coloring/{item_id}.png",
        thumbnail_url=f"/coloring/thumbs/{item_id}.png",
    )


@pytest.fixture
def sample_items():
    return [
        make_item("1", "Animals", "Cats"),
        make_item("2", "Animals", "Dogs"),
        make_item("3", "Cars", ""),
    ]


@pytest.fixture
def puzzle_image():
    return PuzzleImage(id="city", source_url="/puzzles/warsaw.png", label="Warsaw", grid_size=3,
                       width=900, height=600)


CONTENT_FILES = {
    "coloring.yaml": [
        {"id": "c1", "title": "Sleepy Cat", "slug": "sleepy-cat", "category": "Animals",
         "subcategory": "Cats", "image_url": "/coloring/sleepy-cat.png",
         "thumbnail_url": "/coloring/thumbs/sleepy-cat.png"},
        {"id": "c2", "title": "Happy Puppy", "slug": "happy-puppy", "category": "Animals",
         "subcategory": "Dogs", "image_url": "/coloring/happy-puppy.png",
         "thumbnail_url": "/coloring/thumbs/happy-puppy.png"},
        {"id": "c3", "title": "Race Car", "slug": "race-car", "category": "Cars",
         "subcategory": "", "image_url": "/coloring/race-car.png"},
        # No image URL, rejected at ingestion
        {"id": "c4", "title": "Broken", "slug": "broken", "category": "Cars"},
    ],
    "puzzles.yaml": [
        {"id": "city", "label": "Warsaw", "source_url": "/puzzles/warsaw.png",
         "thumbnail_url": "/puzzles/thumbs/warsaw.png", "category": "Cities",
         "grid_size": 3, "width": 900, "height": 600},
        {"id": "castle", "label": "Castle", "source_url": "https://cdn.example.com/castle.png",
         "category": "Cities", "subcategory": "Old Town"},
    ],
    "audio_stories.yaml": [
        {"id": "a1", "title": "The Little Star", "slug": "little-star",
         "description": "A bedtime story.", "duration": "5:12", "audio_url": "/audio/little-star.mp3"},
    ],
    "books.yaml": {
        "items": [
            {"id": "b1", "title": "The Brave Turtle", "slug": "brave-turtle", "cover_color": "#a7f3d0",
             "pages": [{"number": 1, "content": "Once upon a time."}, {"number": 2, "content": "The end."}]},
        ],
    },
}


@pytest.fixture
def content_dir(tmp_path):
    for name, data in CONTENT_FILES.items():
        with open(tmp_path / name, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)
    return tmp_path


# ---------------------------------------------------------------------------
# Fake Supabase client
# ---------------------------------------------------------------------------

class FakeQuery:
    """Enough of the supabase-py query builder for the content store."""

    def __init__(self, rows, log):
        self._rows = [dict(r) for r in rows]
        self._log = log

    def select(self, columns="*"):
        self._log.append(("select", columns))
        return self

    def eq(self, column, value):
        self._log.append(("eq", column, value))
        # PostgREST compares filter values as text
        self._rows = [r for r in self._rows if str(r.get(column)) == str(value)]
        return self

    def order(self, column, desc=False):
        self._rows.sort(key=lambda r: r.get(column) or "", reverse=desc)
        return self

    def execute(self):
        return SimpleNamespace(data=self._rows)


class FakeBucket:
    def __init__(self, name):
        self.name = name

    def get_public_url(self, path):
        return f"https://cdn.test/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def from_(self, bucket):
        return FakeBucket(bucket)


class FakeSupabaseClient:
    def __init__(self, tables):
        self.tables = tables
        self.log = []
        self.storage = FakeStorage()

    def table(self, name):
        self.log.append(("table", name))
        return FakeQuery(self.tables.get(name, []), self.log)


def _i18n(**titles):
    return [{"locale": locale, "title": title, "short_title": None, "description": None}
            for locale, title in titles.items()]


@pytest.fixture
def supabase_tables():
    return {
        "items": [
            {"id": 1, "type": "coloring", "status": "published", "is_visible": True,
             "category_id": 10, "subcategory_id": 20, "slug": "sleepy-cat",
             "source_path": "1/source.png", "thumb_path": "1/thumb.png", "width": 800, "height": 600,
             "created_at": "2025-01-02T10:00:00", "item_i18n": _i18n(en="Sleepy Cat", pl="Śpiący kot")},
            {"id": 2, "type": "coloring", "status": "published", "is_visible": True,
             "category_id": 10, "subcategory_id": None, "slug": "wild-lion",
             "source_path": "2/source.png", "thumb_path": None, "width": None, "height": None,
             "created_at": "2025-01-03T10:00:00", "item_i18n": _i18n(en="Wild Lion")},
            # Only a German translation, skipped for en/pl
            {"id": 3, "type": "coloring", "status": "published", "is_visible": True,
             "category_id": 10, "subcategory_id": None, "slug": "hund",
             "source_path": "3/source.png", "thumb_path": None,
             "created_at": "2025-01-01T10:00:00", "item_i18n": _i18n(de="Hund")},
            # Missing slug
            {"id": 4, "type": "coloring", "status": "published", "is_visible": True,
             "category_id": 10, "subcategory_id": None, "slug": None,
             "source_path": "4/source.png", "thumb_path": None,
             "created_at": "2024-12-31T10:00:00", "item_i18n": _i18n(en="No Slug")},
            # Draft, never listed
            {"id": 5, "type": "coloring", "status": "draft", "is_visible": True,
             "category_id": 10, "subcategory_id": None, "slug": "draft",
             "source_path": "5/source.png", "thumb_path": None,
             "created_at": "2025-01-04T10:00:00", "item_i18n": _i18n(en="Draft")},
            {"id": 6, "type": "puzzles", "status": "published", "is_visible": True,
             "category_id": 11, "subcategory_id": None, "slug": "castle",
             "source_path": "6/source.png", "thumb_path": "6/thumb.png", "width": 600, "height": 400,
             "created_at": "2025-01-05T10:00:00", "item_i18n": _i18n(en="Castle")},
        ],
        "categories": [
            {"id": 10, "is_visible": True, "category_i18n": _i18n(en="Animals", pl="Zwierzęta")},
            {"id": 11, "is_visible": True, "category_i18n": _i18n(en="Castles")},
        ],
        "subcategories": [
            {"id": 20, "is_visible": True, "subcategory_i18n": _i18n(en="Cats")},
        ],
        "audio_stories": [
            {"id": 1, "title": "The Little Star", "slug": "little-star", "description": "Bedtime",
             "duration": "5:12", "audio_url": "https://cdn.test/audio/star.mp3",
             "created_at": "2025-01-01T10:00:00"},
            {"id": 2, "title": "No Audio", "slug": "no-audio", "description": "",
             "duration": "", "audio_url": None, "created_at": "2025-01-02T10:00:00"},
        ],
        "books": [
            {"id": 1, "title": "The Brave Turtle", "slug": "brave-turtle", "description": "River",
             "cover_color": "#a7f3d0", "pages": [{"number": 1, "content": "Once upon a time."}],
             "created_at": "2025-01-01T10:00:00"},
        ],
    }


@pytest.fixture
def fake_client(supabase_tables):
    return FakeSupabaseClient(supabase_tables)
