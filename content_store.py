#!/usr/bin/env python3
"""
Content Storage Manager - YAML Files
====================================

Reads content collections from YAML files in a single directory. Same API
as the Supabase-backed ContentStoreSupabase, used for local development
and tests.

Storage structure:
    content/
    ├── coloring.yaml        # list of coloring items
    ├── puzzles.yaml         # list of puzzle images
    ├── audio_stories.yaml
    ├── books.yaml
    └── games.yaml           # optional, defaults to the built-in games seed

Each file holds either a plain list of rows or a mapping with an 'items'
list. Row keys are the record field names (see content_models.py).
Files are re-read when their mtime changes.
"""

import os
from pathlib import Path

import yaml

import settings
from content_models import GAMES_SEED
from validate_content import ingest_rows

COLLECTION_FILES = {
    "coloring": "coloring.yaml",
    "puzzle": "puzzles.yaml",
    "audio_story": "audio_stories.yaml",
    "book": "books.yaml",
    "game": "games.yaml",
}


class ContentStore:
    def __init__(self, base_path=None, strict=None):
        self.base_path = Path(base_path or settings.CONTENT_DIR)
        if not self.base_path.is_dir():
            raise ValueError(f"Content directory not found: {self.base_path}")
        self.strict = settings.STRICT_CONTENT if strict is None else strict
        # kind -> (mtime, records)
        self._cache = {}

    def _load_rows(self, kind):
        """Read raw rows for a collection. Missing file → None."""
        path = self.base_path / COLLECTION_FILES[kind]
        if not path.exists():
            return None

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)  # raises YAMLError with details

        if data is None:
            return []
        if isinstance(data, dict) and 'items' in data:
            data = data['items']
        if not isinstance(data, list):
            raise ValueError(f"Unexpected YAML structure in {path.name}: expected a list or a mapping with 'items'")
        return data

    def _records(self, kind):
        path = self.base_path / COLLECTION_FILES[kind]
        mtime = os.path.getmtime(path) if path.exists() else None

        cached = self._cache.get(kind)
        if cached and cached[0] == mtime:
            return cached[1]
        if cached:
            print(f"[Auto-reload] {COLLECTION_FILES[kind]} changed, reloading...")

        rows = self._load_rows(kind)
        if rows is None:
            records = list(GAMES_SEED) if kind == "game" else []
        else:
            records = ingest_rows(kind, rows, strict=self.strict)
        self._cache[kind] = (mtime, records)
        return records

    def raw_collections(self):
        """Yield (kind, rows) for every collection file present."""
        for kind in COLLECTION_FILES:
            rows = self._load_rows(kind)
            if rows is not None:
                yield kind, rows

    # Coloring

    def get_coloring_list(self):
        return list(self._records("coloring"))

    def get_coloring_by_slug(self, slug):
        for item in self._records("coloring"):
            if item.slug == slug:
                return item
        return None

    # Puzzles

    def get_puzzle_list(self):
        return list(self._records("puzzle"))

    def get_puzzle_by_id(self, puzzle_id):
        for image in self._records("puzzle"):
            if image.id == str(puzzle_id):
                return image
        return None

    # Pass-through collections

    def get_audio_stories(self):
        return list(self._records("audio_story"))

    def get_audio_story_by_slug(self, slug):
        for story in self._records("audio_story"):
            if story.slug == slug:
                return story
        return None

    def get_books(self):
        return list(self._records("book"))

    def get_book_by_slug(self, slug):
        for book in self._records("book"):
            if book.slug == slug:
                return book
        return None

    def get_games(self):
        return list(self._records("game"))
