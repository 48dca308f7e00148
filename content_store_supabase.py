#!/usr/bin/env python3
"""
Content Storage Manager - Supabase Backend
==========================================

Reads kids' content (coloring pages, jigsaw puzzles, audio stories, books)
from Supabase PostgreSQL and public storage buckets. Maintains the same
API as the YAML-backed ContentStore.

Tables:
    items              - coloring pages and puzzle images (type column)
    item_i18n          - per-locale titles for items
    categories         - top-level groupings (+ category_i18n)
    subcategories      - second-level groupings (+ subcategory_i18n)
    audio_stories      - audio story listing
    books              - picture books with inline pages

Storage buckets:
    coloring, puzzles  - public buckets holding source images and thumbnails
"""

from typing import Dict, List, Optional

from supabase import Client, create_client

import settings
from content_models import GAMES_SEED, AudioStory, Book, ColoringItem, PuzzleImage
from puzzle_constants import default_grid_size
from validate_content import ingest_rows

ITEM_COLUMNS = (
    'id, type, category_id, subcategory_id, slug, source_path, thumb_path, '
    'width, height, created_at, item_i18n(locale, title, short_title, description)'
)

# Content type -> storage bucket
BUCKETS = {
    'coloring': 'coloring',
    'puzzles': 'puzzles',
}


class ContentStoreSupabase:
    """Supabase-backed content storage with same API as file-based ContentStore."""

    def __init__(self, client: Optional[Client] = None, locale: str = None, strict: bool = None):
        if client is None:
            url = settings.SUPABASE_URL
            key = settings.SUPABASE_ANON_KEY
            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment")
            client = create_client(url, key)

        self.client = client
        self.locale = locale or settings.DEFAULT_LOCALE
        self.strict = settings.STRICT_CONTENT if strict is None else strict

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pick_translation(self, translations: List[Dict]) -> Optional[Dict]:
        """Prefer the store locale, fall back to English."""
        by_locale = {t.get('locale'): t for t in translations or []}
        return by_locale.get(self.locale) or by_locale.get(settings.FALLBACK_LOCALE)

    def _public_url(self, bucket: str, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        return self.client.storage.from_(bucket).get_public_url(path)

    def _titles(self, table: str, i18n_table: str) -> Dict[str, str]:
        """Map category/subcategory id → translated title."""
        result = self.client.table(table).select(
            f'id, {i18n_table}(locale, title)'
        ).eq('is_visible', True).execute()

        titles = {}
        for row in result.data or []:
            translation = self._pick_translation(row.get(i18n_table))
            if translation:
                titles[str(row['id'])] = translation['title']
        return titles

    def _item_rows(self, content_type: str, **filters) -> List[Dict]:
        query = self.client.table('items').select(ITEM_COLUMNS).eq(
            'type', content_type
        ).eq('status', 'published').eq('is_visible', True)

        for column, value in filters.items():
            query = query.eq(column, value)

        result = query.order('created_at', desc=True).execute()
        return result.data or []

    def _map_item(self, row: Dict, content_type: str, categories: Dict[str, str],
                  subcategories: Dict[str, str]) -> Optional[Dict]:
        """Map an items row to record fields. Returns None if no usable translation."""
        translation = self._pick_translation(row.get('item_i18n'))
        if not translation:
            print(f"[Content] Skipping {content_type} item {row.get('id')}: no '{self.locale}' or "
                  f"'{settings.FALLBACK_LOCALE}' translation")
            return None

        bucket = BUCKETS[content_type]
        category = categories.get(str(row.get('category_id')), '')
        subcategory_id = row.get('subcategory_id')
        subcategory = subcategories.get(str(subcategory_id), '') if subcategory_id else ''
        source_url = self._public_url(bucket, row.get('source_path'))
        thumb_url = self._public_url(bucket, row.get('thumb_path'))

        if content_type == 'coloring':
            return {
                'id': str(row['id']),
                'title': translation.get('title'),
                'slug': row.get('slug'),
                'category': category,
                'subcategory': subcategory,
                'image_url': source_url,
                'thumbnail_url': thumb_url,
            }

        return {
            'id': str(row['id']),
            'source_url': source_url,
            'label': translation.get('short_title') or translation.get('title'),
            'grid_size': default_grid_size(),
            'slug': row.get('slug'),
            'thumbnail_url': thumb_url,
            'category': category,
            'subcategory': subcategory,
            'width': row.get('width'),
            'height': row.get('height'),
        }

    def _items(self, content_type: str, **filters) -> List[Dict]:
        rows = self._item_rows(content_type, **filters)
        if not rows:
            return []

        categories = self._titles('categories', 'category_i18n')
        subcategories = self._titles('subcategories', 'subcategory_i18n')

        mapped = []
        for row in rows:
            record = self._map_item(row, content_type, categories, subcategories)
            if record is not None:
                mapped.append(record)
        return mapped

    # ------------------------------------------------------------------
    # Coloring
    # ------------------------------------------------------------------

    def get_coloring_list(self) -> List[ColoringItem]:
        """All published coloring pages, newest first."""
        return ingest_rows('coloring', self._items('coloring'), strict=self.strict)

    def get_coloring_by_slug(self, slug: str) -> Optional[ColoringItem]:
        records = ingest_rows('coloring', self._items('coloring', slug=slug), strict=self.strict)
        return records[0] if records else None

    # ------------------------------------------------------------------
    # Puzzles
    # ------------------------------------------------------------------

    def get_puzzle_list(self) -> List[PuzzleImage]:
        """All published puzzle images, newest first."""
        return ingest_rows('puzzle', self._items('puzzles'), strict=self.strict)

    def get_puzzle_by_id(self, puzzle_id: str) -> Optional[PuzzleImage]:
        records = ingest_rows('puzzle', self._items('puzzles', id=str(puzzle_id)), strict=self.strict)
        return records[0] if records else None

    # ------------------------------------------------------------------
    # Pass-through listings
    # ------------------------------------------------------------------

    def _audio_rows(self, **filters) -> List[Dict]:
        query = self.client.table('audio_stories').select('*')
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.order('created_at', desc=True).execute()
        return [
            {
                'id': str(row['id']),
                'title': row.get('title'),
                'slug': row.get('slug'),
                'description': row.get('description'),
                'duration': row.get('duration'),
                'audio_url': row.get('audio_url'),
            }
            for row in result.data or []
        ]

    def get_audio_stories(self) -> List[AudioStory]:
        return ingest_rows('audio_story', self._audio_rows(), strict=self.strict)

    def get_audio_story_by_slug(self, slug: str) -> Optional[AudioStory]:
        records = ingest_rows('audio_story', self._audio_rows(slug=slug), strict=self.strict)
        return records[0] if records else None

    def _book_rows(self, **filters) -> List[Dict]:
        query = self.client.table('books').select('*')
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.order('created_at', desc=True).execute()
        return [
            {
                'id': str(row['id']),
                'title': row.get('title'),
                'slug': row.get('slug'),
                'description': row.get('description'),
                'cover_color': row.get('cover_color'),
                'pages': row.get('pages') or [],
            }
            for row in result.data or []
        ]

    def get_books(self) -> List[Book]:
        return ingest_rows('book', self._book_rows(), strict=self.strict)

    def get_book_by_slug(self, slug: str) -> Optional[Book]:
        records = ingest_rows('book', self._book_rows(slug=slug), strict=self.strict)
        return records[0] if records else None

    def get_games(self):
        """Games are a static seed list, not a table."""
        return list(GAMES_SEED)


def get_content_store():
    """Get the configured content store. Supabase unless CONTENT_BACKEND=file."""
    if settings.CONTENT_BACKEND == 'file':
        from content_store import ContentStore
        return ContentStore(settings.CONTENT_DIR)
    if settings.CONTENT_BACKEND != 'supabase':
        raise ValueError(f"Unknown CONTENT_BACKEND '{settings.CONTENT_BACKEND}'. Expected 'supabase' or 'file'")
    if not settings.SUPABASE_URL:
        raise ValueError("SUPABASE_URL not set in environment. Check .env file.")
    return ContentStoreSupabase()
