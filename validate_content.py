#!/usr/bin/env python3
"""
Content Record Validator
========================

Hard checks on content rows before they reach the interactive core.
Both content stores pass every fetched row through ingest_rows(), so a
record with no image URL or no slug is rejected at the boundary instead of
breaking a page later. Run standalone to validate a YAML content directory.

Checks fall into three categories:
  1. Structural — required fields present and non-empty
  2. Format     — URLs resolvable, slugs URL-safe, grid sizes supported
  3. Cosmetic   — missing thumbnails, odd page numbering (warnings only)

Usage:
    python3 validate_content.py                 # validate CONTENT_DIR
    python3 validate_content.py path/to/content
"""

import re
import sys

from content_models import (
    GAME_TYPES,
    SUPPORTED_GRID_SIZES,
    AudioStory,
    Book,
    BookPage,
    ColoringItem,
    GameMeta,
    MalformedRecord,
    PuzzleImage,
)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:[-_/][a-z0-9]+)*$')
URL_PATTERN = re.compile(r'^(https?://\S+|/\S*)$')
COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')

# Free-text fields: any non-blank value must already be a string
TEXT_FIELDS = ("title", "slug", "category", "subcategory", "label", "description")

# kind -> (required fields, url fields)
RECORD_KINDS = {
    "coloring": (("id", "title", "slug", "category", "image_url"), ("image_url", "thumbnail_url")),
    "puzzle": (("id", "source_url", "label"), ("source_url", "thumbnail_url")),
    "audio_story": (("id", "title", "slug", "audio_url"), ("audio_url",)),
    "book": (("id", "title", "slug"), ()),
    "game": (("id", "title", "slug", "description", "type"), ()),
}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def validate_record(kind, row):
    """
    Validate a single content row (already mapped to record field names).

    Returns:
        (errors, warnings) — two lists of strings.
        errors = fatal issues (row is rejected)
        warnings = informational issues (row is kept)
    """
    if kind not in RECORD_KINDS:
        raise ValueError(f"Unknown record kind '{kind}'. Expected one of {sorted(RECORD_KINDS)}")

    errors = []
    warnings = []

    if not isinstance(row, dict):
        return [f"Row must be a mapping, got {type(row).__name__}"], warnings

    required, url_fields = RECORD_KINDS[kind]

    # --- 1. Required fields ---
    for name in required:
        if _is_blank(row.get(name)):
            errors.append(f"Missing required field: '{name}'")

    for name in TEXT_FIELDS:
        value = row.get(name)
        if not _is_blank(value) and not isinstance(value, str):
            errors.append(f"'{name}' must be text, got {type(value).__name__} {value!r}")

    # --- 2. URLs ---
    for name in url_fields:
        value = row.get(name)
        if _is_blank(value):
            continue
        if not isinstance(value, str) or not URL_PATTERN.match(value):
            errors.append(f"'{name}' is not a resolvable URL: {value!r}")

    # --- 3. Slug ---
    slug = row.get("slug")
    if not _is_blank(slug) and not SLUG_PATTERN.match(str(slug)):
        errors.append(f"Slug must be lowercase letters, digits and dashes: {slug!r}")

    # --- 4. Kind-specific checks ---
    if kind in ("coloring", "puzzle") and _is_blank(row.get("thumbnail_url")):
        warnings.append("No thumbnail_url — cards will fall back to the full image")

    if kind == "puzzle":
        grid_size = row.get("grid_size", SUPPORTED_GRID_SIZES[0])
        if type(grid_size) is not int or grid_size not in SUPPORTED_GRID_SIZES:
            errors.append(f"grid_size must be one of {SUPPORTED_GRID_SIZES}, got {grid_size!r}")
        for name in ("width", "height"):
            value = row.get(name)
            if value is not None and (type(value) is not int or value <= 0):
                errors.append(f"'{name}' must be a positive integer, got {value!r}")

    if kind == "game" and row.get("type") not in GAME_TYPES:
        errors.append(f"Game type must be one of {sorted(GAME_TYPES)}, got {row.get('type')!r}")

    if kind == "book":
        color = row.get("cover_color")
        if not _is_blank(color) and not COLOR_PATTERN.match(str(color)):
            warnings.append(f"cover_color is not a hex colour: {color!r}")
        pages = row.get("pages") or []
        if not isinstance(pages, (list, tuple)):
            errors.append("'pages' must be a list")
        else:
            numbers = []
            for i, page in enumerate(pages):
                if not isinstance(page, dict) or "number" not in page or "content" not in page:
                    errors.append(f"Page {i}: needs 'number' and 'content'")
                    continue
                numbers.append(page["number"])
            if numbers and numbers != list(range(1, len(numbers) + 1)):
                warnings.append(f"Page numbers are not 1..{len(numbers)}: {numbers}")

    return errors, warnings


def to_record(kind, row):
    """Build the typed record for an already-validated row."""
    if kind == "coloring":
        return ColoringItem(
            id=str(row["id"]),
            title=row["title"],
            slug=row["slug"],
            category=row["category"],
            subcategory=(row.get("subcategory") or "").strip(),
            image_url=row["image_url"],
            thumbnail_url=row.get("thumbnail_url") or None,
        )
    if kind == "puzzle":
        return PuzzleImage(
            id=str(row["id"]),
            source_url=row["source_url"],
            label=row["label"],
            grid_size=row.get("grid_size", SUPPORTED_GRID_SIZES[0]),
            slug=row.get("slug") or None,
            thumbnail_url=row.get("thumbnail_url") or None,
            category=row.get("category") or "",
            subcategory=(row.get("subcategory") or "").strip(),
            width=row.get("width"),
            height=row.get("height"),
        )
    if kind == "audio_story":
        return AudioStory(
            id=str(row["id"]),
            title=row["title"],
            slug=row["slug"],
            audio_url=row["audio_url"],
            description=row.get("description") or "",
            duration=str(row.get("duration") or ""),
        )
    if kind == "book":
        pages = tuple(BookPage(number=p["number"], content=p["content"]) for p in row.get("pages") or [])
        return Book(
            id=str(row["id"]),
            title=row["title"],
            slug=row["slug"],
            description=row.get("description") or "",
            cover_color=row.get("cover_color") or "#ffffff",
            pages=pages,
        )
    if kind == "game":
        return GameMeta(
            id=str(row["id"]),
            title=row["title"],
            slug=row["slug"],
            description=row["description"],
            type=row["type"],
        )
    raise ValueError(f"Unknown record kind '{kind}'")


def ingest_rows(kind, rows, strict=False):
    """
    Validate and convert a batch of rows.

    Malformed rows raise MalformedRecord when strict, otherwise they are
    skipped with a printed warning. Warnings never block a row.
    """
    records = []
    for row in rows:
        record_id = row.get("id", "?") if isinstance(row, dict) else "?"
        errors, warnings = validate_record(kind, row)
        for warn in warnings:
            print(f"  ⚠ {kind} {record_id}: {warn}")
        if errors:
            if strict:
                raise MalformedRecord(kind, record_id, errors)
            print(f"[Content] Skipping malformed {kind} {record_id}: {'; '.join(errors)}")
            continue
        records.append(to_record(kind, row))
    return records


# ---------------------------------------------------------------------------
# Standalone runner
# ---------------------------------------------------------------------------

def validate_all(content_dir=None):
    """Validate every row in a YAML content directory. Returns (total, passed, failed)."""
    from content_store import ContentStore
    import settings

    store = ContentStore(content_dir or settings.CONTENT_DIR)

    total = 0
    passed = 0
    failed = 0

    for kind, rows in store.raw_collections():
        for row in rows:
            total += 1
            record_id = row.get("id", "?") if isinstance(row, dict) else "?"
            errors, warnings_list = validate_record(kind, row)
            if errors:
                failed += 1
                print(f"\n✗ {kind} {record_id}")
                for err in errors:
                    print(f"  ERROR: {err}")
                for warn in warnings_list:
                    print(f"  WARNING: {warn}")
            elif warnings_list:
                passed += 1
                print(f"\n⚠ {kind} {record_id}")
                for warn in warnings_list:
                    print(f"  WARNING: {warn}")
            else:
                passed += 1
                print(f"✓ {kind} {record_id}")

    print(f"\n{'='*40}")
    print(f"Total: {total}  Passed: {passed}  Failed: {failed}")

    return total, passed, failed


if __name__ == "__main__":
    directory = sys.argv[1] if len(sys.argv) > 1 else None
    total, passed, failed = validate_all(directory)
    sys.exit(1 if failed > 0 else 0)
