"""
Category Index
==============

Groups a flat list of content items into category → subcategory buckets.

Ordering follows first appearance in the source list (not alphabetical),
so the newest-first order from the store is kept inside every bucket.
Items with no subcategory land in the GENERAL_SUBCATEGORY bucket rather
than being dropped, so every item appears in exactly one bucket.
"""

GENERAL_SUBCATEGORY = "General"


def subcategory_label(item):
    """Bucket label for an item's subcategory."""
    label = getattr(item, "subcategory", None)
    if label is None or not label.strip():
        return GENERAL_SUBCATEGORY
    return label


def build_category_index(items):
    """
    Build a {category: {subcategory: [items]}} index.

    Pure function; dicts preserve insertion order. Keys are the exact
    (case-sensitive) labels from the items.
    """
    index = {}
    for item in items:
        buckets = index.setdefault(item.category, {})
        buckets.setdefault(subcategory_label(item), []).append(item)
    return index


def flatten_index(index):
    """All items of an index in category, subcategory, item order."""
    return [item for buckets in index.values() for bucket in buckets.values() for item in bucket]


def category_items(index, category):
    """All items of one category across its subcategories. Unknown → []."""
    return [item for bucket in index.get(category, {}).values() for item in bucket]


def index_to_list(index):
    """JSON-friendly ordered form of an index."""
    return [
        {
            "name": category,
            "subcategories": [
                {"name": sub, "items": [item.to_dict() for item in bucket]}
                for sub, bucket in buckets.items()
            ],
        }
        for category, buckets in index.items()
    ]
