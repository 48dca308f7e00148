"""
Coloring Browser
================

Selection state for the coloring page browser. One ColoringBrowser per
open view; the browser owns its index and selection and never shares them.

States:
    NO_CATEGORY_SELECTED  --select_category-->     CATEGORY_SELECTED
    CATEGORY_SELECTED     --select_subcategory-->  SUBCATEGORY_SELECTED
    any                   --clear_selection-->     NO_CATEGORY_SELECTED

Views re-render by subscribing to selection changes or by pulling
visible_items() after each action.
"""

from dataclasses import dataclass
from typing import Optional

import settings
from category_index import build_category_index, category_items, flatten_index
from outcomes import EMPTY_SOURCE, INVALID_TRANSITION, NOT_FOUND, failure, success

NO_CATEGORY_SELECTED = "no_category_selected"
CATEGORY_SELECTED = "category_selected"
SUBCATEGORY_SELECTED = "subcategory_selected"

SIMILAR_ITEMS_LIMIT = 12


@dataclass(frozen=True)
class BrowserSelection:
    selected_category: Optional[str] = None
    selected_subcategory: Optional[str] = None

    @property
    def state(self):
        if self.selected_category is None:
            return NO_CATEGORY_SELECTED
        if self.selected_subcategory is None:
            return CATEGORY_SELECTED
        return SUBCATEGORY_SELECTED


class ColoringBrowser:
    def __init__(self, items=(), show_all_when_unselected=None):
        if show_all_when_unselected is None:
            show_all_when_unselected = settings.BROWSER_SHOW_ALL_WHEN_UNSELECTED
        self.show_all_when_unselected = show_all_when_unselected
        self._subscribers = []
        self._items = list(items)
        self.index = build_category_index(self._items)
        self.selection = BrowserSelection()

    @property
    def state(self):
        return self.selection.state

    @property
    def is_empty(self):
        return not self._items

    def categories(self):
        return list(self.index)

    def subcategories(self, category=None):
        category = category if category is not None else self.selection.selected_category
        return list(self.index.get(category, {}))

    def subscribe(self, callback):
        """Register callback(selection) for state changes. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_selection(self, selection):
        if selection == self.selection:
            return
        self.selection = selection
        for callback in list(self._subscribers):
            callback(selection)

    def replace_items(self, items):
        """Swap in a new item list. The index is rebuilt and the selection reset."""
        self._items = list(items)
        self.index = build_category_index(self._items)
        self._set_selection(BrowserSelection())

    def select_category(self, name):
        if not category_items(self.index, name):
            return failure(NOT_FOUND, f"No items in category '{name}'")
        self._set_selection(BrowserSelection(selected_category=name))
        return success(self.selection)

    def select_subcategory(self, name):
        category = self.selection.selected_category
        if category is None:
            return failure(INVALID_TRANSITION, "Select a category before a subcategory")
        if name not in self.index.get(category, {}):
            return failure(NOT_FOUND, f"No subcategory '{name}' in category '{category}'")
        self._set_selection(BrowserSelection(selected_category=category, selected_subcategory=name))
        return success(self.selection)

    def clear_selection(self):
        self._set_selection(BrowserSelection())
        return success(self.selection)

    def visible_items(self):
        selection = self.selection
        if selection.state == NO_CATEGORY_SELECTED:
            return flatten_index(self.index) if self.show_all_when_unselected else []
        if selection.state == CATEGORY_SELECTED:
            return category_items(self.index, selection.selected_category)
        return list(self.index[selection.selected_category][selection.selected_subcategory])

    def empty_state(self):
        """Outcome the view renders when there is nothing to browse, else None."""
        if self.is_empty:
            return failure(EMPTY_SOURCE, "No coloring pages yet")
        return None

    def to_dict(self):
        return {
            "state": self.state,
            "selectedCategory": self.selection.selected_category,
            "selectedSubcategory": self.selection.selected_subcategory,
            "categories": self.categories(),
            "subcategories": self.subcategories() if self.selection.selected_category else [],
            "items": [item.to_dict() for item in self.visible_items()],
            "empty": self.is_empty,
        }


def similar_items(items, current, limit=SIMILAR_ITEMS_LIMIT):
    """Other items from the current item's category, in source order."""
    return [
        item for item in items
        if item.category == current.category and item.id != current.id
    ][:limit]
