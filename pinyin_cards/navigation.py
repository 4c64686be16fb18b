from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional, Sequence

from pinyin_cards.pinyin_data import PinyinItem

logger = logging.getLogger(__name__)


class View(Enum):
    HOME = "home"
    GRID = "grid"
    DETAIL = "detail"


@dataclass(frozen=True)
class NavigationState:
    """Where the learner is.

    Owns:
    - the current category and its items (captured when the category is chosen)
    - current index into those items
    - the single active view

    Transitions below return a new state; the controller remains responsible
    for rendering.
    """

    category: Optional[str] = None
    index: int = 0
    items: tuple[PinyinItem, ...] = ()
    view: View = View.HOME

    def current_item(self) -> Optional[PinyinItem]:
        if not self.items:
            return None
        return self.items[self.index]


def select_category(state: NavigationState,
                    table: Mapping[str, Sequence[PinyinItem]],
                    category: str) -> NavigationState:
    """Bind `category`'s items, reset the index and show the grid.

    Raises KeyError for an unknown category.
    """
    items = tuple(table[category])
    logger.debug("Category set to %s -> %d items", category, len(items))
    return replace(state, category=category, items=items, index=0, view=View.GRID)


def select_index(state: NavigationState, index: int) -> NavigationState:
    """Open the card at `index` (IndexError when it is not in the list)."""
    index = int(index)
    if not 0 <= index < len(state.items):
        raise IndexError("card index {} out of range for {} items".format(index, len(state.items)))
    return replace(state, index=index, view=View.DETAIL)


def step(state: NavigationState, delta: int) -> NavigationState:
    """Move by `delta` with wraparound at both ends; no-op on an empty list."""
    if not state.items:
        return state
    return replace(state, index=(state.index + int(delta)) % len(state.items))


def switch_view(state: NavigationState, view: View) -> NavigationState:
    return replace(state, view=view)
