"""
Ordered gallery collection.
"""
from typing import Dict, Iterable, List, Optional

from .types import GalleryItem


class Gallery:
    """Externally supplied, ordered list of selectable items with stable ids."""

    def __init__(self, items: Iterable[GalleryItem] = ()):
        self.items: List[GalleryItem] = list(items)

    @classmethod
    def from_config(cls, entries: Iterable[Dict[str, str]]) -> "Gallery":
        """Build a gallery from the `gallery` list of the YAML config."""
        return cls(GalleryItem(id=str(e['id']), src=e['src'], title=e['title']) for e in entries)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> GalleryItem:
        return self.items[index]

    def index_of(self, item_id: Optional[str]) -> int:
        """Position of the item with this id, or -1."""
        if item_id is None:
            return -1
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        return -1

    def next_index(self, current: int) -> int:
        """Wrap-around successor; -1 (nothing known) goes to the first item."""
        return (current + 1) % len(self.items)

    def prev_index(self, current: int) -> int:
        """Wrap-around predecessor; -1 (nothing known) goes to the last item."""
        if current < 0:
            return len(self.items) - 1
        return (current - 1 + len(self.items)) % len(self.items)
