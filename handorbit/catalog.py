"""
Ordered catalog of controllable objects.
"""
from dataclasses import dataclass
from typing import List, Sequence

from .config import CatalogConfig


@dataclass(frozen=True)
class CatalogItem:
    """One controllable object. Shapes and assets belong to the renderer."""
    name: str
    color: str = "#FFFFFF"


class Catalog:
    """Fixed-length ordered list of items with wraparound navigation."""

    def __init__(self, items: Sequence[CatalogItem]):
        if not items:
            raise ValueError("Catalog needs at least one item")
        self._items: List[CatalogItem] = list(items)

    @classmethod
    def from_config(cls, cfg: CatalogConfig) -> "Catalog":
        return cls([CatalogItem(name=item.name, color=item.color) for item in cfg.items])

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> CatalogItem:
        return self._items[index % len(self._items)]

    def next_index(self, index: int) -> int:
        return (index + 1) % len(self._items)

    def previous_index(self, index: int) -> int:
        return (index - 1) % len(self._items)

    def name_at(self, index: int) -> str:
        return self[index].name

    def index_of(self, name: str) -> int:
        """Position of the item with the given name (case-insensitive)."""
        for i, item in enumerate(self._items):
            if item.name.lower() == name.lower():
                return i
        raise KeyError(f"No catalog item named {name!r}")
