# File: monthgrid/core/collection.py
"""
Ordered, id-keyed store for schedules and view models.
"""

from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional

Predicate = Callable[[Any], bool]


def _default_item_id(item) -> Hashable:
    return item.cid()


class Collection:
    """
    Insertion-ordered mapping of id -> item with filter/sort helpers.

    Adding an item whose id is already present replaces it in place.
    """

    def __init__(self, get_item_id: Callable[[Any], Hashable] = _default_item_id):
        self.get_item_id = get_item_id
        self.items: Dict[Hashable, Any] = {}

    # ---------- filter combinators ----------

    @staticmethod
    def and_(*filters: Predicate) -> Predicate:
        """Predicate that passes only when every filter passes."""
        def combined(item) -> bool:
            return all(f(item) for f in filters)
        return combined

    @staticmethod
    def or_(*filters: Predicate) -> Predicate:
        """Predicate that passes when any filter passes."""
        def combined(item) -> bool:
            return any(f(item) for f in filters)
        return combined

    # ---------- mutation ----------

    def add(self, *items) -> None:
        for item in items:
            self.items[self.get_item_id(item)] = item

    def remove(self, *items_or_ids) -> List[Any]:
        """Remove items (or ids); returns the removed items."""
        removed = []
        for value in items_or_ids:
            key = value if self._is_id(value) else self.get_item_id(value)
            if key in self.items:
                removed.append(self.items.pop(key))
        return removed

    def clear(self) -> None:
        self.items = {}

    def _is_id(self, value) -> bool:
        return isinstance(value, (int, str))

    # ---------- lookup ----------

    def has(self, item_or_id) -> bool:
        key = item_or_id if self._is_id(item_or_id) else self.get_item_id(item_or_id)
        return key in self.items

    def get(self, item_id: Hashable, default: Any = None) -> Any:
        return self.items.get(item_id, default)

    def do_when_has(self, item_id: Hashable, fn: Callable[[Any], Any]) -> None:
        """Call fn with the stored item only when item_id is present."""
        item = self.items.get(item_id)
        if item is None:
            return
        fn(item)

    def single(self) -> Optional[Any]:
        """First item in insertion order, or None."""
        for item in self.items.values():
            return item
        return None

    # ---------- querying ----------

    def find(self, predicate: Predicate) -> 'Collection':
        """New collection with the matching items, same id function."""
        result = Collection(self.get_item_id)
        for key, item in self.items.items():
            if predicate(item):
                result.items[key] = item
        return result

    def sort(self, key: Optional[Callable[[Any], Any]] = None, reverse: bool = False) -> List[Any]:
        return sorted(self.items.values(), key=key, reverse=reverse)

    def each(self, fn: Callable[[Any], Any]) -> None:
        for item in list(self.items.values()):
            fn(item)

    def group_by(self, key_fn: Callable[[Any], Hashable]) -> Dict[Hashable, 'Collection']:
        groups: Dict[Hashable, Collection] = {}
        for item in self.items.values():
            group = groups.setdefault(key_fn(item), Collection(self.get_item_id))
            group.add(item)
        return groups

    def to_list(self) -> List[Any]:
        return list(self.items.values())

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self.items.values()))

    def __contains__(self, item_or_id) -> bool:
        return self.has(item_or_id)

    def __repr__(self) -> str:
        return f"Collection({len(self.items)} items)"
