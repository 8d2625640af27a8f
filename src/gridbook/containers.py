from typing import Iterator, Union


class ItemsList:
    """An ordered list of named items, indexable by position or by name."""

    def __init__(self, items=None, item_name: str = "item"):
        self._item_name = item_name
        self._items = list(items) if items is not None else []

    def __getitem__(self, key: Union[int, str]):
        if isinstance(key, int) and not isinstance(key, bool):
            if key < 0:
                key += len(self._items)
            if key < 0 or key >= len(self._items):
                raise IndexError(f"index {key} out of range")
            return self._items[key]
        elif isinstance(key, str):
            for item in self._items:
                if item.name == key:
                    return item
            for item in self._items:
                if item.name.lower() == key.lower():
                    return item
            raise KeyError(f"no {self._item_name} named '{key}'")
        else:
            t = type(key).__name__
            raise LookupError(f"invalid index type {t}")

    def __iter__(self) -> Iterator:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key):
        if isinstance(key, str):
            return key.lower() in [x.name.lower() for x in self._items]
        return key in self._items

    def append(self, item):
        self._items.append(item)

    def remove(self, item):
        self._items.remove(item)

    def index(self, item) -> int:
        return self._items.index(item)

    def names(self):
        return [x.name for x in self._items]
