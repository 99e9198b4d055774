"""Inventory items that gate the bedroom door."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

TOOTH_EARRINGS = "toothEarrings"
POLAROID = "polaroid"
GHOST_PLUSH = "ghostPlush"

ACT1_COLLECTIBLES = (TOOTH_EARRINGS, POLAROID, GHOST_PLUSH)


class CollectibleGate:
    """Named collected/not-collected items plus the "all collected" predicate."""

    def __init__(self, names: Iterable[str] = ACT1_COLLECTIBLES, collected: Mapping[str, bool] | None = None):
        self._items: dict[str, bool] = {name: False for name in names}
        if collected:
            self._items.update({name: bool(value) for name, value in collected.items()})

    def set(self, name: str, value: bool = True) -> None:
        self._items[name] = bool(value)

    def get(self, name: str) -> bool:
        return self._items.get(name, False)

    def all(self, names: Iterable[str]) -> bool:
        return all(self.get(name) for name in names)

    def all_collected(self) -> bool:
        return all(self._items.values())

    def missing(self) -> list[str]:
        return [name for name, collected in self._items.items() if not collected]

    def snapshot(self) -> dict[str, bool]:
        return dict(self._items)

    def __repr__(self) -> str:
        return f"CollectibleGate(missing={self.missing()})"
