"""Named boolean story flags."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

# Act 1
HAS_WOKEN_UP = "hasWokenUp"
HAS_TALKED_TO_BAT = "hasTalkedToBat"
HAS_MET_DELICE = "hasMetDelice"
HAS_TALKED_TO_DELICE = "hasTalkedToDelice"
IS_DOOR_UNLOCKED = "isDoorUnlocked"

# Act 2
HAS_ENTERED_VOID = "hasEnteredVoid"
HAS_HIT_DISTANCE = "hasHitDistance"
PUZZLE_STARTED = "puzzleStarted"
PUZZLE_SOLVED = "puzzleSolved"

# Act 3
HAS_REACHED_BEACH = "hasReachedBeach"
HAS_APPROACHED_NIENIE = "hasApproachedNienie"
HAS_WOKEN_NIENIE = "hasWokenNienie"
REUNION_COMPLETE = "reunionComplete"
GIFT_CLAIMED = "giftClaimed"

ACT_FLAGS: dict[int, tuple[str, ...]] = {
    1: (HAS_WOKEN_UP, HAS_TALKED_TO_BAT, HAS_MET_DELICE, HAS_TALKED_TO_DELICE, IS_DOOR_UNLOCKED),
    2: (HAS_ENTERED_VOID, HAS_HIT_DISTANCE, PUZZLE_STARTED, PUZZLE_SOLVED),
    3: (HAS_REACHED_BEACH, HAS_APPROACHED_NIENIE, HAS_WOKEN_NIENIE, REUNION_COMPLETE, GIFT_CLAIMED),
}


def default_flags() -> dict[str, bool]:
    """Every flag of every act, all unset."""
    return {name: False for names in ACT_FLAGS.values() for name in names}


def flags_completed_before(act: int) -> dict[str, bool]:
    """Flags a player has necessarily set by the time they reach ``act``."""
    return {
        name: True
        for number, names in ACT_FLAGS.items()
        if number < act
        for name in names
    }


class StoryFlagStore:
    """Key -> bool map of story progress.

    Unknown names are not validated; reading one returns False.
    """

    def __init__(self, initial: Mapping[str, bool] | None = None):
        self._flags: dict[str, bool] = dict(default_flags() if initial is None else initial)

    def set(self, name: str, value: bool = True) -> None:
        self._flags[name] = bool(value)

    def get(self, name: str) -> bool:
        return self._flags.get(name, False)

    def all(self, names: Iterable[str]) -> bool:
        return all(self.get(name) for name in names)

    def update(self, values: Mapping[str, bool]) -> None:
        """Set several flags at once."""
        for name, value in values.items():
            self.set(name, value)

    def replace(self, values: Mapping[str, bool]) -> None:
        self._flags = dict(values)

    def snapshot(self) -> dict[str, bool]:
        return dict(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def __repr__(self) -> str:
        raised = sorted(name for name, value in self._flags.items() if value)
        return f"StoryFlagStore(set={raised})"
