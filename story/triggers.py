"""Proximity triggers between the player and the room's characters."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .flags import HAS_TALKED_TO_BAT, HAS_TALKED_TO_DELICE, StoryFlagStore

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 60


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Watch:
    """An entity that fires once, until ``handled_flag`` becomes true."""

    entity_id: str
    handled_flag: str
    threshold: float = DEFAULT_THRESHOLD


DEFAULT_WATCHES = (
    Watch("bat", HAS_TALKED_TO_BAT),
    Watch("delice", HAS_TALKED_TO_DELICE),
)


def check_proximity(a: Position, b: Position, threshold: float) -> bool:
    """Box test: both axis distances strictly below ``threshold``."""
    return abs(a.x - b.x) < threshold and abs(a.y - b.y) < threshold


class TriggerDetector:
    """Decide which entities the player has just walked into."""

    def __init__(self, watches: tuple[Watch, ...] = DEFAULT_WATCHES):
        self._watches = {watch.entity_id: watch for watch in watches}

    @classmethod
    def from_config(cls, config: dict | None = None) -> TriggerDetector:
        cfg = (config or {}).get("triggers", {})
        watches = []
        for watch in DEFAULT_WATCHES:
            override = cfg.get(watch.entity_id, {})
            watches.append(
                Watch(
                    entity_id=watch.entity_id,
                    handled_flag=override.get("handled_flag", watch.handled_flag),
                    threshold=override.get("threshold", cfg.get("threshold", watch.threshold)),
                )
            )
        return cls(tuple(watches))

    def armed(self, entity_id: str, entities: Mapping[str, Any], flags: StoryFlagStore) -> bool:
        """Whether ``entity_id`` may still fire: watched, visible and not yet handled."""
        watch = self._watches.get(entity_id)
        if watch is None:
            return False
        entity = entities.get(entity_id)
        if entity is None or not entity.visible:
            return False
        return not flags.get(watch.handled_flag)

    def evaluate(
        self,
        player: Position,
        entities: Mapping[str, Any],
        flags: StoryFlagStore,
        dialogue_active: bool,
    ) -> list[str]:
        """Entity ids whose proximity trigger fires for this movement tick.

        ``entities`` maps ids to objects with ``visible`` and ``position``.
        Nothing fires while a dialogue is showing.
        """
        if dialogue_active:
            return []
        fired = []
        for entity_id, watch in self._watches.items():
            if not self.armed(entity_id, entities, flags):
                continue
            if check_proximity(player, entities[entity_id].position, watch.threshold):
                logger.debug("Proximity trigger: %s", entity_id)
                fired.append(entity_id)
        return fired
