"""Act-level progression."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

ACT_TITLES = {
    1: "The Land of Love",
    2: "The Void",
    3: "The Reunion",
}
MAX_ACT = 3


class ActProgression:
    """Current act index with a single forward transition."""

    def __init__(self, act: int = 1, max_act: int = MAX_ACT):
        self.max_act = max_act
        self.act = self._clamp(act)

    def advance(self) -> int:
        """Move to the next act, staying on the last one once reached."""
        previous = self.act
        self.act = self._clamp(self.act + 1)
        if self.act != previous:
            logger.info("Act %d -> Act %d: %s", previous, self.act, ACT_TITLES.get(self.act, ""))
        return self.act

    def jump_to(self, act: int) -> int:
        self.act = self._clamp(act)
        return self.act

    @property
    def title(self) -> str:
        return ACT_TITLES.get(self.act, "")

    def _clamp(self, act: int) -> int:
        return max(1, min(act, self.max_act))
