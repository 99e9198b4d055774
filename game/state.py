"""The game's state aggregate: everything the renderer may look at."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from game.config import with_defaults
from story.acts import MAX_ACT, ActProgression
from story.collectibles import CollectibleGate
from story.dialogue import ChoiceLine, DialogueEngine
from story.flags import StoryFlagStore
from story.phases import ScenePhase
from story.triggers import Position

# ── Entities ────────────────────────────────────────────────────


@dataclass
class PlayerState:
    position: Position
    facing: str = "right"  # "left" | "right"
    is_moving: bool = False


@dataclass
class NPCState:
    position: Position
    visible: bool = True


@dataclass
class FurnitureState:
    position: Position
    is_open: bool = False


def _position(data: dict[str, Any]) -> Position:
    return Position(x=data.get("x", 0), y=data.get("y", 0))


# ── Aggregate ───────────────────────────────────────────────────


@dataclass
class GameState:
    """One play session. Mutated in place by ReunionGame and SceneStateMachine only."""

    player: PlayerState
    npcs: dict[str, NPCState] = field(default_factory=dict)
    furniture: dict[str, FurnitureState] = field(default_factory=dict)
    flags: StoryFlagStore = field(default_factory=StoryFlagStore)
    collectibles: CollectibleGate = field(default_factory=CollectibleGate)
    dialogue: DialogueEngine = field(default_factory=DialogueEngine)
    acts: ActProgression = field(default_factory=ActProgression)
    phase: ScenePhase = ScenePhase.OPENING
    game_started: bool = False
    last_choice: str | None = None

    @classmethod
    def initial(cls, config: dict | None = None) -> GameState:
        """Fresh state for a new session, laid out from ``config``."""
        cfg = with_defaults(config)
        player_cfg = cfg["player"]
        return cls(
            player=PlayerState(position=_position(player_cfg), facing=player_cfg.get("facing", "right")),
            npcs={
                name: NPCState(position=_position(data), visible=bool(data.get("visible", True)))
                for name, data in cfg["npcs"].items()
            },
            furniture={name: FurnitureState(position=_position(data)) for name, data in cfg["furniture"].items()},
            acts=ActProgression(max_act=cfg["acts"].get("max_act", MAX_ACT)),
        )

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view for renderers and comparisons."""
        line = self.dialogue.current()
        current_line = None
        if line is not None:
            current_line = {
                "speaker": line.speaker,
                "text": line.text,
                "emotion": line.emotion,
                "is_action": line.is_action,
                "is_narration": line.is_narration,
                "choices": [
                    {"id": choice.id, "text": choice.text}
                    for choice in (line.choices if isinstance(line, ChoiceLine) else ())
                ],
            }
        return {
            "act": self.acts.act,
            "phase": self.phase.value,
            "game_started": self.game_started,
            "last_choice": self.last_choice,
            "flags": self.flags.snapshot(),
            "collectibles": self.collectibles.snapshot(),
            "dialogue": {
                "active": self.dialogue.active,
                "cursor": self.dialogue.cursor,
                "length": len(self.dialogue.queue),
                "line": current_line,
            },
            "player": {
                "x": self.player.position.x,
                "y": self.player.position.y,
                "facing": self.player.facing,
                "is_moving": self.player.is_moving,
            },
            "npcs": {
                name: {"x": npc.position.x, "y": npc.position.y, "visible": npc.visible}
                for name, npc in self.npcs.items()
            },
            "furniture": {
                name: {"x": item.position.x, "y": item.position.y, "is_open": item.is_open}
                for name, item in self.furniture.items()
            },
        }
