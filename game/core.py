"""Core orchestrator - the tick loop and action surface of the game.

Each tick: drain input intents -> move -> check triggers -> let the scene react.
Renderers read ``snapshot()``; nothing outside this module writes state.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from story.dialogue import DialogueLibrary, DialogueLine, Line
from story.flags import IS_DOOR_UNLOCKED
from story.phases import EventKind, SceneEvent, ScenePhase, SceneStateMachine
from story.triggers import Position, TriggerDetector

from .config import with_defaults
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovementIntent:
    dx: float
    dy: float


@dataclass(frozen=True)
class InteractIntent:
    entity_id: str


InputIntent = Union[MovementIntent, InteractIntent]


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(value, maximum))


class ReunionGame:
    """One play session of Protocol: Reunion."""

    def __init__(self, config: dict | None = None, library: DialogueLibrary | None = None):
        self._cfg = with_defaults(config)
        self._room = self._cfg["room"]
        self.move_speed = self._cfg["movement"]["speed"]

        if library is None:
            path = self._cfg.get("_env", {}).get("dialogues") or self._cfg["dialogue"].get("path")
            library = DialogueLibrary.load(path)
        self._scene = SceneStateMachine(library)
        self._triggers = TriggerDetector.from_config(self._cfg)

        self._initial = GameState.initial(self._cfg)
        self.state = copy.deepcopy(self._initial)
        self._inputs: deque[InputIntent] = deque()

    # ── Session ─────────────────────────────────────────────────

    def start_game(self) -> None:
        """Leave the title screen and play the opening."""
        if self.state.game_started:
            return
        self.state.game_started = True
        logger.info("Game started (act %d)", self.state.acts.act)
        self._scene.begin(self.state)

    def reset_game(self) -> None:
        """Throw away the whole session and return to the initial state."""
        self.state = copy.deepcopy(self._initial)
        self._inputs.clear()
        logger.info("Game reset")

    def advance_act(self) -> int:
        return self._scene.enter_next_act(self.state)

    def skip_to_act(self, act: int) -> int:
        """Debug: jump straight to ``act`` with the earlier acts' flags set.

        Jumping back to act 1 restores the room as it was at the start of
        the session. Once the game is running, the act's opening plays.
        """
        if act <= 1:
            started = self.state.game_started
            self.state = copy.deepcopy(self._initial)
            self.state.game_started = started
            self._inputs.clear()
        act = self._scene.jump_to_act(self.state, act)
        if self.state.game_started:
            self._scene.begin(self.state)
        return act

    # ── Dialogue ────────────────────────────────────────────────

    def start_dialogue(self, lines: Sequence[DialogueLine | Mapping[str, Any]]) -> bool:
        """Show ``lines`` now, replacing anything on screen."""
        parsed = [line if isinstance(line, Line) else Line.from_data(line) for line in lines]
        return self.state.dialogue.start(parsed)

    def advance_dialogue(self) -> bool:
        """Next line. False once the sequence has ended (or nothing was showing)."""
        if not self.state.dialogue.active:
            return False
        more = self.state.dialogue.advance()
        if not more:
            self._scene.dispatch(self.state, SceneEvent(EventKind.DIALOGUE_ENDED))
        return more

    def choose_dialogue_option(self, choice_id: str) -> bool:
        if not self.state.dialogue.choose(choice_id):
            return False
        logger.info("Choice: %s", choice_id)
        self._scene.dispatch(self.state, SceneEvent(EventKind.CHOICE_MADE, choice_id))
        return True

    # ── Flags & items ───────────────────────────────────────────

    def set_flag(self, name: str, value: bool = True) -> None:
        self.state.flags.set(name, value)

    def collect_item(self, name: str) -> None:
        self._scene.collect(self.state, name)

    # ── Interaction ─────────────────────────────────────────────

    def toggle_furniture(self, furniture_id: str) -> bool:
        """Click a piece of furniture; returns whether it is now open."""
        furniture = self.state.furniture[furniture_id]
        if not self.state.dialogue.active:
            self._scene.dispatch(self.state, SceneEvent(EventKind.FURNITURE_INTERACTED, furniture_id))
        return furniture.is_open

    def interact(self, entity_id: str) -> None:
        """Click on anything in the room."""
        if entity_id in self.state.furniture:
            self.toggle_furniture(entity_id)
            return
        if entity_id not in self.state.npcs:
            logger.warning("Click on unknown entity %r ignored", entity_id)
            return
        if self.state.dialogue.active:
            return
        if self._triggers.armed(entity_id, self.state.npcs, self.state.flags):
            self._scene.dispatch(self.state, SceneEvent(EventKind.TRIGGER_FIRED, entity_id))

    # ── Movement ────────────────────────────────────────────────

    def move_player(self, dx: float, dy: float) -> bool:
        """Apply one movement step. Returns False when movement is paused."""
        state = self.state
        if state.dialogue.active:
            return False

        player = state.player
        if dx > 0:
            player.facing = "right"
        elif dx < 0:
            player.facing = "left"

        room = self._room
        proposed_x = player.position.x + dx
        new_x = _clamp(proposed_x, room["min_x"], room["max_x"])
        new_y = _clamp(player.position.y + dy, room["min_y"], room["max_y"])

        unlocked = state.flags.get(IS_DOOR_UNLOCKED)
        if unlocked and proposed_x > room["exit_x"]:
            self._scene.dispatch(state, SceneEvent(EventKind.DOOR_CROSSED))
        elif not unlocked and dx > 0 and new_x > room["door_x"]:
            # The locked door only stops rightward steps; walking away is always allowed.
            new_x = player.position.x

        player.position = Position(new_x, new_y)
        player.is_moving = True
        self._check_triggers()
        return True

    def stop_player(self) -> None:
        self.state.player.is_moving = False

    def _check_triggers(self) -> None:
        state = self.state
        fired = self._triggers.evaluate(state.player.position, state.npcs, state.flags, state.dialogue.active)
        for entity_id in fired:
            if state.dialogue.active:
                break
            self._scene.dispatch(state, SceneEvent(EventKind.TRIGGER_FIRED, entity_id))

    # ── Tick ────────────────────────────────────────────────────

    def queue_input(self, intent: InputIntent) -> None:
        self._inputs.append(intent)

    def tick(self) -> None:
        """Process every intent queued since the last tick."""
        moved = False
        while self._inputs:
            intent = self._inputs.popleft()
            if isinstance(intent, MovementIntent):
                moved = self.move_player(intent.dx, intent.dy) or moved
            else:
                self.interact(intent.entity_id)
        if not moved:
            self.stop_player()

    # ── Queries ─────────────────────────────────────────────────

    def is_dialogue_active(self) -> bool:
        return self.state.dialogue.active

    def current_dialogue_line(self) -> DialogueLine | None:
        return self.state.dialogue.current()

    def flags(self) -> dict[str, bool]:
        return self.state.flags.snapshot()

    def collectibles(self) -> dict[str, bool]:
        return self.state.collectibles.snapshot()

    def all_collectibles_gathered(self) -> bool:
        return self.state.collectibles.all_collected()

    def current_phase(self) -> ScenePhase:
        return self.state.phase

    def current_act(self) -> int:
        return self.state.acts.act

    def snapshot(self) -> dict[str, Any]:
        return self.state.snapshot()
