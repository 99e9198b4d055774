"""Act 1 scene phases and the transition table that drives them.

Every event is looked up by ``(current phase, event kind)``. Dialogue
completion is routed by the phase it ends in, never by which lines were
shown, so a sequence can be reused across phases. Pairs missing from the
table leave the phase untouched.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .collectibles import GHOST_PLUSH, POLAROID, TOOTH_EARRINGS
from .dialogue import DialogueLibrary
from .flags import (
    HAS_ENTERED_VOID,
    HAS_MET_DELICE,
    HAS_REACHED_BEACH,
    HAS_TALKED_TO_BAT,
    HAS_TALKED_TO_DELICE,
    HAS_WOKEN_UP,
    IS_DOOR_UNLOCKED,
    default_flags,
    flags_completed_before,
)

if TYPE_CHECKING:
    from game.state import GameState

    Handler = Callable[[GameState, "SceneEvent"], None]

logger = logging.getLogger(__name__)


class ScenePhase(enum.Enum):
    OPENING = "opening"
    EXPLORATION = "exploration"
    BAT_TALKING = "batTalking"
    BAT_ALLOWING_EXIT = "batAllowingExit"
    MEETS_DELICE = "meetsDelice"
    DELICE_INTRODUCTION = "deliceIntroduction"
    SHOW_PET_CHOICE = "showPetChoice"
    PET_YES = "petYes"
    PET_NO = "petNo"
    TAKING_EARRINGS = "takingEarrings"
    EARRING_CHOICE = "earringChoice"
    TAKING_POLAROID = "takingPolaroid"
    POLAROID_CHOICE = "polaroidChoice"
    TAKING_PLUSH = "takingPlush"
    PLUSH_CHOICE = "plushChoice"
    DOOR_UNLOCKING = "doorUnlocking"
    CAN_PROCEED = "canProceed"
    # First phase of a freshly entered act.
    ENTERING = "entering"


class EventKind(enum.Enum):
    DIALOGUE_ENDED = "dialogue_ended"
    TRIGGER_FIRED = "trigger_fired"
    FURNITURE_INTERACTED = "furniture_interacted"
    CHOICE_MADE = "choice_made"
    DOOR_CROSSED = "door_crossed"


@dataclass(frozen=True)
class SceneEvent:
    kind: EventKind
    target: str = ""  # entity, furniture or choice id


PET_YES = "petYes"
PET_NO = "petNo"
TAKE_YES = "takeYes"
TAKE_NO = "takeNo"

OPENING_DIALOGUE = "act1.opening.chichi.wakeUp"
BLOCK_DOOR_DIALOGUE = "act1.batEncounter.bat.blockDoor"
ALLOW_EXIT_DIALOGUE = "act1.batEncounter.bat.allowExit"
MEET_DELICE_DIALOGUE = "act1.catEncounter.delice.meetDelice"
DELICE_INTRO_DIALOGUE = "act1.catEncounter.delice.introduction"
PET_CHOICE_DIALOGUE = "act1.catEncounter.delice.petChoice"
PURR_DIALOGUE = "act1.catEncounter.delice.purr"
DOOR_UNLOCK_DIALOGUE = "act1.doorUnlocked.narrator.description"

# Narration played once when an act is entered, and the flag recording it.
ACT_ARRIVALS: dict[int, tuple[str, str]] = {
    2: ("act2.entering.narrator.description", HAS_ENTERED_VOID),
    3: ("act3.arrival.narrator.description", HAS_REACHED_BEACH),
}


@dataclass(frozen=True)
class ItemHook:
    """The collectible hidden in a piece of furniture and the phases around taking it."""

    furniture_id: str
    item: str
    taking: ScenePhase
    choice: ScenePhase

    @property
    def take_dialogue(self) -> str:
        return f"act1.furniture.{self.furniture_id}.takeItem"

    @property
    def choice_dialogue(self) -> str:
        return f"act1.furniture.{self.furniture_id}.takeChoice"


ITEM_HOOKS = (
    ItemHook("wardrobe", TOOTH_EARRINGS, ScenePhase.TAKING_EARRINGS, ScenePhase.EARRING_CHOICE),
    ItemHook("bedsideTable", POLAROID, ScenePhase.TAKING_POLAROID, ScenePhase.POLAROID_CHOICE),
    ItemHook("bed", GHOST_PLUSH, ScenePhase.TAKING_PLUSH, ScenePhase.PLUSH_CHOICE),
)


class SceneStateMachine:
    """Owns every phase change of a GameState."""

    def __init__(self, library: DialogueLibrary):
        self._library = library
        self._pending: deque[SceneEvent] = deque()
        self._draining = False
        self._hooks_by_furniture = {hook.furniture_id: hook for hook in ITEM_HOOKS}
        self._hooks_by_phase = {}
        for hook in ITEM_HOOKS:
            self._hooks_by_phase[hook.taking] = hook
            self._hooks_by_phase[hook.choice] = hook

        ended = EventKind.DIALOGUE_ENDED
        self._table: dict[tuple[ScenePhase, EventKind], Handler] = {
            (ScenePhase.OPENING, ended): self._finish_opening,
            (ScenePhase.EXPLORATION, EventKind.TRIGGER_FIRED): self._approach,
            (ScenePhase.EXPLORATION, EventKind.FURNITURE_INTERACTED): self._open_furniture,
            (ScenePhase.BAT_TALKING, ended): self._after_bat_warning,
            (ScenePhase.BAT_ALLOWING_EXIT, ended): self._after_bat_farewell,
            (ScenePhase.MEETS_DELICE, ended): self._introduce_delice,
            (ScenePhase.DELICE_INTRODUCTION, ended): self._offer_pet_choice,
            (ScenePhase.SHOW_PET_CHOICE, EventKind.CHOICE_MADE): self._pet_choice,
            (ScenePhase.PET_YES, ended): self._finish_delice,
            (ScenePhase.DOOR_UNLOCKING, ended): self._unlock_door,
            (ScenePhase.CAN_PROCEED, EventKind.DOOR_CROSSED): self._cross_door,
        }
        for hook in ITEM_HOOKS:
            self._table[(hook.taking, ended)] = self._offer_take_choice
            self._table[(hook.choice, EventKind.CHOICE_MADE)] = self._take_choice

    # ── Entry points ────────────────────────────────────────────

    def begin(self, state: GameState) -> ScenePhase:
        """Play the opening of a fresh act 1, or the arrival of a later act."""
        if state.phase is ScenePhase.OPENING and not state.flags.get(HAS_WOKEN_UP):
            self._play(state, OPENING_DIALOGUE)
        elif state.phase is ScenePhase.ENTERING:
            self._arrive(state)
        self._drain(state)
        return state.phase

    def dispatch(self, state: GameState, event: SceneEvent) -> ScenePhase:
        """Apply ``event`` and anything it raises, then return the resulting phase."""
        self._pending.append(event)
        self._drain(state)
        return state.phase

    def enter_next_act(self, state: GameState) -> int:
        before = state.acts.act
        act = state.acts.advance()
        state.phase = ScenePhase.ENTERING
        if act != before:
            self._arrive(state)
            self._drain(state)
        return act

    def collect(self, state: GameState, item: str) -> None:
        """Mark ``item`` as found.

        Completing the set while the door is still locked lets the bat
        speak again, this time to let the player out.
        """
        state.collectibles.set(item)
        logger.info("Collected %s", item)
        if state.collectibles.all_collected() and not state.flags.get(IS_DOOR_UNLOCKED):
            state.flags.set(HAS_TALKED_TO_BAT, False)

    def jump_to_act(self, state: GameState, act: int) -> int:
        """Debug skip: land on ``act`` with every earlier act's flags set."""
        act = state.acts.jump_to(act)
        state.dialogue.end()
        state.flags.replace({**default_flags(), **flags_completed_before(act)})
        if act == 1:
            state.phase = ScenePhase.OPENING
        else:
            for hook in ITEM_HOOKS:
                state.collectibles.set(hook.item)
            state.phase = ScenePhase.ENTERING
        logger.info("Skipped to act %d", act)
        return act

    # ── Plumbing ────────────────────────────────────────────────

    def _drain(self, state: GameState) -> None:
        # Events raised by a handler run after it returns, in order.
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                event = self._pending.popleft()
                handler = self._table.get((state.phase, event.kind))
                if handler is None:
                    logger.debug("Idle: %s in phase %s", event.kind.value, state.phase.value)
                    continue
                before = state.phase
                handler(state, event)
                if state.phase is not before:
                    logger.info("Phase %s -> %s", before.value, state.phase.value)
        finally:
            self._draining = False

    def _play(self, state: GameState, key: str) -> None:
        if not state.dialogue.start(self._library.get(key)):
            # Nothing to show, so the sequence is over already.
            self._pending.append(SceneEvent(EventKind.DIALOGUE_ENDED))

    def _arrive(self, state: GameState) -> None:
        arrival = ACT_ARRIVALS.get(state.acts.act)
        if arrival is None:
            return
        key, flag = arrival
        if state.flags.get(flag):
            return
        state.flags.set(flag)
        self._play(state, key)

    # ── Handlers ────────────────────────────────────────────────

    def _finish_opening(self, state: GameState, event: SceneEvent) -> None:
        state.flags.set(HAS_WOKEN_UP)
        state.phase = ScenePhase.EXPLORATION

    def _approach(self, state: GameState, event: SceneEvent) -> None:
        if event.target == "bat":
            if state.flags.get(HAS_TALKED_TO_BAT):
                return
            if state.collectibles.all_collected():
                state.phase = ScenePhase.BAT_ALLOWING_EXIT
                self._play(state, ALLOW_EXIT_DIALOGUE)
            else:
                state.phase = ScenePhase.BAT_TALKING
                self._play(state, BLOCK_DOOR_DIALOGUE)
        elif event.target == "delice":
            if state.flags.get(HAS_TALKED_TO_DELICE):
                return
            state.flags.set(HAS_MET_DELICE)
            state.phase = ScenePhase.MEETS_DELICE
            self._play(state, MEET_DELICE_DIALOGUE)
        else:
            logger.debug("No encounter for %r", event.target)

    def _after_bat_warning(self, state: GameState, event: SceneEvent) -> None:
        state.flags.set(HAS_TALKED_TO_BAT)
        if state.collectibles.all_collected():
            state.phase = ScenePhase.DOOR_UNLOCKING
            self._play(state, DOOR_UNLOCK_DIALOGUE)
        else:
            state.phase = ScenePhase.EXPLORATION

    def _after_bat_farewell(self, state: GameState, event: SceneEvent) -> None:
        state.flags.set(HAS_TALKED_TO_BAT)
        self._unlock_door(state, event)

    def _introduce_delice(self, state: GameState, event: SceneEvent) -> None:
        state.phase = ScenePhase.DELICE_INTRODUCTION
        self._play(state, DELICE_INTRO_DIALOGUE)

    def _offer_pet_choice(self, state: GameState, event: SceneEvent) -> None:
        state.phase = ScenePhase.SHOW_PET_CHOICE
        self._play(state, PET_CHOICE_DIALOGUE)

    def _pet_choice(self, state: GameState, event: SceneEvent) -> None:
        if event.target == PET_YES:
            state.last_choice = PET_YES
            state.phase = ScenePhase.PET_YES
            self._play(state, PURR_DIALOGUE)
        elif event.target == PET_NO:
            state.last_choice = PET_NO
            state.phase = ScenePhase.PET_NO
            state.dialogue.end()
            self._finish_delice(state, event)

    def _finish_delice(self, state: GameState, event: SceneEvent) -> None:
        state.flags.set(HAS_TALKED_TO_DELICE)
        state.phase = ScenePhase.EXPLORATION

    def _open_furniture(self, state: GameState, event: SceneEvent) -> None:
        furniture = state.furniture.get(event.target)
        if furniture is None:
            logger.debug("No furniture %r", event.target)
            return
        furniture.is_open = not furniture.is_open
        hook = self._hooks_by_furniture.get(event.target)
        if hook is None or not furniture.is_open or state.collectibles.get(hook.item):
            return
        state.phase = hook.taking
        self._play(state, hook.take_dialogue)

    def _offer_take_choice(self, state: GameState, event: SceneEvent) -> None:
        hook = self._hooks_by_phase[state.phase]
        state.phase = hook.choice
        self._play(state, hook.choice_dialogue)

    def _take_choice(self, state: GameState, event: SceneEvent) -> None:
        if event.target not in (TAKE_YES, TAKE_NO):
            return
        hook = self._hooks_by_phase[state.phase]
        state.dialogue.end()
        state.last_choice = event.target
        if event.target == TAKE_YES:
            self.collect(state, hook.item)
        state.phase = ScenePhase.EXPLORATION

    def _unlock_door(self, state: GameState, event: SceneEvent) -> None:
        state.flags.set(IS_DOOR_UNLOCKED)
        bat = state.npcs.get("bat")
        if bat is not None:
            bat.visible = False
        state.phase = ScenePhase.CAN_PROCEED

    def _cross_door(self, state: GameState, event: SceneEvent) -> None:
        if state.flags.get(IS_DOOR_UNLOCKED):
            self.enter_next_act(state)
