"""Narrative engine — dialogue, scene phases, triggers, flags and collectibles."""

from .acts import ActProgression
from .collectibles import ACT1_COLLECTIBLES, CollectibleGate
from .dialogue import Choice, ChoiceLine, DialogueEngine, DialogueLibrary, DialogueLine, Line
from .flags import StoryFlagStore
from .phases import EventKind, SceneEvent, ScenePhase, SceneStateMachine
from .triggers import Position, TriggerDetector, check_proximity

__all__ = [
    "ACT1_COLLECTIBLES",
    "ActProgression",
    "Choice",
    "ChoiceLine",
    "CollectibleGate",
    "DialogueEngine",
    "DialogueLibrary",
    "DialogueLine",
    "EventKind",
    "Line",
    "Position",
    "SceneEvent",
    "ScenePhase",
    "SceneStateMachine",
    "StoryFlagStore",
    "TriggerDetector",
    "check_proximity",
]
