"""Tests for proximity triggers and act progression."""

from types import SimpleNamespace

from story.acts import ActProgression
from story.flags import HAS_TALKED_TO_BAT, StoryFlagStore
from story.triggers import Position, TriggerDetector, check_proximity


def _entities(**positions):
    return {
        name: SimpleNamespace(position=Position(*pos), visible=visible)
        for name, (pos, visible) in positions.items()
    }


def test_check_proximity_is_a_strict_box_test():
    origin = Position(100, 100)
    assert check_proximity(origin, Position(159, 159), 60)
    assert not check_proximity(origin, Position(160, 100), 60)
    assert not check_proximity(origin, Position(100, 40), 60)
    # Not Euclidean: the corner of the box still counts.
    assert check_proximity(origin, Position(155, 45.5), 60)


def test_evaluate_fires_for_nearby_unhandled_npcs():
    detector = TriggerDetector()
    entities = _entities(bat=((500, 250), True), delice=((220, 420), True))
    fired = detector.evaluate(Position(480, 260), entities, StoryFlagStore(), dialogue_active=False)
    assert fired == ["bat"]


def test_evaluate_is_gated_on_handled_flag():
    detector = TriggerDetector()
    flags = StoryFlagStore()
    flags.set(HAS_TALKED_TO_BAT)
    entities = _entities(bat=((500, 250), True))
    assert detector.evaluate(Position(500, 250), entities, flags, dialogue_active=False) == []


def test_evaluate_is_silent_during_dialogue():
    detector = TriggerDetector()
    entities = _entities(bat=((500, 250), True))
    assert detector.evaluate(Position(500, 250), entities, StoryFlagStore(), dialogue_active=True) == []


def test_hidden_npcs_never_fire():
    detector = TriggerDetector()
    entities = _entities(delice=((220, 420), False))
    assert detector.evaluate(Position(220, 420), entities, StoryFlagStore(), dialogue_active=False) == []


def test_from_config_overrides_threshold():
    detector = TriggerDetector.from_config({"triggers": {"threshold": 10}})
    entities = _entities(bat=((500, 250), True))
    assert detector.evaluate(Position(480, 250), entities, StoryFlagStore(), dialogue_active=False) == []
    assert detector.evaluate(Position(495, 250), entities, StoryFlagStore(), dialogue_active=False) == ["bat"]


def test_act_progression_clamps_at_last_act():
    acts = ActProgression()
    assert acts.act == 1
    assert acts.advance() == 2
    assert acts.advance() == 3
    assert acts.advance() == 3
    assert acts.title == "The Reunion"


def test_act_progression_jump_is_clamped():
    acts = ActProgression()
    assert acts.jump_to(9) == 3
    assert acts.jump_to(0) == 1
