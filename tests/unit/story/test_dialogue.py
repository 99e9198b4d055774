"""Tests for the dialogue queue and authored dialogue lookup."""

import logging

import pytest

from story.dialogue import Choice, ChoiceLine, DialogueEngine, DialogueLibrary, Line


def _lines(n: int) -> list[Line]:
    return [Line(speaker="Chichi", text=f"line {i}") for i in range(n)]


class TestDialogueEngine:
    @pytest.mark.parametrize("length", [1, 2, 3, 7])
    def test_advance_reports_end_only_on_last_line(self, length):
        engine = DialogueEngine()
        engine.start(_lines(length))

        for _ in range(length - 1):
            assert engine.advance() is True
            assert engine.active
        assert engine.advance() is False
        assert not engine.active
        assert engine.queue == ()
        assert engine.cursor == 0
        assert engine.current() is None

    def test_cursor_walks_through_lines(self):
        engine = DialogueEngine()
        engine.start(_lines(3))
        assert engine.current().text == "line 0"
        engine.advance()
        assert engine.current().text == "line 1"
        assert engine.progress() == (2, 3)

    def test_start_preempts_active_dialogue(self):
        engine = DialogueEngine()
        engine.start(_lines(3))
        engine.advance()

        engine.start([Line(speaker="Bat", text="Hi Chichi!")])

        assert engine.cursor == 0
        assert engine.current().speaker == "Bat"
        assert engine.advance() is False
        assert engine.current() is None

    def test_start_with_no_lines_stays_inactive(self):
        engine = DialogueEngine()
        assert engine.start([]) is False
        assert not engine.active
        assert engine.advance() is False

    def test_choice_line_blocks_passive_advance(self):
        engine = DialogueEngine()
        prompt = ChoiceLine(speaker="Chichi", text="Pet him?", choices=(Choice("petYes", "Yes"), Choice("petNo", "No")))
        engine.start([prompt])

        assert engine.advance() is True
        assert engine.current() is prompt

    def test_choose_validates_without_advancing(self):
        engine = DialogueEngine()
        prompt = ChoiceLine(speaker="Chichi", text="Take it?", choices=(Choice("takeYes", "Yes"),))
        engine.start([prompt])

        assert engine.choose("takeYes") is True
        assert engine.choose("takeNo") is False
        assert engine.current() is prompt

    def test_choose_on_plain_line_is_ignored(self):
        engine = DialogueEngine()
        engine.start(_lines(2))
        assert engine.choose("petYes") is False
        assert engine.cursor == 0

    def test_choice_line_requires_choices(self):
        with pytest.raises(ValueError):
            ChoiceLine(speaker="Chichi", text="?")

    def test_end_clears_queue(self):
        engine = DialogueEngine()
        engine.start(_lines(3))
        engine.end()
        assert not engine.active
        assert engine.progress() == (0, 0)


class TestDialogueLibrary:
    def test_bundled_content_has_act1_sequences(self):
        library = DialogueLibrary.load()
        opening = library.get("act1.opening.chichi.wakeUp")
        assert len(opening) == 3
        assert opening[0].speaker == "Chichi"
        assert opening[0].emotion == "sleepy"

    @pytest.mark.parametrize(
        "key, speaker",
        [
            ("act2.entering.narrator.description", "Narrator"),
            ("act2.theDistance.delice.hint", "Delice"),
            ("act2.puzzleSolved.chichi.reaction", "Chichi"),
            ("act3.arrival.narrator.description", "Narrator"),
            ("act3.reunion.nienie.wakeUp", "Nienie"),
            ("act3.reunion.together.ending", "Both"),
        ],
    )
    def test_bundled_content_covers_later_acts(self, key, speaker):
        lines = DialogueLibrary.load().get(key)
        assert lines
        assert lines[0].speaker == speaker

    def test_choice_entries_become_choice_lines(self):
        library = DialogueLibrary.load()
        (prompt,) = library.get("act1.catEncounter.delice.petChoice")
        assert isinstance(prompt, ChoiceLine)
        assert [c.id for c in prompt.choices] == ["petYes", "petNo"]

    def test_flags_are_mapped_from_authored_names(self):
        library = DialogueLibrary(
            {"a": {"s": {"c": {"i": [{"speaker": "Narrator", "text": "...", "isNarration": True}]}}}}
        )
        (line,) = library.get("a.s.c.i")
        assert line.is_narration is True
        assert line.is_action is False

    def test_missing_key_warns_and_returns_empty(self, caplog):
        library = DialogueLibrary({"act1": {}})
        with caplog.at_level(logging.WARNING):
            assert library.get("act1.nowhere.nobody.nothing") == ()
        assert "Dialogue not found: act1.nowhere.nobody.nothing" in caplog.text

    def test_contains(self):
        library = DialogueLibrary({"act1": {"opening": {"chichi": {"wakeUp": []}}}})
        assert "act1.opening.chichi.wakeUp" in library
        assert "act1.opening" not in library
        assert "act1.opening.chichi.sleep" not in library

    def test_load_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "dialogues.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            DialogueLibrary.load(path)
