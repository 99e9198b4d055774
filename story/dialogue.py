"""Dialogue lines, the dialogue queue and authored dialogue content."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import yaml

logger = logging.getLogger(__name__)

DIALOGUES_PATH = Path(__file__).resolve().parent / "dialogues.yaml"


@dataclass(frozen=True)
class Choice:
    id: str
    text: str


@dataclass(frozen=True)
class Line:
    """A passive line: the player advances past it."""

    speaker: str
    text: str
    emotion: str | None = None
    is_action: bool = False
    is_narration: bool = False

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> DialogueLine:
        """Build a line from authored data, a ChoiceLine when choices are present."""
        fields = {
            "speaker": str(data.get("speaker", "")),
            "text": str(data.get("text", "")),
            "emotion": data.get("emotion"),
            "is_action": bool(data.get("isAction", False)),
            "is_narration": bool(data.get("isNarration", False)),
        }
        choices = data.get("choices") or []
        if choices:
            return ChoiceLine(
                **fields,
                choices=tuple(Choice(id=str(c["id"]), text=str(c.get("text", c["id"]))) for c in choices),
            )
        return cls(**fields)


@dataclass(frozen=True)
class ChoiceLine(Line):
    """A line that blocks passive advancement until one of its choices is picked."""

    choices: tuple[Choice, ...] = ()

    def __post_init__(self) -> None:
        if not self.choices:
            raise ValueError("ChoiceLine needs at least one choice")

    def offers(self, choice_id: str) -> bool:
        return any(choice.id == choice_id for choice in self.choices)


DialogueLine = Union[Line, ChoiceLine]


class DialogueEngine:
    """The dialogue queue currently presented, with its cursor.

    ``active`` implies ``0 <= cursor < len(queue)``; an inactive engine
    always holds an empty queue and a zero cursor.
    """

    def __init__(self) -> None:
        self._queue: tuple[DialogueLine, ...] = ()
        self._cursor = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def queue(self) -> tuple[DialogueLine, ...]:
        return self._queue

    def start(self, lines: Sequence[DialogueLine]) -> bool:
        """Replace whatever is showing with ``lines``.

        Returns False when ``lines`` is empty: nothing is shown and the
        engine stays inactive.
        """
        self._queue = tuple(lines)
        self._cursor = 0
        self._active = bool(self._queue)
        if not self._active:
            return False
        logger.debug("Dialogue started: %d line(s)", len(self._queue))
        return True

    def advance(self) -> bool:
        """Move to the next line. False means the sequence just ended."""
        if not self._active:
            return False
        if isinstance(self.current(), ChoiceLine):
            # Waiting on choose().
            return True
        if self._cursor + 1 < len(self._queue):
            self._cursor += 1
            return True
        self.end()
        logger.debug("Dialogue ended")
        return False

    def choose(self, choice_id: str) -> bool:
        """Whether ``choice_id`` is a valid pick for the current line.

        The queue is not advanced; the caller decides what happens next.
        """
        line = self.current()
        if not isinstance(line, ChoiceLine):
            logger.debug("Ignoring choice %r: current line offers no choices", choice_id)
            return False
        if not line.offers(choice_id):
            logger.debug("Ignoring choice %r: not offered by current line", choice_id)
            return False
        return True

    def end(self) -> None:
        self._queue = ()
        self._cursor = 0
        self._active = False

    def current(self) -> DialogueLine | None:
        if not self._active:
            return None
        return self._queue[self._cursor]

    def progress(self) -> tuple[int, int]:
        """(1-based line number, total lines), (0, 0) when idle."""
        if not self._active:
            return (0, 0)
        return (self._cursor + 1, len(self._queue))


class DialogueLibrary:
    """Authored dialogue sequences addressed as ``act.scene.character.interaction``."""

    def __init__(self, sequences: Mapping[str, Any]):
        self._sequences = sequences

    @classmethod
    def load(cls, path: str | Path | None = None) -> DialogueLibrary:
        target = Path(path) if path else DIALOGUES_PATH
        with open(target, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Dialogue file must contain a mapping: {target}")
        logger.debug("Loaded dialogues from %s", target)
        return cls(data)

    def get(self, key: str) -> tuple[DialogueLine, ...]:
        """Lines for ``key``; an empty tuple (with a warning) when it is not authored."""
        entries = self._lookup(key)
        if entries is None:
            logger.warning("Dialogue not found: %s", key)
            return ()
        return tuple(Line.from_data(entry) for entry in entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._lookup(key) is not None

    def _lookup(self, key: str) -> list[Any] | None:
        node: Any = self._sequences
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, list) else None
