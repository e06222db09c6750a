"""Task composition: topic selection, phrase editing and validation.

TaskComposer holds the transient form state (phrase, guided steps, topic
selection) and turns it into a TaskRecord handed to the TaskStore.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple, Union

from homework.models import Topic, TaskRecord, format_locale_date
from homework.repository import TaskStore

logger = logging.getLogger(__name__)

GUIDED_STEPS = 4

TopicLike = Union[Topic, str]


class ValidationError(ValueError):
    """The composed task cannot be saved."""


class EmptyPhraseError(ValidationError):
    def __init__(self):
        super().__init__("La frase no puede estar vacía")


class NoTopicSelectedError(ValidationError):
    def __init__(self):
        super().__init__("Selecciona al menos un tema")


class EditorMode(Enum):
    """Authoring mode of the composer."""

    SIMPLE = "simple"
    GUIDED = "guided"


def _as_topic(topic: TopicLike) -> Topic:
    return topic if isinstance(topic, Topic) else Topic.from_name(topic)


class TopicSelection:
    """Topics chosen for the task being composed, in selection order."""

    def __init__(self):
        self._selected: List[Topic] = []

    @property
    def selected(self) -> Tuple[Topic, ...]:
        return tuple(self._selected)

    def toggle(self, topic: TopicLike) -> bool:
        """Select the topic, or deselect it if already selected.

        Returns:
            True if the topic is selected afterwards
        """
        topic = _as_topic(topic)
        if topic in self._selected:
            self._selected.remove(topic)
            return False
        self._selected.append(topic)
        return True

    def select(self, topic: TopicLike) -> None:
        topic = _as_topic(topic)
        if topic not in self._selected:
            self._selected.append(topic)

    def clear(self) -> None:
        self._selected = []

    def __contains__(self, topic: object) -> bool:
        if isinstance(topic, str):
            try:
                topic = Topic.from_name(topic)
            except ValueError:
                return False
        return topic in self._selected

    def __len__(self) -> int:
        return len(self._selected)


def join_steps(steps: List[str]) -> str:
    """Join guided steps with single spaces, leaving out blank ones."""
    return " ".join(step.strip() for step in steps if step.strip())


class TaskComposer:
    """Builds task records from the simple phrase or the guided steps.

    Attributes:
        store: TaskStore that receives new records
        selection: Topics chosen for the next task
        mode: Active authoring mode
        phrase: Simple-mode phrase input
        steps: Guided-mode step inputs
    """

    def __init__(self, store: TaskStore, selection: Optional[TopicSelection] = None):
        self.store = store
        self.selection = selection or TopicSelection()
        self.mode = EditorMode.SIMPLE
        self.phrase = ""
        self.steps: List[str] = [""] * GUIDED_STEPS
        self._focused_step = 0

    def set_mode(self, mode: EditorMode) -> None:
        """Switch modes; guided mode focuses the first step."""
        self.mode = mode
        self._focused_step = 0

    def set_steps(self, steps: List[str]) -> None:
        """Fill the guided steps in order.

        Raises:
            ValueError: If more than four steps are given
        """
        if len(steps) > GUIDED_STEPS:
            raise ValueError(f"At most {GUIDED_STEPS} steps are allowed")
        self.steps = list(steps) + [""] * (GUIDED_STEPS - len(steps))

    def focus_step(self, index: int) -> None:
        if not 0 <= index < GUIDED_STEPS:
            raise IndexError(f"Step index out of range: {index}")
        self._focused_step = index

    def insert_text(self, text: str) -> None:
        """Append a reference word to the active input.

        A separating space is added unless the input is empty or already
        ends with a space.
        """
        current = self.phrase if self.mode is EditorMode.SIMPLE else self.steps[self._focused_step]
        separator = " " if current and not current.endswith(" ") else ""
        updated = current + separator + text
        if self.mode is EditorMode.SIMPLE:
            self.phrase = updated
        else:
            self.steps[self._focused_step] = updated

    def compose_phrase(self) -> str:
        """Return the phrase the active mode would save."""
        if self.mode is EditorMode.GUIDED:
            return join_steps(self.steps)
        return self.phrase.strip()

    def submit(self) -> TaskRecord:
        """Validate the form, save a new record and reset the form.

        Returns:
            The saved record

        Raises:
            EmptyPhraseError: If the phrase is blank
            NoTopicSelectedError: If no topic is selected
        """
        phrase = self.compose_phrase()
        if not phrase:
            raise EmptyPhraseError()
        if not len(self.selection):
            raise NoTopicSelectedError()

        record = TaskRecord(
            id=self.store.next_id(),
            phrase=phrase,
            lessons=tuple(topic.value for topic in self.selection.selected),
            created_at=format_locale_date(),
        )

        self.store.append(record)

        self.phrase = ""
        self.steps = [""] * GUIDED_STEPS
        self.selection.clear()
        logger.debug("Composed task #%d in %s mode", record.id, self.mode.value)
        return record
