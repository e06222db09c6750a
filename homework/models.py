"""Core models for the homework tracker.

This module defines the core data structures:
- Topic: Enum of the eight grammar topics a task can be tagged with
- TaskRecord: A saved example sentence with its topics and creation date
- VocabularyEntry: A word and its definition from the word-list reference
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Topic(Enum):
    """Grammar topics, in display order."""

    VERB_PATTERNS = "Verb Patterns"
    PHRASAL_VERBS = "Phrasal Verbs"
    MODAL_VERBS = "Modal Verbs"
    CONDITIONALS = "Conditionals"
    PASSIVE_VOICE = "The Passive Voice"
    CAUSATIVES = "Causatives"
    WISH_AND_HOPE = "Wish and Hope"
    REPORTED_SPEECH = "Reported Speech"

    @classmethod
    def from_name(cls, name: str) -> "Topic":
        """Resolve a topic from its display name.

        Args:
            name: Display name, matched case-insensitively

        Returns:
            The matching Topic

        Raises:
            ValueError: If no topic has that name
        """
        wanted = name.strip().casefold()
        for topic in cls:
            if topic.value.casefold() == wanted:
                return topic
        raise ValueError(f"Unknown topic: {name!r}")


TOPIC_NAMES: Tuple[str, ...] = tuple(topic.value for topic in Topic)


def format_locale_date(day: Optional[date] = None) -> str:
    """Format a date using the current locale's date representation."""
    return (day or date.today()).strftime("%x")


@dataclass(frozen=True)
class TaskRecord:
    """A saved task. Records never change once created.

    Attributes:
        id: Unique clock-derived identifier
        phrase: The example sentence, trimmed and non-empty
        lessons: Topic names in the order they were selected
        created_at: Locale-formatted creation date
    """

    id: int
    phrase: str
    lessons: Tuple[str, ...] = ()
    created_at: str = field(default_factory=format_locale_date)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored JSON representation."""
        return {
            "id": self.id,
            "phrase": self.phrase,
            "lessons": list(self.lessons),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskRecord":
        """Create a record from its stored JSON representation.

        Raises:
            ValueError: If a field is missing or has the wrong shape
        """
        try:
            task_id = data["id"]
            phrase = data["phrase"]
            lessons = data["lessons"]
            created_at = data["createdAt"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed task record: {data!r}") from exc

        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise ValueError(f"Task id must be an integer: {task_id!r}")
        if not isinstance(phrase, str) or not phrase.strip():
            raise ValueError(f"Task #{task_id} has an empty phrase")
        if not isinstance(lessons, list) or not lessons:
            raise ValueError(f"Task #{task_id} has no topics")
        for lesson in lessons:
            if lesson not in TOPIC_NAMES:
                raise ValueError(f"Task #{task_id} has unknown topic {lesson!r}")
        if not isinstance(created_at, str):
            raise ValueError(f"Task #{task_id} has an invalid date")

        return cls(id=task_id, phrase=phrase, lessons=tuple(lessons), created_at=created_at)


@dataclass(frozen=True)
class VocabularyEntry:
    """A word from the vocabulary reference and its definition."""

    word: str
    definition: str
