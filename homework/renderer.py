"""Plain-text views of the task list and the reference data.

Every function here is a pure projection of its arguments.
"""

from typing import Iterable, List, Optional

from homework.composer import TopicSelection
from homework.models import Topic, TaskRecord
from homework.reference import ReferenceData, VocabularySections

EMPTY_TASKS_MESSAGE = "No tienes tareas guardadas aún. ¡Añade tu primera frase arriba!"
WORDS_TITLE = "Vocabulario"
VERBS_TITLE = "Lista de Verbos"


def render_task(task: TaskRecord) -> str:
    lines = [f"#{task.id} {task.phrase}"]
    if task.lessons:
        lines.append("    " + " · ".join(task.lessons))
    lines.append(f"    {task.created_at}")
    return "\n".join(lines)


def render_tasks(tasks: Iterable[TaskRecord]) -> str:
    """Render task cards newest first, or the empty-state message."""
    cards = [render_task(task) for task in tasks]
    if not cards:
        return EMPTY_TASKS_MESSAGE
    return "\n\n".join(cards)


def render_topics(selection: Optional[TopicSelection] = None) -> str:
    """Render the topic chips, marking the selected ones."""
    lines = []
    for topic in Topic:
        mark = "x" if selection is not None and topic in selection else " "
        lines.append(f"[{mark}] {topic.value}")
    return "\n".join(lines)


def render_vocabulary(sections: VocabularySections) -> str:
    """Render vocabulary sections with each word and its definition."""
    blocks = []
    for section, entries in sections.items():
        lines = [section]
        for entry in entries:
            lines.append(f"  {entry.word}: {entry.definition}" if entry.definition else f"  {entry.word}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_verbs(verbs: List[str]) -> str:
    return "\n".join(f"  {verb}" for verb in verbs)


def render_reference(data: ReferenceData) -> str:
    """Render both reference regions; each shows its own error placeholder."""
    words = data.words_error if data.words is None else render_vocabulary(data.words)
    verbs = data.verbs_error if data.verbs is None else render_verbs(data.verbs)
    return f"== {WORDS_TITLE} ==\n{words or ''}\n\n== {VERBS_TITLE} ==\n{verbs or ''}"
