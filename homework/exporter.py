"""Submission transcript export."""

from datetime import date
from typing import Iterable, Optional

from homework.models import TaskRecord, format_locale_date

DEFAULT_STUDENT_NAME = "Estudiante"


def format_task_line(task: TaskRecord, include_topics: bool) -> str:
    suffix = f" [{', '.join(task.lessons)}]" if include_topics and task.lessons else ""
    return f"- {task.phrase}{suffix}"


def build_transcript(
    tasks: Iterable[TaskRecord],
    student_name: str,
    include_topics: bool,
    today: Optional[date] = None,
) -> Optional[str]:
    """Build the plain-text submission transcript.

    Args:
        tasks: Records in store order (newest first)
        student_name: Name for the header; blank falls back to "Estudiante"
        include_topics: Whether to append each task's topics in brackets
        today: Submission date (default: today)

    Returns:
        The transcript, or None when there are no tasks to submit
    """
    tasks = list(tasks)
    if not tasks:
        return None

    name = student_name.strip() or DEFAULT_STUDENT_NAME
    lines = [
        "ENTREGA DE TAREAS",
        "------------------",
        f"Estudiante: {name}",
        f"Fecha de entrega: {format_locale_date(today)}",
        "",
        "TAREAS:",
    ]
    lines.extend(format_task_line(task, include_topics) for task in tasks)
    return "\n".join(lines)
