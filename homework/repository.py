"""Persisted task store and student profile.

TaskStore owns the task list. Every mutation rewrites the whole list in
storage before it returns; callers re-render afterwards.
"""

import json
import logging
import time
from typing import List, Optional, Tuple

from homework.models import TaskRecord
from homework.storage import Storage

logger = logging.getLogger(__name__)

TASKS_KEY = "englishTasks"
STUDENT_NAME_KEY = "englishStudentName"


class TaskStore:
    """Newest-first list of task records backed by a Storage.

    Attributes:
        storage: Storage backend holding the JSON-serialized list
    """

    def __init__(self, storage: Storage):
        """Initialize the store and load the persisted list.

        Args:
            storage: Storage implementation to use
        """
        self.storage = storage
        self._tasks: List[TaskRecord] = []
        self._last_id = 0
        self.load()

    @property
    def tasks(self) -> Tuple[TaskRecord, ...]:
        """Snapshot of the current records, newest first."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def load(self) -> List[TaskRecord]:
        """Reload the list from storage.

        A missing or unreadable blob yields an empty list. Records that do
        not have the expected shape are skipped.

        Returns:
            The loaded records, newest first
        """
        self._tasks = self._read()
        self._last_id = max([self._last_id] + [task.id for task in self._tasks])
        return list(self._tasks)

    def append(self, record: TaskRecord) -> None:
        """Prepend a record and persist the list.

        Args:
            record: Newly created record
        """
        self._save([record] + self._tasks)
        self._last_id = max(self._last_id, record.id)
        logger.info("Added task #%d", record.id)

    def remove_by_id(self, task_id: int) -> bool:
        """Remove every record with the given id and persist the list.

        Args:
            task_id: ID of the task to remove

        Returns:
            True if a record was removed, False if the id was absent
        """
        remaining = [task for task in self._tasks if task.id != task_id]
        removed = len(remaining) != len(self._tasks)
        self._save(remaining)
        if removed:
            logger.info("Removed task #%d", task_id)
        return removed

    def clear(self) -> None:
        """Remove all records and persist the empty list."""
        count = len(self._tasks)
        self._save([])
        logger.info("Cleared %d tasks", count)

    def get(self, task_id: int) -> Optional[TaskRecord]:
        """Return the record with the given id, or None."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def next_id(self) -> int:
        """Issue a fresh id derived from the clock in milliseconds.

        Ids strictly increase even if the clock stalls or goes backwards.
        """
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _read(self) -> List[TaskRecord]:
        try:
            raw = self.storage.get_item(TASKS_KEY)
        except UnicodeDecodeError as exc:
            logger.warning("Stored task list is not valid UTF-8, starting empty: %s", exc)
            return []
        if raw is None or not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored task list is not valid JSON, starting empty: %s", exc)
            return []

        if not isinstance(data, list):
            logger.warning("Stored task list is not a list, starting empty")
            return []

        tasks = []
        for item in data:
            try:
                tasks.append(TaskRecord.from_dict(item))
            except ValueError as exc:
                logger.warning("Skipping stored task: %s", exc)
        return tasks

    def _save(self, tasks: List[TaskRecord]) -> None:
        # Memory only changes once storage accepted the write
        payload = json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)
        self.storage.set_item(TASKS_KEY, payload)
        self._tasks = tasks


class StudentProfile:
    """Student name, persisted independently of the task list."""

    def __init__(self, storage: Storage):
        self.storage = storage

    @property
    def name(self) -> str:
        return self.storage.get_item(STUDENT_NAME_KEY) or ""

    def set_name(self, name: str) -> None:
        self.storage.set_item(STUDENT_NAME_KEY, name)
