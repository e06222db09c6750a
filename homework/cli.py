"""Command-line interface for the homework tracker.

This module provides the CLI interface using argparse. It supports the
following commands:
- add: Save a new task (simple phrase or guided steps)
- list: Show saved tasks
- delete: Delete a task after confirmation
- clear: Delete all tasks after confirmation
- name: Show or set the student name
- export: Produce the submission transcript
- topics: List the grammar topics
- vocab: Show the word and verb reference lists
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from homework.clipboard import copy_to_clipboard
from homework.composer import GUIDED_STEPS, EditorMode, TaskComposer
from homework.config import Settings, load_settings
from homework.exporter import build_transcript
from homework.logging_setup import setup_logging
from homework.models import TOPIC_NAMES
from homework.reference import load_references
from homework.renderer import render_reference, render_tasks, render_topics
from homework.repository import StudentProfile, TaskStore
from homework.storage import FileStorage

logger = logging.getLogger(__name__)

CONFIRM_DELETE = "¿Estás seguro de que quieres borrar esta tarea?"
CONFIRM_CLEAR = "⚠️ ¿Borrar TODAS las tareas? Esta acción es irreversible."


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="homework",
        description="English homework tracker"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Save a new task")
    add_parser.add_argument("phrase", nargs="?", default="", help="Example sentence")
    add_parser.add_argument(
        "--step",
        action="append",
        dest="steps",
        metavar="TEXT",
        help=f"Guided sentence part, up to {GUIDED_STEPS} (switches to guided mode)"
    )
    add_parser.add_argument(
        "--topic",
        action="append",
        dest="topics",
        default=[],
        metavar="TOPIC",
        help="Grammar topic (repeatable): " + ", ".join(TOPIC_NAMES)
    )

    subparsers.add_parser("list", help="Show saved tasks")

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("id", type=int, help="Task ID")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    clear_parser = subparsers.add_parser("clear", help="Delete all tasks")
    clear_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    name_parser = subparsers.add_parser("name", help="Show or set the student name")
    name_parser.add_argument("name", nargs="?", help="New student name")

    # Export command
    export_parser = subparsers.add_parser("export", help="Produce the submission transcript")
    export_parser.add_argument("--topics", action="store_true", help="Include each task's topics")
    export_parser.add_argument("--name", help="Student name (default: stored name)")
    export_parser.add_argument("--copy", action="store_true", help="Copy to the clipboard")
    export_parser.add_argument("--output", type=Path, help="Write the transcript to a file")

    subparsers.add_parser("topics", help="List the grammar topics")

    vocab_parser = subparsers.add_parser("vocab", help="Show the word and verb lists")
    vocab_parser.add_argument("--words", help="Word-list source (path or URL)")
    vocab_parser.add_argument("--verbs", help="Verb-list source (path or URL)")

    return parser


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on stdin. Anything but yes declines."""
    try:
        answer = input(f"{prompt} [s/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"s", "si", "sí", "y", "yes"}


def cmd_add(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'add' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success, 1 for a validation error)
    """
    composer = TaskComposer(store)
    try:
        if args.steps:
            composer.set_mode(EditorMode.GUIDED)
            composer.set_steps(args.steps)
        else:
            composer.phrase = args.phrase
        for topic in args.topics:
            composer.selection.select(topic)
        composer.submit()
    except ValueError as exc:
        # ValidationError, unknown topic or too many steps
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Tarea guardada satisfactoriamente")
    print()
    print(render_tasks(store.tasks))
    return 0


def cmd_list(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'list' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    print(render_tasks(store.tasks))
    return 0


def cmd_delete(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'delete' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success or declined, 1 if the task does not exist)
    """
    if store.get(args.id) is None:
        print(f"Error: Task #{args.id} not found.", file=sys.stderr)
        return 1

    if not args.yes and not confirm(CONFIRM_DELETE):
        return 0

    store.remove_by_id(args.id)
    print(render_tasks(store.tasks))
    return 0


def cmd_clear(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'clear' command.

    An empty list is left alone without asking for confirmation.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    if not len(store):
        return 0
    if not args.yes and not confirm(CONFIRM_CLEAR):
        return 0

    store.clear()
    print("Todas las tareas borradas")
    return 0


def cmd_name(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'name' command.

    Prints the stored name, or stores a new one when given.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    profile = StudentProfile(store.storage)
    if args.name is None:
        print(profile.name)
    else:
        profile.set_name(args.name)
    return 0


def cmd_export(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'export' command.

    Nothing is written, copied or printed when there are no tasks.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    name = args.name if args.name is not None else StudentProfile(store.storage).name
    transcript = build_transcript(store.tasks, name, include_topics=args.topics)
    if transcript is None:
        return 0

    if args.output is not None:
        args.output.write_text(transcript + "\n", encoding="utf-8")
    elif not args.copy:
        print(transcript)

    if args.copy and copy_to_clipboard(transcript):
        print("Entrega copiada!")
    return 0


def cmd_topics(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'topics' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    print(render_topics())
    return 0


def cmd_vocab(args: argparse.Namespace, store: TaskStore, settings: Settings) -> int:
    """Handle the 'vocab' command.

    Each reference list shows its own error placeholder if it fails to load.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance
        settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    data = load_references(
        args.words or settings.words_source,
        args.verbs or settings.verbs_source,
        base=settings.reference_dir,
    )
    print(render_reference(data))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = load_settings()
    setup_logging(logging.DEBUG if args.verbose else settings.log_level)

    logger.debug("Using data directory %s", settings.data_dir)
    store = TaskStore(FileStorage(settings.data_dir))

    # Dispatch to command handlers
    commands = {
        "add": cmd_add,
        "list": cmd_list,
        "delete": cmd_delete,
        "clear": cmd_clear,
        "name": cmd_name,
        "export": cmd_export,
        "topics": cmd_topics,
        "vocab": cmd_vocab,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    return handler(args, store, settings)


if __name__ == "__main__":
    sys.exit(main())
