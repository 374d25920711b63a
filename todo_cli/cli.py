"""Command-line interface for todo-cli.

This module provides the CLI interface for managing the todo list using
argparse, and renders output with rich. It supports the following commands:
- add: Add a new task
- list: List all tasks, or only pending or completed ones
- done: Mark a task as completed
- undone: Mark a task as not completed
- remove: Remove a task
- clear: Remove all completed tasks
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from todo_cli.models import Task
from todo_cli.storage import TaskDataError
from todo_cli.store import TaskStore

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging to stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="todo",
        description="Manage your tasks from the command line"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a new task")
    add_parser.add_argument("description", help="Task description")

    # List command
    list_parser = subparsers.add_parser("list", help="List tasks")
    list_filter = list_parser.add_mutually_exclusive_group()
    list_filter.add_argument("-t", "--todo", action="store_true", help="Show only pending tasks")
    list_filter.add_argument("-d", "--done", action="store_true", help="Show only completed tasks")

    # Done / undone / remove commands
    done_parser = subparsers.add_parser("done", help="Mark a task as done")
    done_parser.add_argument("id", type=int, help="Task ID")

    undone_parser = subparsers.add_parser("undone", help="Mark a task as not done")
    undone_parser.add_argument("id", type=int, help="Task ID")

    remove_parser = subparsers.add_parser("remove", help="Remove a task")
    remove_parser.add_argument("id", type=int, help="Task ID")

    # Clear command
    subparsers.add_parser("clear", help="Remove all completed tasks")

    return parser


def get_console(stderr: bool = False) -> Console:
    """Return a console bound to the current stdout or stderr.

    Colour is enabled only when that stream is a terminal.
    """
    return Console(stderr=stderr, highlight=False, emoji=False, soft_wrap=True)


def format_task(task: Task) -> str:
    """Build the rich markup line for a single task."""
    if task.is_done:
        marker = "[bright_green]☑[/]"
        description = f"[bright_black strike]{escape(task.description)}[/]"
    else:
        marker = "[bright_red]☐[/]"
        description = f"[bright_white]{escape(task.description)}[/]"
    return f"\\[[bright_cyan]{task.id}[/]] {marker} {description}"


def print_tasks(title: str, tasks: List[Task]) -> None:
    console = get_console()
    console.print(f"\n{title}\n")
    for task in tasks:
        console.print(format_task(task))
    console.print()


def print_success(message: str) -> None:
    get_console().print(f"[bold green]✓[/] {message}")


def print_not_found(task_id: int) -> None:
    get_console(stderr=True).print(f"[bold red]✗[/] Task #[cyan]{task_id}[/] not found.")


def load_store() -> TaskStore:
    """Load the todo list, starting empty if the saved state is unusable."""
    try:
        return TaskStore.load()
    except (TaskDataError, OSError) as e:
        logger.info("Could not load tasks, starting with an empty list: %s", e)
        return TaskStore()


def save_store(store: TaskStore) -> bool:
    """Persist the store, reporting a write failure on stderr.

    Returns:
        True if the tasks were saved
    """
    try:
        store.save()
    except OSError as e:
        logger.debug("Saving tasks failed", exc_info=True)
        print(f"Error: could not save tasks: {e}", file=sys.stderr)
        return False
    return True


def cmd_add(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'add' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance

    Returns:
        Exit code (0 for success, 1 if saving failed)
    """
    task_id = store.add_task(args.description)
    if not save_store(store):
        return 1
    print_success(
        f"Task #[bold cyan]{task_id}[/] added: [bright_white]{escape(args.description)}[/]"
    )
    return 0


def cmd_list(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'list' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance

    Returns:
        Exit code (0 for success)
    """
    if args.todo:
        tasks = store.list_todo()
        if not tasks:
            get_console().print("[bold green]No pending tasks! 🎉[/]")
            return 0
        print_tasks("[bold bright_red]Pending Tasks:[/]", tasks)
    elif args.done:
        tasks = store.list_done()
        if not tasks:
            get_console().print("[yellow]No completed tasks yet.[/]")
            return 0
        print_tasks("[bold bright_green]Completed Tasks:[/]", tasks)
    else:
        tasks = store.list_all()
        if not tasks:
            get_console().print('[yellow]No tasks yet! Add one with: todo add "your task"[/]')
            return 0
        print_tasks("[bold bright_blue]All Tasks:[/]", tasks)

    return 0


def cmd_done(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'done' command.

    A missing task is reported but is not an error.
    """
    if not store.mark_done(args.id):
        print_not_found(args.id)
        return 0

    if not save_store(store):
        return 1
    print_success(f"Task #[bold cyan]{args.id}[/] marked as done!")
    return 0


def cmd_undone(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'undone' command."""
    if not store.mark_todo(args.id):
        print_not_found(args.id)
        return 0

    if not save_store(store):
        return 1
    print_success(f"Task #[bold cyan]{args.id}[/] marked as todo.")
    return 0


def cmd_remove(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'remove' command."""
    if not store.remove_task(args.id):
        print_not_found(args.id)
        return 0

    if not save_store(store):
        return 1
    print_success(f"Task #[bold cyan]{args.id}[/] removed.")
    return 0


def cmd_clear(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'clear' command."""
    count = store.clear_done()
    if not save_store(store):
        return 1
    print_success(f"Cleared [bold cyan]{count}[/] completed task(s).")
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
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    store = load_store()

    # Dispatch to command handlers
    commands = {
        "add": cmd_add,
        "list": cmd_list,
        "done": cmd_done,
        "undone": cmd_undone,
        "remove": cmd_remove,
        "clear": cmd_clear,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    return handler(args, store)


if __name__ == "__main__":
    sys.exit(main())
