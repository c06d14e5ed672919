"""CLI commands for Todo Keeper."""

import argparse
import json
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from todo_keeper.config import Config, load_config
from todo_keeper.database import Database
from todo_keeper.errors import ValidationError
from todo_keeper.logging_setup import setup_logging
from todo_keeper.models import Priority, Task
from todo_keeper.overdue import is_overdue
from todo_keeper.query import PriorityFilter, SortBy, SortOrder
from todo_keeper.repository import TaskRepository
from todo_keeper.result import Result

UNEXPECTED_ERROR = "An unexpected error occurred."


def _priority(raw: str) -> Priority:
    try:
        return Priority.parse(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _priority_filter(raw: str) -> PriorityFilter:
    try:
        return PriorityFilter.parse(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _sort_order(raw: str) -> SortOrder:
    try:
        return SortOrder.parse(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="todo-keeper",
        description="Todo Keeper - a personal task tracker",
    )
    parser.add_argument(
        "--db", type=Path, dest="db_path", help="Path to the tasks database"
    )
    subparsers = parser.add_subparsers(dest="command")

    # ls command
    ls_parser = subparsers.add_parser("ls", help="List tasks")
    view_group = ls_parser.add_mutually_exclusive_group()
    view_group.add_argument(
        "--completed", action="store_true", help="List completed tasks instead of open ones"
    )
    view_group.add_argument(
        "--all", action="store_true", dest="show_all", help="List open and completed tasks"
    )
    ls_parser.add_argument(
        "--priority", type=_priority_filter, help="all, low, medium or high"
    )
    ls_parser.add_argument(
        "--overdue", action="store_true", help="Only open tasks past their due date"
    )
    ls_parser.add_argument(
        "--sort", choices=[s.value for s in SortBy], help="priority or date"
    )
    ls_parser.add_argument("--order", type=_sort_order, help="asc or desc")
    ls_parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output as JSON"
    )

    # add command
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("name", type=str, help="Name of the task")
    add_parser.add_argument(
        "--due", type=str, required=True, dest="due_date", help="Due date (dd.mm.yyyy)"
    )
    add_parser.add_argument(
        "--priority", type=_priority, default=Priority.LOW, help="low, medium or high"
    )
    add_parser.add_argument("--description", type=str, help="Description")

    # edit command
    edit_parser = subparsers.add_parser("edit", help="Edit a task")
    edit_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to edit"
    )
    edit_parser.add_argument("--name", type=str, help="New name for the task")
    edit_parser.add_argument("--priority", type=_priority, help="New priority")
    edit_parser.add_argument("--due", type=str, dest="due_date", help="New due date")
    edit_parser.add_argument("--description", type=str, help="New description")

    # done command
    done_parser = subparsers.add_parser("done", help="Mark a task as completed")
    done_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to mark"
    )

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Delete a task")
    rm_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to delete"
    )

    return parser


def get_repository(config: Config) -> TaskRepository:
    """Build the repository for the configured database."""
    return TaskRepository(Database(config.db_path, template_path=config.template_path))


def _report_failure(result: Result) -> int:
    """Print a failed result to stderr and return the exit code."""
    if isinstance(result.error, ValidationError):
        for message in result.error.messages:
            print(f"Error: {message}", file=sys.stderr)
    else:
        print(f"Error: {UNEXPECTED_ERROR}", file=sys.stderr)
    return 1


def _load_task(repo: TaskRepository, task_id: int) -> Task | None:
    """Fetch one task from the database, printing an error if that fails."""
    fetched = repo.database.get(task_id)
    if not fetched.ok:
        _report_failure(fetched)
        return None
    if fetched.value is None:
        print(f"Error: Task with ID {task_id} not found.", file=sys.stderr)
    return fetched.value


def cmd_ls(args: argparse.Namespace, config: Config) -> int:
    """List tasks."""
    repo = get_repository(config)
    filter_active = None if args.show_all else not args.completed
    loaded = repo.load(filter_active)
    if not loaded.ok:
        return _report_failure(loaded)

    options = config.query_options()
    if args.priority is not None:
        options.priority_filter = args.priority
    if args.sort is not None:
        options.sort_by = SortBy(args.sort)
    if args.order is not None:
        options.sort_order = args.order
    options.overdue_only = args.overdue

    now = datetime.now()
    tasks = options.apply(loaded.value, now=now)

    if args.json_output:
        output = [dict(t.to_dict(), overdue=is_overdue(t, now)) for t in tasks]
        print(json.dumps(output, indent=2))
    else:
        # Table output
        print(f"{'ID':<4} {'STATUS':<10} {'PRIORITY':<9} {'DUE':<11} NAME")
        for task in tasks:
            marker = " !" if is_overdue(task, now) else ""
            print(
                f"{task.id:<4} {task.status.label:<10} {task.priority.label:<9} "
                f"{task.due_date:<11} {task.name}{marker}"
            )

    return 0


def cmd_add(args: argparse.Namespace, config: Config) -> int:
    """Add a new open task."""
    repo = get_repository(config)
    task = Task(
        name=args.name,
        priority=args.priority,
        due_date=args.due_date,
        description=args.description,
    )
    result = repo.save(task)
    if not result.ok:
        return _report_failure(result)
    print(f"Added task {result.value}.")
    return 0


def cmd_edit(args: argparse.Namespace, config: Config) -> int:
    """Edit a task's name, priority, due date or description."""
    if (
        args.name is None
        and args.priority is None
        and args.due_date is None
        and args.description is None
    ):
        print(
            "Error: At least one of --name, --priority, --due or --description is required.",
            file=sys.stderr,
        )
        return 1

    repo = get_repository(config)
    task = _load_task(repo, args.task_id)
    if task is None:
        return 1

    # Keep existing values for unspecified fields; status is never edited here.
    changes = {
        key: value
        for key, value in (
            ("name", args.name),
            ("priority", args.priority),
            ("due_date", args.due_date),
            ("description", args.description),
        )
        if value is not None
    }
    result = repo.save(replace(task, **changes))
    if not result.ok:
        return _report_failure(result)
    if not result.value:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Updated task {args.task_id}.")
    return 0


def cmd_done(args: argparse.Namespace, config: Config) -> int:
    """Mark a task as completed."""
    repo = get_repository(config)
    task = _load_task(repo, args.task_id)
    if task is None:
        return 1

    result = repo.mark_done(task)
    if not result.ok:
        return _report_failure(result)
    if not result.value:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Marked task {args.task_id} as completed.")
    return 0


def cmd_rm(args: argparse.Namespace, config: Config) -> int:
    """Delete a task."""
    repo = get_repository(config)
    result = repo.delete(args.task_id)
    if not result.ok:
        return _report_failure(result)
    if not result.value:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Deleted task {args.task_id}.")
    return 0


COMMANDS = {
    "ls": cmd_ls,
    "add": cmd_add,
    "edit": cmd_edit,
    "done": cmd_done,
    "rm": cmd_rm,
}


def run_cli(
    argv: list[str] | None = None,
    config: Config | None = None,
    *,
    configure_logging: bool = False,
) -> int | None:
    """Parse arguments and dispatch to command handlers.

    ``--db`` is written into ``config`` so the TUI opens the same database.
    With ``configure_logging`` the root logger is set up once the command is
    known; the TUI owns the terminal, so it only logs to the file.

    Returns:
        Exit code (0 for success, non-zero for error) if a command was handled,
        None if no command was specified (should launch TUI).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if config is None:
        config = load_config()
    if args.db_path is not None:
        config.db_path = args.db_path

    if configure_logging:
        setup_logging(
            log_dir=config.log_dir,
            console_level=config.console_log_level,
            console=args.command is not None,
        )

    if args.command is None:
        return None
    return COMMANDS[args.command](args, config)


def main(argv: list[str] | None = None) -> int:
    """Entry point: run a CLI command, or the TUI when none is given."""
    config = load_config()
    exit_code = run_cli(argv, config, configure_logging=True)
    if exit_code is not None:
        return exit_code

    from todo_keeper.app import TodoKeeperApp

    TodoKeeperApp(config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
