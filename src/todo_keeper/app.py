"""Main application module."""

import logging
from datetime import datetime

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from todo_keeper.config import Config, load_config
from todo_keeper.database import Database
from todo_keeper.errors import ValidationError
from todo_keeper.models import Task
from todo_keeper.query import QueryOptions
from todo_keeper.repository import TaskRepository
from todo_keeper.result import Result
from todo_keeper.screens import ConfirmDialog, FilterSortDialog, TaskEditModal
from todo_keeper.screens.task_edit_modal import EditResult
from todo_keeper.widgets import TaskListView
from todo_keeper.widgets.task_list import (
    StatusBarUpdate,
    TaskDeleted,
    TaskDoneRequested,
    TaskEditRequested,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred."


class TodoKeeperApp(App):
    """A Textual app for todo-keeper.

    Shows either the open or the completed tasks. After every change the
    list is reloaded with the view's own status filter, so a task that
    changes status leaves the current view.
    """

    show_completed: reactive[bool] = reactive(False, bindings=True)

    BINDINGS = [
        ("a", "add_task", "Add task"),
        ("f", "filter_sort", "Filter/Sort"),
        ("o", "toggle_overdue", "Overdue"),
        Binding("c", "show_completed_tasks", "Show done"),
        Binding("c", "show_active_tasks", "Show open"),
        ("D", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    #view-info {
        height: 1;
        width: 100%;
        color: $text-muted;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        width: 100%;
        background: $surface;
        color: $warning;
        padding: 0 1;
    }

    #status-bar.hidden {
        display: none;
    }
    """

    def __init__(self, config: Config | None = None) -> None:
        """Initialize the application."""
        super().__init__()
        self._config = config if config is not None else load_config()
        self.database = Database(
            self._config.db_path, template_path=self._config.template_path
        )
        self.repository = TaskRepository(self.database)
        self.options: QueryOptions = self._config.query_options()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Control which 'c' binding is shown based on current state."""
        if action == "show_completed_tasks":
            return not self.show_completed
        if action == "show_active_tasks":
            return self.show_completed
        return True

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        yield Static("", id="view-info")
        yield TaskListView()
        yield Static("", id="status-bar", classes="hidden")
        yield Footer()

    def on_mount(self) -> None:
        """Create the database on first run, then show the open tasks."""
        if self._config.theme in self.available_themes:
            self.theme = self._config.theme
        else:
            logger.warning("Unknown theme %r, using the default", self._config.theme)
        initialized = self.database.initialize()
        if not initialized.ok:
            self.notify(
                f"Cannot open database at {self.database.db_path}", severity="error"
            )
            self.exit(return_code=1)
            return
        if initialized.value:
            self.notify(f"Created database at {self.database.db_path}")
        self._load_tasks()

    def _load_tasks(self, select_task_id: int | None = None) -> None:
        """Reload tasks from the database and show the current view."""
        loaded = self.repository.load(filter_active=not self.show_completed)
        if not loaded.ok:
            self._notify_failure(loaded)
        self._show_tasks(select_task_id)

    def _show_tasks(self, select_task_id: int | None = None) -> None:
        """Apply filter and sort to the cached view and display it."""
        now = datetime.now()
        tasks = self.options.apply(self.repository.current(), now=now)
        self.title = "Todo Keeper - " + ("Completed" if self.show_completed else "Open")
        self.query_one("#view-info", Static).update(self.options.describe())

        if self.options.overdue_only:
            empty_text = "No overdue tasks."
        elif self.show_completed:
            empty_text = "No completed tasks."
        else:
            empty_text = "No open tasks. Press 'a' to add one."

        task_list_view = self.query_one(TaskListView)
        task_list_view.load_tasks(
            tasks, now=now, select_task_id=select_task_id, empty_text=empty_text
        )
        task_list_view.focus_list()

    def _notify_failure(self, result: Result) -> None:
        """Show a failed result to the user."""
        if isinstance(result.error, ValidationError):
            self.notify("\n".join(result.error.messages), severity="warning")
        else:
            self.notify(UNEXPECTED_ERROR, severity="error")

    def action_show_completed_tasks(self) -> None:
        self.show_completed = True
        self._load_tasks()

    def action_show_active_tasks(self) -> None:
        self.show_completed = False
        self._load_tasks()

    def action_toggle_overdue(self) -> None:
        """Switch between all tasks of the view and only the overdue ones."""
        self.options.overdue_only = not self.options.overdue_only
        self._load_tasks()

    def action_filter_sort(self) -> None:
        self.push_screen(FilterSortDialog(self.options), self._on_filter_result)

    def _on_filter_result(self, options: QueryOptions | None) -> None:
        if options is None:
            return
        self.options = options
        self._load_tasks()

    def action_add_task(self) -> None:
        self.push_screen(TaskEditModal(), self._on_edit_result)

    def on_task_edit_requested(self, event: TaskEditRequested) -> None:
        self.push_screen(TaskEditModal(event.task), self._on_edit_result)

    def _on_edit_result(self, result: EditResult | None) -> None:
        """Save or delete the task returned by the edit modal."""
        if result is None:
            return
        action, task = result
        if action == "delete":
            self._delete_task(task.id)
            return

        saved = self.repository.save(task)
        if not saved.ok:
            self._notify_failure(saved)
            return
        if not saved.value:
            self.notify("The task no longer exists.", severity="warning")
            self._load_tasks()
            return
        self._show_tasks(select_task_id=saved.value)

    def on_task_done_requested(self, event: TaskDoneRequested) -> None:
        task = event.task
        self.push_screen(
            ConfirmDialog("Mark as done", f"Mark '{task.name}' as done?", "Done"),
            lambda confirmed: self._mark_done(task) if confirmed else None,
        )

    def _mark_done(self, task: Task) -> None:
        result = self.repository.mark_done(task)
        if not result.ok:
            self._notify_failure(result)
            return
        if not result.value:
            self.notify("The task no longer exists.", severity="warning")
            self._load_tasks()
            return
        self._show_tasks()

    def on_task_deleted(self, event: TaskDeleted) -> None:
        self._delete_task(event.task_id)

    def _delete_task(self, task_id: int) -> None:
        """Delete a task and keep the selection near where it was."""
        ids = self.query_one(TaskListView).task_ids
        next_task_id: int | None = None
        if task_id in ids:
            idx = ids.index(task_id)
            if idx < len(ids) - 1:
                next_task_id = ids[idx + 1]
            elif idx > 0:
                next_task_id = ids[idx - 1]

        result = self.repository.delete(task_id)
        if not result.ok:
            self._notify_failure(result)
            return
        if not result.value:
            self.notify("The task no longer exists.", severity="warning")
            self._load_tasks()
            return
        self._show_tasks(select_task_id=next_task_id)

    def on_status_bar_update(self, event: StatusBarUpdate) -> None:
        """Handle status bar updates from widgets."""
        status_bar = self.query_one("#status-bar", Static)
        if event.text:
            status_bar.update(event.text)
            status_bar.remove_class("hidden")
        else:
            status_bar.update("")
            status_bar.add_class("hidden")

    def action_toggle_dark(self) -> None:
        """Toggle dark mode."""
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"
