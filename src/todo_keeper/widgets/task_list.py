"""Task list widget."""

from datetime import datetime

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import ListItem, ListView, Static

from todo_keeper.models import Task
from todo_keeper.overdue import is_overdue


class TaskEditRequested(Message):
    """Message sent when the user wants to edit a task."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class TaskDoneRequested(Message):
    """Message sent when the user wants to mark a task as done."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class TaskDeleted(Message):
    """Message sent when the user confirmed deleting a task."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__()


class StatusBarUpdate(Message):
    """Message carrying new status bar text; empty text hides the bar."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__()


class TaskListItem(ListItem):
    """One task in the list, with an optional description line."""

    def __init__(self, task: Task, overdue: bool = False) -> None:
        self._task_data = task
        self._overdue = overdue
        super().__init__()
        if task.is_completed:
            self.add_class("-completed")
        if overdue:
            self.add_class("-overdue")

    @property
    def task_data(self) -> Task:
        return self._task_data

    def compose(self) -> ComposeResult:
        task = self._task_data
        indicator = "[x]" if task.is_completed else "[ ]"
        line = f"{indicator} {task.name}  ({task.priority.label}, due {task.due_date})"
        if self._overdue:
            line += "  OVERDUE"
        yield Static(line, classes="task-line")
        if task.description:
            yield Static(task.description, classes="task-description")


class TaskList(ListView):
    """ListView of tasks with vim-style keys for moving, editing and deleting."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("e", "edit", "Edit", show=True),
        Binding("space", "mark_done", "Done", show=True),
        Binding("d", "delete_press", "Delete", show=True),
        Binding("escape", "cancel_delete", "Cancel", show=False),
    ]

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._delete_pending: bool = False

    DEFAULT_CSS = """
    TaskList {
        height: 1fr;
    }

    TaskList:focus > TaskListItem.-highlight {
        background: $accent;
    }

    TaskList > TaskListItem.-highlight {
        background: $surface;
    }

    TaskList > TaskListItem {
        height: auto;
        padding: 0 1;
    }

    TaskList > TaskListItem .task-description {
        color: $text-muted;
        padding-left: 4;
    }

    TaskList > TaskListItem.-overdue .task-line {
        color: $error;
        text-style: bold;
    }

    TaskList > TaskListItem.-completed .task-line {
        text-style: strike;
        color: $text-muted;
    }
    """

    def get_selected_task(self) -> Task | None:
        """The highlighted task, if any."""
        if self.highlighted_child and isinstance(self.highlighted_child, TaskListItem):
            return self.highlighted_child.task_data
        return None

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Enter on a row opens it for editing."""
        if isinstance(event.item, TaskListItem):
            event.stop()
            self.post_message(TaskEditRequested(event.item.task_data))

    def action_edit(self) -> None:
        task = self.get_selected_task()
        if task is not None:
            self.post_message(TaskEditRequested(task))

    def action_mark_done(self) -> None:
        """Ask to mark the highlighted task as done."""
        task = self.get_selected_task()
        if task is not None and not task.is_completed:
            self.post_message(TaskDoneRequested(task))

    def action_delete_press(self) -> None:
        """Delete the highlighted task on the second press of d."""
        task = self.get_selected_task()
        if task is None:
            return

        if not self._delete_pending:
            self._delete_pending = True
            self.post_message(StatusBarUpdate("Delete this task? Press d again, or Escape to keep it"))
        else:
            self._delete_pending = False
            self.post_message(StatusBarUpdate(""))
            self.post_message(TaskDeleted(task.id))

    def action_cancel_delete(self) -> None:
        """Forget a first press of d."""
        if self._delete_pending:
            self._delete_pending = False
            self.post_message(StatusBarUpdate(""))


class TaskListView(Vertical):
    """Widget displaying a list of tasks."""

    DEFAULT_CSS = """
    TaskListView {
        height: 1fr;
    }

    TaskListView #empty-message {
        width: 100%;
        height: 100%;
        content-align: center middle;
        color: $text-muted;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._tasks: list[Task] = []

    def compose(self) -> ComposeResult:
        yield TaskList(id="task-list")

    @property
    def task_ids(self) -> list[int]:
        return [t.id for t in self._tasks]

    def load_tasks(
        self,
        tasks: list[Task],
        now: datetime | None = None,
        select_task_id: int | None = None,
        empty_text: str = "No tasks. Press 'a' to add one.",
    ) -> None:
        """Show the given tasks in order, marking the overdue ones.

        Args:
            tasks: Tasks in display order.
            now: Reference time for the overdue markers.
            select_task_id: If provided, highlight this task after loading.
            empty_text: Text shown when there is nothing to list.
        """
        self._tasks = tasks
        if now is None:
            now = datetime.now()

        task_list = self.query_one("#task-list", TaskList)
        task_list.clear()

        empty = self.query("#empty-message")
        if not tasks:
            if empty:
                empty.first(Static).update(empty_text)
            else:
                self.mount(Static(empty_text, id="empty-message"))
            return
        empty.remove()

        for task in tasks:
            task_list.append(TaskListItem(task, overdue=is_overdue(task, now)))

        index = 0
        if select_task_id is not None and select_task_id in self.task_ids:
            index = self.task_ids.index(select_task_id)
        # Items are mounted on the next refresh.
        self.call_after_refresh(self._highlight, index)

    def _highlight(self, index: int) -> None:
        self.query_one("#task-list", TaskList).index = index

    def focus_list(self) -> None:
        self.query_one("#task-list", TaskList).focus()
