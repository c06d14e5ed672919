"""Task edit modal dialog."""

from dataclasses import replace
from typing import Literal

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, TextArea

from todo_keeper.models import DUE_DATE_FORMAT, Priority, Task, validate_task

EditAction = Literal["save", "delete"]
EditResult = tuple[EditAction, Task]


class TaskEditModal(ModalScreen[EditResult | None]):
    """Modal dialog for creating or editing a task.

    The fields may hold invalid values while typing; they are validated only
    when saving, and problems are shown inside the dialog.
    """

    CSS = """
    TaskEditModal {
        align: center middle;
        background: $background 60%;
    }

    TaskEditModal > Vertical {
        width: 64;
        height: auto;
        background: $surface;
        border: solid $primary-muted;
        padding: 1 2;
    }

    TaskEditModal #modal-title {
        text-style: bold;
        margin-bottom: 1;
    }

    TaskEditModal .field-label {
        color: $text-muted;
        margin-bottom: 0;
    }

    TaskEditModal Input, TaskEditModal Select {
        margin-bottom: 1;
    }

    TaskEditModal #description-area {
        height: 5;
    }

    TaskEditModal #error-message {
        color: $error;
        margin-top: 1;
    }

    TaskEditModal #button-row {
        margin-top: 1;
        height: auto;
    }

    TaskEditModal Button {
        min-width: 10;
        border: none;
        background: transparent;
        color: $text-muted;
        padding: 0 1;
        height: 1;
    }

    TaskEditModal Button:hover {
        background: $surface-lighten-1;
        color: $text;
    }

    TaskEditModal Button:focus {
        background: $surface-lighten-1;
        color: $text;
        text-style: bold;
    }

    TaskEditModal #save-btn {
        color: $success;
    }

    TaskEditModal #delete-btn {
        color: $error;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("ctrl+s", "save", "Save", show=False),
    ]

    def __init__(self, task: Task | None = None) -> None:
        """Initialize the modal with a task to edit, or None to create one."""
        super().__init__()
        self._editing = task

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        task = self._editing
        with Vertical():
            yield Label("Edit task" if task else "New task", id="modal-title")
            yield Label("Name:", classes="field-label")
            yield Input(value=task.name if task else "", id="name-input")
            yield Label("Priority:", classes="field-label")
            yield Select(
                [(p.label, p) for p in Priority],
                value=task.priority if task else Priority.LOW,
                allow_blank=False,
                id="priority-select",
            )
            yield Label(f"Due date ({DUE_DATE_FORMAT}):", classes="field-label")
            yield Input(
                value=task.due_date if task else "",
                placeholder=DUE_DATE_FORMAT,
                id="due-input",
            )
            yield Label("Description:", classes="field-label")
            yield TextArea(
                (task.description or "") if task else "", id="description-area"
            )
            yield Label("", id="error-message")
            with Horizontal(id="button-row"):
                yield Button("[^S] Save", id="save-btn")
                if task is not None:
                    yield Button("Delete", id="delete-btn")
                yield Button("[Esc] Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the name input when the modal opens."""
        self.query_one("#error-message", Label).display = False
        self.query_one("#name-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in a text input - save the task."""
        self.action_save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-btn":
            self.action_save()
        elif event.button.id == "delete-btn" and self._editing is not None:
            self.dismiss(("delete", self._editing))
        elif event.button.id == "cancel-btn":
            self.dismiss(None)

    def action_cancel(self) -> None:
        """Handle Escape key - cancel editing."""
        self.dismiss(None)

    def build_task(self) -> Task:
        """Build a task from the current field values.

        The status of an existing task is kept; new tasks start open.
        """
        name = self.query_one("#name-input", Input).value.strip()
        priority = self.query_one("#priority-select", Select).value
        due_date = self.query_one("#due-input", Input).value.strip()
        description = self.query_one("#description-area", TextArea).text.strip() or None
        if self._editing is None:
            return Task(
                name=name, priority=priority, due_date=due_date, description=description
            )
        return replace(
            self._editing,
            name=name,
            priority=priority,
            due_date=due_date,
            description=description,
        )

    def action_save(self) -> None:
        """Validate and return the task, or show what is wrong with it."""
        task = self.build_task()
        messages = validate_task(task)
        error = self.query_one("#error-message", Label)
        if messages:
            error.update("\n".join(messages))
            error.display = True
            return
        error.display = False
        self.dismiss(("save", task))
