"""Dialog screens for Todo Keeper."""

from dataclasses import replace

from textual.app import ComposeResult
from textual.containers import Center, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, RadioButton, RadioSet, Static

from todo_keeper.query import PriorityFilter, QueryOptions, SortBy, SortOrder


class ConfirmDialog(ModalScreen[bool]):
    """Modal dialog asking the user to confirm an action."""

    CSS = """
    ConfirmDialog {
        align: center middle;
    }

    ConfirmDialog > Vertical {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    ConfirmDialog #title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    ConfirmDialog #message {
        margin-bottom: 1;
    }

    ConfirmDialog Center {
        margin-top: 1;
    }

    ConfirmDialog Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("enter", "confirm", "Confirm"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, message: str, confirm_label: str = "Yes") -> None:
        """Initialize dialog with its title, message and confirm button label."""
        super().__init__()
        self._title = title
        self._message = message
        self._confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        with Vertical():
            yield Static(self._title, id="title")
            yield Label(self._message, id="message")
            with Center():
                yield Button(self._confirm_label, variant="primary", id="confirm")
                yield Button("Cancel", variant="default", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        self.dismiss(event.button.id == "confirm")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


_SORT_BY_CHOICES = [(SortBy.PRIORITY, "Priority"), (SortBy.DATE, "Due date")]
_SORT_ORDER_CHOICES = [
    (SortOrder.ASCENDING, "Ascending"),
    (SortOrder.DESCENDING, "Descending"),
]
_PRIORITY_CHOICES = [
    (PriorityFilter.ALL, "All"),
    (PriorityFilter.LOW, "Low"),
    (PriorityFilter.MEDIUM, "Medium"),
    (PriorityFilter.HIGH, "High"),
]


class FilterSortDialog(ModalScreen[QueryOptions | None]):
    """Modal dialog for choosing the sort field, sort order and priority filter.

    Dismisses with the new options, or None when cancelled. The overdue-only
    flag of the given options is passed through unchanged.
    """

    CSS = """
    FilterSortDialog {
        align: center middle;
    }

    FilterSortDialog > Vertical {
        width: 50;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    FilterSortDialog #title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    FilterSortDialog .section-label {
        color: $text-muted;
        margin-top: 1;
    }

    FilterSortDialog RadioSet {
        width: 100%;
    }

    FilterSortDialog #button-row {
        margin-top: 1;
        height: auto;
    }

    FilterSortDialog Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, options: QueryOptions) -> None:
        super().__init__()
        self._options = options

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        with Vertical():
            yield Static("Filter / Sort", id="title")
            yield Label("Sort by:", classes="section-label")
            with RadioSet(id="sort-by"):
                for value, label in _SORT_BY_CHOICES:
                    yield RadioButton(label, value=value is self._options.sort_by)
            yield Label("Order:", classes="section-label")
            with RadioSet(id="sort-order"):
                for value, label in _SORT_ORDER_CHOICES:
                    yield RadioButton(label, value=value is self._options.sort_order)
            yield Label("Priority:", classes="section-label")
            with RadioSet(id="priority-filter"):
                for value, label in _PRIORITY_CHOICES:
                    yield RadioButton(label, value=value is self._options.priority_filter)
            with Horizontal(id="button-row"):
                yield Button("Apply", variant="primary", id="apply")
                yield Button("Reset", variant="default", id="reset")
                yield Button("Cancel", variant="default", id="cancel")

    def _selected(self, radio_set_id: str, choices: list) -> object:
        index = self.query_one(f"#{radio_set_id}", RadioSet).pressed_index
        if index < 0:
            index = 0
        return choices[index][0]

    def _select(self, radio_set_id: str, choices: list, value: object) -> None:
        buttons = list(self.query_one(f"#{radio_set_id}", RadioSet).query(RadioButton))
        for button, (choice, _) in zip(buttons, choices):
            if choice is value:
                button.value = True

    def selected_options(self) -> QueryOptions:
        """The options currently picked in the dialog."""
        return replace(
            self._options,
            sort_by=self._selected("sort-by", _SORT_BY_CHOICES),
            sort_order=self._selected("sort-order", _SORT_ORDER_CHOICES),
            priority_filter=self._selected("priority-filter", _PRIORITY_CHOICES),
        )

    def reset(self) -> None:
        """Put every choice back to its default."""
        defaults = QueryOptions()
        self._select("sort-by", _SORT_BY_CHOICES, defaults.sort_by)
        self._select("sort-order", _SORT_ORDER_CHOICES, defaults.sort_order)
        self._select("priority-filter", _PRIORITY_CHOICES, defaults.priority_filter)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "apply":
            self.dismiss(self.selected_options())
        elif event.button.id == "reset":
            self.reset()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
