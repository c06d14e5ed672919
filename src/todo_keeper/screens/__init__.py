"""Screen modules for Todo Keeper."""

from todo_keeper.screens.dialogs import ConfirmDialog, FilterSortDialog
from todo_keeper.screens.task_edit_modal import TaskEditModal

__all__ = ["ConfirmDialog", "FilterSortDialog", "TaskEditModal"]
