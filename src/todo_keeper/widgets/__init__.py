"""Widgets for Todo Keeper."""

from todo_keeper.widgets.task_list import TaskListView

__all__ = ["TaskListView"]
