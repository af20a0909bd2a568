"""Google Tasks API client and task list lookup.

Usage:
    from todo_cli.tasks import TasksClient, get_todo_list_id

    client = TasksClient(auth.get_client())
    list_id = get_todo_list_id(client, "Todo")
    for task in client.list_tasks(list_id, show_completed=False):
        print(task.title)
"""

from __future__ import annotations

from todo_cli.tasks.client import Task, TaskList, TasksClient
from todo_cli.tasks.exceptions import (
    TaskInsertError,
    TaskListCreationError,
    TaskListingError,
    TaskListRetrievalError,
    TasksAPIError,
)
from todo_cli.tasks.resolver import get_todo_list_id

__all__ = [
    "TasksClient",
    "Task",
    "TaskList",
    "get_todo_list_id",
    "TasksAPIError",
    "TaskListRetrievalError",
    "TaskListCreationError",
    "TaskListingError",
    "TaskInsertError",
]
