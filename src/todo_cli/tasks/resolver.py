"""Find-or-create lookup for the designated task list."""

from __future__ import annotations

import logging

from todo_cli.tasks.client import API_ERRORS, TasksClient
from todo_cli.tasks.exceptions import TaskListCreationError, TaskListRetrievalError

logger = logging.getLogger(__name__)


def get_todo_list_id(client: TasksClient, list_name: str) -> str:
    """Return the id of the first task list titled ``list_name``.

    The list is created when no title matches exactly. Failing to list the
    task lists is a hard error; a missing list is expected on first use.

    Raises:
        TaskListRetrievalError: If the task lists cannot be retrieved.
        TaskListCreationError: If the list is missing and cannot be created.
    """
    try:
        task_lists = client.list_task_lists()
    except API_ERRORS as e:
        logger.error(f"Unable to retrieve task lists: {e}")
        raise TaskListRetrievalError(f"Unable to retrieve task lists: {e}") from e

    for task_list in task_lists:
        if task_list.title == list_name:
            return task_list.id

    logger.info(f"No task list titled {list_name!r}, creating it")
    try:
        created = client.create_task_list(list_name)
    except API_ERRORS as e:
        raise TaskListCreationError(list_name, str(e)) from e

    return created.id
