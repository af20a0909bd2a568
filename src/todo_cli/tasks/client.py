"""Google Tasks API client implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httplib2
from google.auth import exceptions as google_auth_exceptions
from googleapiclient.errors import HttpError

# Failures a Tasks API call can raise: HTTP error responses, credential
# refresh failures and transport errors.
API_ERRORS = (
    HttpError,
    google_auth_exceptions.GoogleAuthError,
    httplib2.HttpLib2Error,
    OSError,
)


@dataclass
class TaskList:
    """A Google Tasks list."""

    id: str
    title: str


@dataclass
class Task:
    """A single item on a task list."""

    id: str
    title: str


class TasksClient:
    """The four Tasks v1 calls the todo command needs.

    Failures in ``API_ERRORS`` propagate unchanged; callers map them to
    their own errors. Only the first page of any listing is read.

    Usage:
        client = TasksClient(auth.get_client())
        list_id = client.list_task_lists()[0].id
        for task in client.list_tasks(list_id, show_completed=False):
            print(task.title)
    """

    def __init__(self, service: Any) -> None:
        """Initialize Tasks client.

        Args:
            service: Authenticated Tasks v1 service (``GoogleOAuth.get_client()``).
        """
        self._service = service

    def list_task_lists(self) -> list[TaskList]:
        """Return the user's task lists in API order."""
        results = self._service.tasklists().list().execute()
        return [_parse(TaskList, item) for item in results.get("items", [])]

    def create_task_list(self, title: str) -> TaskList:
        """Create a task list titled ``title``."""
        result = self._service.tasklists().insert(body={"title": title}).execute()
        return _parse(TaskList, result)

    def list_tasks(self, tasklist_id: str, show_completed: bool = True) -> list[Task]:
        """Return the tasks of a list in API order.

        Args:
            tasklist_id: Task list ID.
            show_completed: Include completed tasks.
        """
        results = (
            self._service.tasks()
            .list(tasklist=tasklist_id, showCompleted=show_completed)
            .execute()
        )
        return [_parse(Task, item) for item in results.get("items", [])]

    def create_task(self, title: str, tasklist_id: str) -> Task:
        """Insert a task carrying only a title."""
        result = self._service.tasks().insert(tasklist=tasklist_id, body={"title": title}).execute()
        return _parse(Task, result)


def _parse(kind, data: dict):
    # Both resources are identified by id and labelled by title
    return kind(id=data["id"], title=data.get("title", ""))
