"""Google Tasks exceptions."""

from todo_cli.exceptions import TodoError


class TasksAPIError(TodoError):
    """Base exception for Tasks API failures."""

    pass


class TaskListRetrievalError(TasksAPIError):
    """Raised when the user's task lists cannot be listed."""

    pass


class TaskListCreationError(TasksAPIError):
    """Raised when the designated task list is missing and cannot be created."""

    def __init__(self, list_name: str, reason: str):
        self.list_name = list_name
        super().__init__(f"No {list_name} tasklist found: {reason}")


class TaskListingError(TasksAPIError):
    """Raised when the tasks of a list cannot be fetched."""

    pass


class TaskInsertError(TasksAPIError):
    """Raised when a new task cannot be created."""

    pass
