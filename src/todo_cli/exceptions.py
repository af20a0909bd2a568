"""Base exception for todo-cli."""


class TodoError(Exception):
    """Base exception for every failure the CLI reports to the user."""

    pass
