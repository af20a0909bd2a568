"""CLI for todo-cli - a single Google Tasks list from the terminal.

Usage:
    todo                      # List incomplete items of the Todo list
    todo Buy milk             # Add "Buy milk" to the Todo list
    todo fix -v flag          # Every word is part of the title, dashes included

The first run prints an authorization URL and waits for the code; the
resulting token is cached in ~/.credentials/todo-cli.json.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from todo_cli.exceptions import TodoError
from todo_cli.tasks.client import API_ERRORS, TasksClient
from todo_cli.tasks.exceptions import TaskInsertError, TaskListingError

logger = logging.getLogger(__name__)


def derive_title(words: list[str]) -> str:
    """Join command-line words into a task title."""
    return " ".join(words)


def list_todo_items(client: TasksClient, list_id: str, out: TextIO | None = None) -> int:
    """Print the titles of incomplete tasks, one per line, in API order."""
    out = out or sys.stdout
    try:
        tasks = client.list_tasks(list_id, show_completed=False)
    except API_ERRORS as e:
        logger.error(f"Unable to list tasks: {e}")
        raise TaskListingError(f"Unable to retrieve tasks: {e}") from e

    for task in tasks:
        print(task.title, file=out)
    return 0


def add_todo_item(
    client: TasksClient,
    list_id: str,
    title: str,
    list_name: str,
    out: TextIO | None = None,
) -> int:
    """Add a task with the given title and confirm it."""
    out = out or sys.stdout
    try:
        task = client.create_task(title, list_id)
    except API_ERRORS as e:
        logger.error(f"Unable to create task: {e}")
        raise TaskInsertError(f"Could not add task to {list_name} list: {e}") from e

    print(f"Task '{task.title}' successfully added to your {list_name} list", file=out)
    return 0


def run(title: str) -> int:
    """Authenticate, resolve the list, then list or add."""
    from todo_cli.config import load_settings
    from todo_cli.google import GoogleOAuth, TokenCache, resolve_cache_path
    from todo_cli.tasks import get_todo_list_id

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cache = TokenCache(resolve_cache_path(settings.credentials_dir, settings.token_cache_name))
    auth = GoogleOAuth(settings.client_secret_path, cache, scopes=list(settings.scopes))
    client = TasksClient(service=auth.get_client())

    list_id = get_todo_list_id(client, settings.list_name)

    if not title:
        return list_todo_items(client, list_id)
    return add_todo_item(client, list_id, title, settings.list_name)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    title = derive_title(argv if argv is not None else sys.argv[1:])

    try:
        return run(title)
    except TodoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
