# keybindings.py
#
# Description:
# This file defines the keybindings for the application.
# Keeping them in a separate file makes them easier to manage.
# Keys use textual's key names; each action maps to an action_<name>
# function in ui.py.
#

from typing import Dict, List

from textual.binding import Binding

# Bindings that are active in every view
APP_BINDINGS = [
    Binding("q", "quit", "Quit"),
    Binding("h", "show_home", "Home"),
    Binding("t", "show_tasks", "Tasks"),
    Binding("a", "open_popup", "Add"),
    Binding("enter", "close_popup", "Close", show=False),
]

# Bindings that only act while the task list is shown
TASK_LIST_BINDINGS = [
    Binding("d", "delete_task", "Delete"),
    Binding("down", "cursor_down", "Down", show=False),
    Binding("up", "cursor_up", "Up", show=False),
]


def action_map(*tables: List[Binding]) -> Dict[str, str]:
    """Flattens binding tables into a key -> action lookup."""
    return {binding.key: binding.action for table in tables for binding in table}


def footer_hints(*tables: List[Binding]) -> str:
    """Formats the visible bindings as 'q Quit · h Home ...'."""
    return " · ".join(
        f"{binding.key} {binding.description}"
        for table in tables
        for binding in table
        if binding.show
    )
