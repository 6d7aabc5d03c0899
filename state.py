# state.py
#
# Description:
# This file defines the UI state: which view is active, where the list
# cursor is and whether the add-task popup is shown. The state is immutable;
# the event loop replaces it with the value returned by each transition.
#

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class View(str, Enum):
    """The menu entries, in tab order."""
    HOME = "Home"
    TASKS = "Tasks"


@dataclass(frozen=True)
class UIState:
    active_view: View = View.HOME
    selected_index: Optional[int] = 0
    popup_visible: bool = False
