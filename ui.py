# ui.py
import logging
import queue
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.live import Live

from events import DEFAULT_TICK_RATE, Event, InputPump, KeyPress, PumpStopped
from keybindings import APP_BINDINGS, TASK_LIST_BINDINGS, action_map
from state import UIState, View
from storage import StoreError
from task_manager import Task, TaskManager
from views import render_frame

logger = logging.getLogger(__name__)

QUIT = "quit"

_APP_ACTIONS = action_map(APP_BINDINGS)
_TASK_LIST_ACTIONS = action_map(TASK_LIST_BINDINGS)


def action_show_home(state: UIState, store: TaskManager) -> UIState:
    return replace(state, active_view=View.HOME)


def action_show_tasks(state: UIState, store: TaskManager) -> UIState:
    return replace(state, active_view=View.TASKS)


def action_open_popup(state: UIState, store: TaskManager) -> UIState:
    return replace(state, popup_visible=True)


def action_close_popup(state: UIState, store: TaskManager) -> UIState:
    return replace(state, popup_visible=False)


def action_delete_task(state: UIState, store: TaskManager) -> UIState:
    """Deletes the selected task and moves the cursor up one row, stopping at 0."""
    index = state.selected_index
    if index is None:
        return state
    store.remove_at(index)
    return replace(state, selected_index=max(index - 1, 0))


def action_cursor_down(state: UIState, store: TaskManager) -> UIState:
    """Moves the cursor down, wrapping from the last task to the first."""
    index = state.selected_index
    if index is None:
        return state
    count = store.count()
    return replace(state, selected_index=0 if index >= count - 1 else index + 1)


def action_cursor_up(state: UIState, store: TaskManager) -> UIState:
    """Moves the cursor up, wrapping from the first task to the last."""
    index = state.selected_index
    if index is None:
        return state
    count = store.count()
    if count == 0:
        return replace(state, selected_index=0)
    if index > 0:
        # A cursor left past the end by an external edit lands on the last task.
        return replace(state, selected_index=min(index, count) - 1)
    return replace(state, selected_index=count - 1)


ACTIONS: Dict[str, Callable[[UIState, TaskManager], UIState]] = {
    "show_home": action_show_home,
    "show_tasks": action_show_tasks,
    "open_popup": action_open_popup,
    "close_popup": action_close_popup,
    "delete_task": action_delete_task,
    "cursor_down": action_cursor_down,
    "cursor_up": action_cursor_up,
}


def dispatch(state: UIState, event: Event, store: TaskManager) -> Tuple[UIState, bool]:
    """
    Applies one event to the UI state.

    Returns the new state and whether the loop should keep running. Store
    errors raised by an action are logged and leave the state unchanged.
    """
    if not isinstance(event, KeyPress):
        return state, True

    action = _APP_ACTIONS.get(event.key)
    if action is None and state.active_view is View.TASKS:
        action = _TASK_LIST_ACTIONS.get(event.key)
    if action is None:
        return state, True
    if action == QUIT:
        return state, False

    try:
        return ACTIONS[action](state, store), True
    except StoreError as exc:
        logger.warning("Ignoring %r (%s): %s", event.key, action, exc)
        return state, True


class App:
    """
    The render loop. Draws a frame, waits for the next event from the input
    pump and dispatches it, until the quit key is pressed. If the pump dies
    the error it reported is raised here.
    """

    def __init__(self, store: TaskManager, key_source, console: Optional[Console] = None,
                 tick_rate: float = DEFAULT_TICK_RATE):
        self.store = store
        self.key_source = key_source
        self.console = console or Console()
        self.tick_rate = tick_rate
        self.events: "queue.Queue[Event]" = queue.Queue()
        self.state = UIState()

    def _snapshot(self, previous: Optional[List[Task]]) -> List[Task]:
        try:
            return self.store.load()
        except StoreError:
            if previous is None:
                raise
            logger.warning("Could not reload tasks, redrawing the last snapshot", exc_info=True)
            return previous

    def run(self) -> UIState:
        with self.key_source, Live(console=self.console, screen=True, auto_refresh=False) as live:
            # A store that cannot be read before the first frame is fatal.
            tasks = self._snapshot(None)
            live.update(render_frame(self.state, tasks), refresh=True)

            pump = InputPump(self.key_source, self.events, self.tick_rate)
            pump.start()
            logger.info("UI started")

            try:
                while True:
                    event = self.events.get()
                    if isinstance(event, PumpStopped):
                        if event.error is not None:
                            raise event.error
                        break
                    self.state, running = dispatch(self.state, event, self.store)
                    if not running:
                        break
                    tasks = self._snapshot(tasks)
                    live.update(render_frame(self.state, tasks), refresh=True)
            except KeyboardInterrupt:
                logger.info("Interrupted")
            finally:
                # Not joined: the thread may be blocked in poll() and dies with the process.
                pump.stop()

        logger.info("UI stopped")
        return self.state
