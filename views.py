# views.py
#
# Description:
# This file contains all the UI components of the application, built with
# rich renderables. render_frame() maps the UI state and a task snapshot to
# one full-screen frame: a menu strip, the active view, a footer and,
# when open, the add-task popup drawn on top of everything else. Nothing
# here touches the store or changes the state.
#

from typing import List, NamedTuple, Optional, Tuple

from rich.align import Align
from rich.console import Console, ConsoleOptions, RenderableType, RenderResult
from rich.layout import Layout
from rich.padding import Padding
from rich.panel import Panel
from rich.segment import Segment
from rich.style import Style
from rich.table import Table
from rich.text import Text

from keybindings import APP_BINDINGS, TASK_LIST_BINDINGS, footer_hints
from state import UIState, View
from task_manager import Task

COPYRIGHT = "todo-CLI 2023 - all rights reserved"
MARGIN = 2
POPUP_PERCENT_X = 60
POPUP_PERCENT_Y = 20

BORDER_STYLE = Style(color="white")
HIGHLIGHT_STYLE = Style(color="black", bgcolor="yellow", bold=True)


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


def centered_rect(percent_x: int, percent_y: int, width: int, height: int) -> Rect:
    """
    Returns a rectangle centered in a width x height area.

    The rectangle takes percent_x of the width and percent_y of the height,
    but is never shorter than 3 rows (border, one line, border) while the
    area allows it.
    """
    rect_width = width * percent_x // 100
    rect_height = max(min(3, height), height * percent_y // 100)
    return Rect(
        x=(width - rect_width) // 2,
        y=(height - rect_height) // 2,
        width=rect_width,
        height=rect_height,
    )


class Overlay:
    """Draws `popup` over the centre of `base`, replacing what was under it."""

    def __init__(self, base: RenderableType, popup: RenderableType, percent_x: int, percent_y: int):
        self.base = base
        self.popup = popup
        self.percent_x = percent_x
        self.percent_y = percent_y

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height or console.height
        lines = console.render_lines(self.base, options.update_dimensions(width, height))
        area = centered_rect(self.percent_x, self.percent_y, width, height)
        popup_lines = console.render_lines(self.popup, options.update_dimensions(area.width, area.height))

        for row, popup_line in zip(range(area.y, area.y + area.height), popup_lines):
            parts = list(Segment.divide(lines[row], [area.x, area.x + area.width, width]))
            left = parts[0] if parts else []
            right = parts[2] if len(parts) > 2 else []
            lines[row] = left + popup_line + right

        new_line = Segment.line()
        for line in lines:
            yield from line
            yield new_line


class TaskList:
    """Task names, one per row, scrolled so the selection stays visible."""

    def __init__(self, tasks: List[Task], selected: Optional[int]):
        self.tasks = tasks
        self.selected = selected

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        height = options.height or len(self.tasks)
        offset = 0
        if self.selected is not None and self.selected >= height:
            offset = self.selected - height + 1
        for index in range(offset, min(len(self.tasks), offset + height)):
            style = HIGHLIGHT_STYLE if index == self.selected else ""
            yield Text(self.tasks[index].name, style=style, no_wrap=True, overflow="ellipsis")


def display_timestamp(value) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def selected_task(state: UIState, tasks: List[Task]) -> Optional[Task]:
    """
    Returns the task under the cursor.

    A cursor past the end of the list shows the last task; the state itself
    is left alone. Raises ValueError when tasks exist but nothing is selected.
    """
    if not tasks:
        return None
    if state.selected_index is None:
        raise ValueError("Cannot render task details: tasks exist but none is selected")
    return tasks[min(state.selected_index, len(tasks) - 1)]


def render_menu(active_view: View) -> Panel:
    menu = Text()
    for position, view in enumerate(View):
        if position:
            menu.append("|")
        title = view.value
        rest_style = "yellow" if view is active_view else "white"
        menu.append(" ")
        menu.append(title[0], style="underline yellow")
        menu.append(title[1:], style=rest_style)
        menu.append(" ")
    return Panel(menu, title="Menu", title_align="left", border_style=BORDER_STYLE)


def render_home() -> Panel:
    home = Text(justify="center")
    home.append("\nWelcome\n\nto\n")
    home.append("todo-CLI", style="bright_blue")
    home.append("\n\nPress 't' to access the todo list")
    return Panel(home, title="Home", title_align="left", border_style=BORDER_STYLE)


def render_detail(task: Optional[Task]) -> Panel:
    table = Table(expand=True, box=None, header_style="bold", show_edge=False)
    table.add_column("ID", ratio=8)
    table.add_column("Name", ratio=23)
    table.add_column("Created At", ratio=23)
    table.add_column("Completed At", ratio=23)
    if task is not None:
        table.add_row(
            str(task.id),
            task.name,
            display_timestamp(task.created_at),
            display_timestamp(task.completed_at),
        )
    return Panel(table, title="Detail", title_align="left", border_style=BORDER_STYLE)


def render_tasks(state: UIState, tasks: List[Task]) -> Tuple[Layout, Layout]:
    task = selected_task(state, tasks)
    selected = None if task is None else min(state.selected_index, len(tasks) - 1)

    task_list = Panel(TaskList(tasks, selected), title="Todo list", title_align="left", border_style=BORDER_STYLE)
    return Layout(task_list, name="list", ratio=1), Layout(render_detail(task), name="detail", ratio=4)


def render_footer(active_view: View) -> Panel:
    tables = [APP_BINDINGS, TASK_LIST_BINDINGS] if active_view is View.TASKS else [APP_BINDINGS]
    return Panel(
        Align.center(Text(COPYRIGHT, style="bright_cyan")),
        title="Copyright",
        title_align="left",
        subtitle=footer_hints(*tables),
        border_style=BORDER_STYLE,
    )


def render_popup() -> Panel:
    return Panel(
        Text("Press Enter to close", style="dim"),
        title="Add task",
        title_align="left",
        border_style=BORDER_STYLE,
    )


def render_frame(state: UIState, tasks: List[Task]) -> RenderableType:
    """Builds the complete frame for `state` over the task snapshot `tasks`."""
    layout = Layout(name="root")
    layout.split_column(
        Layout(render_menu(state.active_view), name="menu", size=3),
        Layout(name="body", minimum_size=2),
        Layout(render_footer(state.active_view), name="footer", size=3),
    )
    if state.active_view is View.HOME:
        layout["body"].update(render_home())
    else:
        layout["body"].split_row(*render_tasks(state, tasks))

    # The outer layout pins the frame to the full screen height.
    frame = Layout(Padding(layout, MARGIN), name="screen")
    if state.popup_visible:
        return Overlay(frame, render_popup(), POPUP_PERCENT_X, POPUP_PERCENT_Y)
    return frame
