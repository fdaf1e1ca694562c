from __future__ import annotations

from typing import List, Optional, Tuple

from .config import IconSet
from .listing import EntryKind, Listing
from .state import NavigationMachine

Fragment = Tuple[str, str]
Line = List[Fragment]

POINTER = "❯"
SEPARATOR_LINE = "─" * 14
MORE_HINT = "(Move up and down to reveal more choices)"


class Paginator:
    """Keeps a window of ``page_size`` lines around the active line."""

    def __init__(self, page_size: int = 7) -> None:
        self.page_size = page_size
        self.top = 0

    def reset(self) -> None:
        self.top = 0

    def paginate(self, lines: List[Line], active: int, page_size: Optional[int] = None) -> List[Line]:
        size = page_size or self.page_size
        if len(lines) <= size:
            self.top = 0
            return list(lines)

        # If selection is above viewport, scroll up
        if active < self.top:
            self.top = active
        # If selection is below viewport, scroll down
        elif active >= self.top + size:
            self.top = active - size + 1
        self.top = max(0, min(self.top, len(lines) - size))

        window = list(lines[self.top:self.top + size])
        window.append([("class:hint", MORE_HINT)])
        return window


def render_listing(listing: Listing, cursor: int, icons: Optional[IconSet]) -> Tuple[List[Line], int]:
    """Render every entry as one line.

    Returns the lines and the index of the line holding the cursor.
    """
    lines: List[Line] = []
    active = 0
    separator_offset = 0
    for idx, entry in enumerate(listing):
        if entry.kind is EntryKind.SEPARATOR:
            separator_offset += 1
            lines.append([("class:separator", "  " + SEPARATOR_LINE)])
            continue

        selected = (idx - separator_offset) == cursor
        text = (POINTER + " ") if selected else "  "
        if icons is not None:
            if entry.is_directory:
                text += icons.current_dir if entry.kind is EntryKind.CURRENT else icons.dir
            elif entry.is_file:
                text += icons.file
            text += " "
        text += entry.label

        if selected:
            style = "class:selected"
            active = len(lines)
        elif entry.is_directory:
            style = "class:dir"
        else:
            style = "class:file"
        lines.append([(style, text + " ")])
    return lines, active


def render_question(message: str) -> List[Fragment]:
    return [("class:qmark", "? "), ("class:question", message), ("", " ")]


def render_prompt(
    machine: NavigationMachine,
    paginator: Paginator,
    notice: Optional[str] = None,
) -> List[Fragment]:
    """Formatted text for the whole prompt in its current state"""
    config = machine.config
    out: List[Fragment] = render_question(config.message)

    result = machine.result
    if result is not None:
        out.append(("class:answer", result.path))
        out.append(("", "\n"))
        return out

    out.append(("class:path_label", "\nCurrent directory: "))
    out.append(("class:path", machine.current_path))
    out.append(("", "\n\n"))

    lines, active = render_listing(machine.resolved_listing(), machine.cursor, config.icons)
    for line in paginator.paginate(lines, active):
        out.extend(line)
        out.append(("", "\n"))

    if notice:
        out.append(("class:error", notice + "\n"))

    if machine.is_searching:
        out.append(("class:search", "Search: " + machine.search_term))
    else:
        out.append(("class:help", '(Use "/" key to search this directory)\n'))
        out.append(("class:help", '(Use "-" key to navigate to the parent folder)'))
    return out
