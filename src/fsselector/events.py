from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from .state import NavigationMachine, SelectionResult

log = logging.getLogger(__name__)

# Characters the incremental search accepts
SEARCH_CHARS = re.compile(r"\w|\.|-")


@dataclass(frozen=True)
class KeyPress:
    """A single key press: a logical key name and/or the typed character."""
    name: Optional[str] = None
    value: Optional[str] = None

    @classmethod
    def char(cls, value: str) -> "KeyPress":
        return cls(name=value.lower() if value.isalnum() else None, value=value)

    @property
    def is_backspace(self) -> bool:
        return self.name == "backspace"

    @property
    def is_return(self) -> bool:
        return self.name in ("return", "enter")

    @property
    def is_search_char(self) -> bool:
        return self.is_backspace or bool(self.value and SEARCH_CHARS.search(self.value))


class SearchSession:
    """Owns alphanumeric and backspace keys from "/" until the term empties
    or the line is submitted. ``close`` runs on every way out."""

    def __init__(self, machine: NavigationMachine, render: Callable[[], None]) -> None:
        self.machine = machine
        self.render = render
        self.active = True
        machine.enter_search()
        render()

    def handle(self, key: KeyPress) -> bool:
        """Feed one key; returns False when the key is not a search key"""
        if not self.active or not key.is_search_char:
            return False
        self.machine.search_key(key.value, backspace=key.is_backspace)
        if not self.machine.is_searching:
            self.close()
        else:
            self.render()
        return True

    def close(self) -> None:
        if not self.active:
            return
        self.active = False
        self.machine.search_submit()
        if not self.machine.is_answered:
            self.render()


class EventRouter:
    """Classifies raw key presses and drives a :class:`NavigationMachine`.

    ``render`` is called whenever the displayed state should be refreshed
    and ``on_done`` exactly once with the selection result.
    """

    def __init__(
        self,
        machine: NavigationMachine,
        render: Callable[[], None],
        on_done: Optional[Callable[[SelectionResult], None]] = None,
    ) -> None:
        self.machine = machine
        self.render = render
        self.on_done = on_done
        self.search: Optional[SearchSession] = None
        self.closed = False

    @property
    def searching(self) -> bool:
        return self.search is not None and self.search.active

    def feed(self, key: KeyPress) -> None:
        if self.closed:
            return
        try:
            self._dispatch(key)
        finally:
            if self.machine.is_answered:
                self._finish()

    def _dispatch(self, key: KeyPress) -> None:
        if key.is_return:
            self._on_line()
            return

        search = self.search
        if search is not None and search.active:
            search.handle(key)
            if not search.active:
                self.search = None
            return

        if key.name == "up":
            self.machine.move_up()
        elif key.name == "down":
            self.machine.move_down()
        elif key.value == "/":
            self.search = SearchSession(self.machine, self.render)
            return
        elif key.value == "-":
            self.machine.go_back()
        elif key.value == ".":
            self.machine.submit_current()

        if not self.machine.is_answered:
            self.render()

    def _on_line(self) -> None:
        if self.search is not None:
            self.search.close()
            self.search = None
        # the entry under the cursor right now, before any re-render
        self.machine.select()
        if not self.machine.is_answered:
            self.render()

    def _finish(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.search is not None:
            self.search.active = False
            self.search = None
        result = self.machine.result
        log.debug("Prompt answered: %s", result)
        self.render()
        if self.on_done is not None and result is not None:
            self.on_done(result)
