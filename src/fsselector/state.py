from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .config import SelectorConfig
from .errors import DirectoryReadError
from .listing import Entry, EntryKind, Listing, compose_listing, resolve_metadata

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    is_directory: bool
    is_file: bool
    path: str

    def as_dict(self) -> Dict[str, Union[bool, str]]:
        return {"isDirectory": self.is_directory, "isFile": self.is_file, "path": self.path}


@dataclass(frozen=True)
class Browsing:
    pass


@dataclass(frozen=True)
class Searching:
    term: str = ""


@dataclass(frozen=True)
class Answered:
    result: SelectionResult


Mode = Union[Browsing, Searching, Answered]

BROWSING = Browsing()


@dataclass
class NavigationState:
    current_path: str
    listing: Listing
    cursor: int = 0
    mode: Mode = BROWSING


class NavigationMachine:
    """Owns the navigation state and applies semantic events to it.

    Every public event method returns ``True`` when it changed something
    worth re-rendering. Nothing is processed once an answer was produced.
    """

    def __init__(self, config: SelectorConfig) -> None:
        self.config = config
        self.root = config.root
        listing = compose_listing(config.base_path, self.root, config)
        cursor = listing.index_of(config.default)
        self.state = NavigationState(
            current_path=config.base_path,
            listing=listing,
            cursor=cursor if cursor >= 0 else 0,
        )

    # -- read-only views -------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def current_path(self) -> str:
        return self.state.current_path

    @property
    def listing(self) -> Listing:
        return self.state.listing

    @property
    def is_answered(self) -> bool:
        return isinstance(self.state.mode, Answered)

    @property
    def is_searching(self) -> bool:
        return isinstance(self.state.mode, Searching)

    @property
    def search_term(self) -> str:
        mode = self.state.mode
        return mode.term if isinstance(mode, Searching) else ""

    @property
    def result(self) -> Optional[SelectionResult]:
        mode = self.state.mode
        return mode.result if isinstance(mode, Answered) else None

    def resolved_listing(self) -> Listing:
        """The current listing with fresh file/directory flags"""
        return resolve_metadata(self.state.listing, self.state.current_path)

    def selected_entry(self) -> Entry:
        return self.resolved_listing().choice(self.state.cursor)

    # -- cursor ----------------------------------------------------------

    def move_up(self) -> bool:
        if not isinstance(self.state.mode, Browsing):
            return False
        last = len(self.state.listing.real_choices) - 1
        self.state.cursor = self.state.cursor - 1 if self.state.cursor > 0 else last
        return True

    def move_down(self) -> bool:
        if not isinstance(self.state.mode, Browsing):
            return False
        last = len(self.state.listing.real_choices) - 1
        self.state.cursor = self.state.cursor + 1 if self.state.cursor < last else 0
        return True

    # -- search ----------------------------------------------------------

    def enter_search(self) -> bool:
        if not isinstance(self.state.mode, Browsing):
            return False
        self.state.mode = Searching("")
        return True

    def search_key(self, char: Optional[str] = None, backspace: bool = False) -> bool:
        """Edit the search term; an emptied term leaves search mode"""
        mode = self.state.mode
        if not isinstance(mode, Searching):
            return False
        term = mode.term
        if backspace and term:
            term = term[:-1]
        elif char:
            term += char

        if term == "":
            self.state.mode = BROWSING
            return True
        self.state.mode = Searching(term)
        self._match(term)
        return True

    def search_submit(self) -> bool:
        if not isinstance(self.state.mode, Searching):
            return False
        self.state.mode = BROWSING
        return True

    def _match(self, term: str) -> None:
        needle = term.lower()
        for idx, entry in enumerate(self.state.listing.real_choices):
            if entry.label.lower().startswith(needle):
                self.state.cursor = idx
                return

    # -- navigation ------------------------------------------------------

    def _change_directory(self, path: str) -> None:
        # compose first so a failing read leaves the state untouched
        try:
            listing = compose_listing(path, self.root, self.config)
        except DirectoryReadError:
            log.warning("Staying in %s, cannot open %s", self.state.current_path, path)
            raise
        log.debug("Changing directory %s -> %s", self.state.current_path, path)
        self.state.current_path = path
        self.state.listing = listing
        self.state.cursor = 0
        self.state.mode = BROWSING

    def go_back(self) -> bool:
        if self.is_answered:
            return False
        current = self.state.current_path
        parent = os.path.dirname(current)
        if os.path.normpath(current) == os.path.normpath(self.root) or parent == current:
            return False
        self._change_directory(parent)
        return True

    def drill(self, entry: Entry) -> bool:
        if self.is_answered:
            return False
        if entry.kind is not EntryKind.REAL or not entry.is_directory:
            return False
        self._change_directory(os.path.join(self.state.current_path, entry.label))
        return True

    def submit(self, entry: Entry) -> bool:
        if self.is_answered:
            return False
        path = os.path.abspath(os.path.join(self.state.current_path, entry.label))
        result = SelectionResult(
            is_directory=bool(entry.is_directory),
            is_file=bool(entry.is_file),
            path=path,
        )
        log.debug("Selected %s", path)
        self.state.mode = Answered(result)
        return True

    def submit_current(self) -> bool:
        return self.submit(self.resolved_listing().choice(0))

    def select(self) -> bool:
        """Act on the entry under the cursor"""
        if self.is_answered:
            return False
        entry = self.selected_entry()
        if entry.kind is EntryKind.BACK:
            return self.go_back()
        if entry.kind is EntryKind.CURRENT:
            return self.submit(entry)
        if entry.is_file:
            return self.submit(entry) if self.config.can_select_file else False
        return self.drill(entry)
