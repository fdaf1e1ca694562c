from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from .config import BACK, CURRENT, SelectorConfig, ShowItem
from .errors import DirectoryReadError

log = logging.getLogger(__name__)


class EntryKind(Enum):
    CURRENT = "current"
    BACK = "back"
    REAL = "real"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Entry:
    """One line of the navigable listing."""
    label: str
    kind: EntryKind = EntryKind.REAL
    is_directory: Optional[bool] = None
    is_file: Optional[bool] = None

    @property
    def is_synthetic(self) -> bool:
        return self.kind in (EntryKind.CURRENT, EntryKind.BACK)

    @property
    def is_resolved(self) -> bool:
        return self.is_directory is not None


CURRENT_ENTRY = Entry(CURRENT, EntryKind.CURRENT, is_directory=True, is_file=False)
BACK_ENTRY = Entry(BACK, EntryKind.BACK, is_directory=True, is_file=False)
SEPARATOR_ENTRY = Entry("", EntryKind.SEPARATOR)


@dataclass(frozen=True)
class Listing:
    """Ordered entries of one directory.

    ``real_choices`` leaves separators out; the cursor and the incremental
    search both address this view.
    """
    entries: Tuple[Entry, ...]

    @property
    def real_choices(self) -> Tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.kind is not EntryKind.SEPARATOR)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def choice(self, index: int) -> Entry:
        return self.real_choices[index]

    def index_of(self, label: str) -> int:
        """Position of ``label`` among the real choices, -1 when absent"""
        for idx, entry in enumerate(self.real_choices):
            if entry.label == label:
                return idx
        return -1


def get_directory_content(
    path: str,
    include_hidden: bool = False,
    include_files: bool = False,
    predicate: Optional[ShowItem] = None,
) -> List[str]:
    """Sorted names of the directories (and optionally files) inside ``path``.

    Symbolic links are never listed. Children whose metadata cannot be read
    are skipped; failing to list ``path`` itself raises
    :class:`DirectoryReadError`.
    """
    try:
        names = os.listdir(path)
    except OSError as exc:
        raise DirectoryReadError(path, exc.strerror or str(exc)) from exc

    content: List[str] = []
    for name in names:
        full_path = os.path.join(path, name)
        try:
            st = os.lstat(full_path)
        except OSError as exc:
            log.debug("Skipping unreadable entry %s: %s", full_path, exc)
            continue
        if stat.S_ISLNK(st.st_mode):
            continue

        is_dir = stat.S_ISDIR(st.st_mode)
        is_file = stat.S_ISREG(st.st_mode) and include_files
        if not (is_dir or is_file):
            continue
        if predicate is not None:
            try:
                shown = predicate(is_dir, is_file, full_path)
            except Exception as exc:
                log.debug("show_item failed for %s: %s", full_path, exc)
                continue
            if not shown:
                continue
        if not include_hidden and name.startswith("."):
            continue
        content.append(name)

    return sorted(content)


def compose_listing(path: str, root: str, options: SelectorConfig) -> Listing:
    """Build ``[Current, Back?, <entries>, Separator]`` for ``path``"""
    names = get_directory_content(
        path,
        include_hidden=options.display_hidden,
        include_files=options.display_files,
        predicate=options.show_item,
    )
    entries: List[Entry] = [Entry(name) for name in names]
    if os.path.normpath(path) != os.path.normpath(root):
        entries.insert(0, BACK_ENTRY)
    entries.insert(0, CURRENT_ENTRY)
    if entries:
        entries.append(SEPARATOR_ENTRY)
    return Listing(tuple(entries))


def _resolve_entry(entry: Entry, directory: str) -> Entry:
    if entry.kind is not EntryKind.REAL:
        return entry
    try:
        st = os.lstat(os.path.join(directory, entry.label))
    except OSError as exc:
        log.debug("Cannot resolve %s in %s: %s", entry.label, directory, exc)
        return replace(entry, is_directory=None, is_file=None)
    return replace(entry, is_directory=stat.S_ISDIR(st.st_mode), is_file=stat.S_ISREG(st.st_mode))


def resolve_metadata(listing: Listing, directory: str) -> Listing:
    """Return a copy of ``listing`` with file/directory flags read from disk.

    Every call stats the entries again; ``listing`` itself is left untouched.
    """
    return Listing(tuple(_resolve_entry(entry, directory) for entry in listing))

