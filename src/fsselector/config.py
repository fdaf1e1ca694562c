from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ConfigurationError

# Identifiers of the two synthetic listing entries
CURRENT = "."
BACK = ".."

ShowItem = Callable[[bool, bool, str], bool]


@dataclass(frozen=True)
class IconSet:
    """Icons drawn in front of listing entries"""
    current_dir: str = "\U0001F4C2"  # open file folder
    dir: str = "\U0001F4C1"  # file folder
    file: str = "\U0001F4C4"  # page facing up

    @classmethod
    def from_mapping(cls, icons: Mapping[str, Any]) -> "IconSet":
        """Override individual default icons, accepting camelCase keys too"""
        aliases = {"currentDir": "current_dir", "current_dir": "current_dir", "dir": "dir", "file": "file"}
        values: Dict[str, str] = {}
        for key, value in icons.items():
            name = aliases.get(key)
            if name is not None and isinstance(value, str):
                values[name] = value
        return replace(cls(), **values)


DEFAULT_ICONS = IconSet()


def _expected(value: Any, expected: type, fallback: Any) -> Any:
    # bool is a subclass of int, keep page sizes from accepting True/False
    if expected is int and isinstance(value, bool):
        return fallback
    return value if isinstance(value, expected) else fallback


@dataclass(frozen=True)
class SelectorConfig:
    """Immutable options of one fs-selector prompt.

    ``base_path`` is made absolute (relative paths resolve against the
    current working directory) and must name an existing directory.
    ``icons`` is either an :class:`IconSet` or ``None`` when icons are
    disabled.
    """
    base_path: str
    default: str = CURRENT
    display_files: bool = True
    display_hidden: bool = False
    can_select_file: bool = True
    icons: Optional[IconSet] = field(default_factory=IconSet)
    show_item: Optional[ShowItem] = None
    message: str = "Select a path"
    page_size: int = 7

    def __post_init__(self) -> None:
        if not isinstance(self.base_path, (str, os.PathLike)):
            raise ConfigurationError("You must provide a `basePath` parameter")
        resolved = os.path.abspath(os.fspath(self.base_path))

        try:
            st = os.lstat(resolved)
        except FileNotFoundError:
            raise ConfigurationError(f"No such directory: '{resolved}'") from None
        except OSError as exc:
            raise ConfigurationError(f"Cannot access '{resolved}': {exc.strerror}") from exc
        if not stat.S_ISDIR(st.st_mode):
            raise ConfigurationError(f"'{resolved}' is not a directory")

        if self.page_size < 1:
            raise ConfigurationError("page_size must be a positive integer")
        if self.show_item is not None and not callable(self.show_item):
            raise ConfigurationError("show_item must be callable")

        object.__setattr__(self, "base_path", resolved)

    @property
    def root(self) -> str:
        """Filesystem root (or drive anchor) of ``base_path``"""
        return Path(self.base_path).anchor

    @classmethod
    def from_options(
        cls,
        base_path: Any,
        default: Any = None,
        options: Optional[Mapping[str, Any]] = None,
        message: Any = None,
        page_size: Any = None,
    ) -> "SelectorConfig":
        """Build a config from loosely typed question options.

        Options of the wrong type silently fall back to their defaults, a
        partial ``icons`` mapping overrides single icons and ``icons=False``
        disables them.
        """
        kwargs: Dict[str, Any] = {
            "default": _expected(default, str, CURRENT),
            "message": _expected(message, str, "Select a path"),
            "page_size": _expected(page_size, int, 7),
        }
        if isinstance(options, Mapping):
            kwargs["display_files"] = _expected(options.get("displayFiles"), bool, True)
            kwargs["display_hidden"] = _expected(options.get("displayHidden"), bool, False)
            kwargs["can_select_file"] = _expected(options.get("canSelectFile"), bool, True)
            show_item = options.get("showItem")
            kwargs["show_item"] = show_item if callable(show_item) else None

            icons = options.get("icons")
            if isinstance(icons, Mapping):
                kwargs["icons"] = IconSet.from_mapping(icons)
            elif icons is False:
                kwargs["icons"] = None
        return cls(base_path=base_path, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output"""
        return {
            "base_path": self.base_path,
            "default": self.default,
            "display_files": self.display_files,
            "display_hidden": self.display_hidden,
            "can_select_file": self.can_select_file,
            "icons": None if self.icons is None else {
                "current_dir": self.icons.current_dir,
                "dir": self.icons.dir,
                "file": self.icons.file,
            },
            "has_show_item": self.show_item is not None,
            "message": self.message,
            "page_size": self.page_size,
        }
