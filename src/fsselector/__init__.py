"""Interactive filesystem selector prompt built on prompt_toolkit."""

from .config import BACK, CURRENT, IconSet, SelectorConfig
from .errors import ConfigurationError, DirectoryReadError, FSSelectorError
from .prompt import FSPrompt, select_path
from .state import SelectionResult

__all__ = [
    "BACK",
    "CURRENT",
    "ConfigurationError",
    "DirectoryReadError",
    "FSPrompt",
    "FSSelectorError",
    "IconSet",
    "SelectionResult",
    "SelectorConfig",
    "select_path",
]
