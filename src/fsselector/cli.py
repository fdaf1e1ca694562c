from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from .config import CURRENT, IconSet, SelectorConfig
from .errors import ConfigurationError, DirectoryReadError
from .prompt import FSPrompt
from .state import SelectionResult

err_console = Console(stderr=True)
log = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI options"""
    parser = argparse.ArgumentParser(
        prog="fsselector",
        description="Interactively pick a file or directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  up/down   move the cursor
  enter     open a directory, select a file or "."
  /         search the current directory
  -         go to the parent directory
  .         select the current directory

Examples:
  fsselector
  fsselector ~/projects --dirs-only
  fsselector /var/log --hidden --json
        """
    )

    parser.add_argument(
        "base_path",
        nargs="?",
        default=".",
        help="Directory to start browsing in (default: current directory)"
    )

    parser.add_argument(
        "--default",
        default=CURRENT,
        help="Entry the cursor starts on (default: \".\")"
    )

    parser.add_argument(
        "--no-files",
        action="store_true",
        help="Only list directories"
    )

    parser.add_argument(
        "--hidden",
        action="store_true",
        help="List entries whose name starts with a dot"
    )

    parser.add_argument(
        "--dirs-only",
        action="store_true",
        help="Files are listed but cannot be selected"
    )

    parser.add_argument(
        "--no-icons",
        action="store_true",
        help="Do not draw icons in front of entries"
    )

    parser.add_argument(
        "--message",
        default="Select a path",
        help="Question shown above the listing"
    )

    parser.add_argument(
        "--page-size",
        type=int,
        default=7,
        help="Number of entries shown at once (default: 7)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the selection as JSON instead of a bare path"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log navigation details to stderr"
    )

    return parser


def configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _selection_from_env() -> Optional[SelectionResult]:
    """Selection named by FSSELECTOR_AUTOPATH, for scripted runs"""
    auto = os.environ.get("FSSELECTOR_AUTOPATH")
    if not auto:
        return None
    p = Path(auto).expanduser().resolve()
    if not p.exists():
        log.warning("FSSELECTOR_AUTOPATH does not exist: %s", p)
        return None
    return SelectionResult(is_directory=p.is_dir(), is_file=p.is_file(), path=str(p))


def _write_result(result: SelectionResult, as_json: bool) -> None:
    sys.stdout.write(json.dumps(result.as_dict()) if as_json else result.path)
    sys.stdout.flush()


def config_from_args(args: argparse.Namespace) -> SelectorConfig:
    return SelectorConfig(
        base_path=os.path.expanduser(args.base_path),
        default=args.default,
        display_files=not args.no_files,
        display_hidden=args.hidden,
        can_select_file=not args.dirs_only,
        icons=None if args.no_icons else IconSet(),
        message=args.message,
        page_size=args.page_size,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if os.environ.get("FSSELECTOR_CANCEL") == "1":
        return 130
    preset = _selection_from_env()
    if preset is not None:
        _write_result(preset, args.json)
        return 0

    try:
        config = config_from_args(args)
        log.debug("Options: %s", config.to_dict())
        prompt = FSPrompt(config)
    except (ConfigurationError, DirectoryReadError) as exc:
        err_console.print(f"Error: {exc}", style="red", markup=False)
        return 2

    try:
        result = prompt.run()
    except (KeyboardInterrupt, EOFError):
        return 130

    _write_result(result, args.json)
    return 0


# Top-level guard for proper exit code and output handling
if __name__ == "__main__":
    sys.exit(main())
