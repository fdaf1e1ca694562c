from __future__ import annotations

import logging
from typing import Any, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from .config import SelectorConfig
from .errors import DirectoryReadError
from .events import EventRouter, KeyPress
from .render import Paginator, render_prompt
from .state import NavigationMachine, SelectionResult

log = logging.getLogger(__name__)

STYLE = {
    "qmark": "fg:ansigreen bold",
    "question": "bold",
    "answer": "fg:ansicyan",
    "path_label": "fg:ansigray",
    "path": "fg:ansigray bold",
    "selected": "fg:ansicyan",
    "dir": "",
    "file": "",
    "separator": "fg:ansigray",
    "hint": "fg:ansigray italic",
    "help": "fg:ansigray",
    "search": "bold",
    "error": "fg:ansired",
}


class FSPrompt:
    """Interactive directory browser running as an inline prompt_toolkit
    application. ``run()`` returns the :class:`SelectionResult`."""

    def __init__(self, config: SelectorConfig, input: Any = None, output: Any = None) -> None:
        self.config = config
        self.machine = NavigationMachine(config)
        self.paginator = Paginator(config.page_size)
        self.notice: Optional[str] = None
        self.router = EventRouter(self.machine, render=self._invalidate, on_done=self._on_done)
        self._shown_path = self.machine.current_path
        self.app = self._create_application(input, output)

    def _create_application(self, input: Any, output: Any) -> Application:
        kb = KeyBindings()

        @kb.add("up")
        def _up(event) -> None:
            self.feed(KeyPress(name="up"))

        @kb.add("down")
        def _down(event) -> None:
            self.feed(KeyPress(name="down"))

        @kb.add("enter")
        def _enter(event) -> None:
            self.feed(KeyPress(name="return"))

        @kb.add("backspace")
        def _backspace(event) -> None:
            self.feed(KeyPress(name="backspace"))

        @kb.add(Keys.Any)
        def _any(event) -> None:
            data = event.data
            if len(data) == 1 and data.isprintable():
                self.feed(KeyPress.char(data))
            else:
                key = event.key_sequence[0].key
                self.feed(KeyPress(name=getattr(key, "value", str(key))))

        @kb.add("c-c")
        @kb.add("c-d")
        def _abort(event) -> None:
            event.app.exit(exception=KeyboardInterrupt, style="class:aborting")

        control = FormattedTextControl(self.get_formatted_text, focusable=True, show_cursor=False)
        return Application(
            layout=Layout(Window(content=control, always_hide_cursor=True, wrap_lines=False)),
            key_bindings=kb,
            style=Style.from_dict(STYLE),
            full_screen=False,
            input=input,
            output=output,
        )

    def get_formatted_text(self) -> list[tuple[str, str]]:
        if self.machine.current_path != self._shown_path:
            self._shown_path = self.machine.current_path
            self.paginator.reset()
        return render_prompt(self.machine, self.paginator, self.notice)

    def feed(self, key: KeyPress) -> None:
        self.notice = None
        try:
            self.router.feed(key)
        except DirectoryReadError as exc:
            log.warning("%s", exc)
            self.notice = str(exc)
            self._invalidate()

    def _invalidate(self) -> None:
        app = getattr(self, "app", None)
        if app is not None and app.is_running:
            app.invalidate()

    def _on_done(self, result: SelectionResult) -> None:
        self.app.exit(result=result)

    def run(self) -> SelectionResult:
        return self.app.run()


def select_path(base_path: Any, default: Any = None, message: Any = None, page_size: Any = None, **options: Any) -> SelectionResult:
    """Ask for a file or directory below ``base_path``.

    ``options`` accepts the question options ``displayFiles``,
    ``displayHidden``, ``canSelectFile``, ``icons`` and ``showItem``.
    """
    config = SelectorConfig.from_options(base_path, default=default, options=options, message=message, page_size=page_size)
    return FSPrompt(config).run()
