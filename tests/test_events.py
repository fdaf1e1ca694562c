from __future__ import annotations

import os
from pathlib import Path

import pytest

from fsselector.config import SelectorConfig
from fsselector.errors import DirectoryReadError
from fsselector.events import EventRouter, KeyPress
from fsselector.state import Browsing, NavigationMachine, Searching

UP = KeyPress(name="up")
DOWN = KeyPress(name="down")
ENTER = KeyPress(name="return")
BACKSPACE = KeyPress(name="backspace")


class Recorder:
    def __init__(self) -> None:
        self.renders = 0
        self.results = []

    def render(self) -> None:
        self.renders += 1

    def done(self, result) -> None:
        self.results.append(result)


def _router(path: Path, **kwargs):
    machine = NavigationMachine(SelectorConfig(base_path=str(path), **kwargs))
    rec = Recorder()
    return EventRouter(machine, render=rec.render, on_done=rec.done), machine, rec


def _type(router: EventRouter, text: str) -> None:
    for ch in text:
        router.feed(KeyPress.char(ch))


def test_arrow_keys_move_cursor(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    router.feed(DOWN)
    router.feed(DOWN)
    assert machine.cursor == 2
    router.feed(UP)
    assert machine.cursor == 1
    assert rec.renders == 3


def test_letters_outside_search_do_not_navigate(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    _type(router, "bk")
    assert machine.cursor == 0
    assert isinstance(machine.mode, Browsing)
    # unconsumed keys still refresh the display
    assert rec.renders == 2


def test_slash_starts_search_and_letters_jump(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    router.feed(KeyPress.char("/"))
    assert router.searching
    assert machine.mode == Searching("")
    _type(router, "b")
    assert machine.cursor == 3
    assert machine.search_term == "b"


def test_backspace_to_empty_leaves_search(fruit_dir: Path):
    router, machine, _ = _router(fruit_dir)
    _type(router, "/b")
    router.feed(BACKSPACE)
    assert not router.searching
    assert isinstance(machine.mode, Browsing)
    assert machine.cursor == 3
    # outer routing works again
    router.feed(DOWN)
    assert machine.cursor == 4


def test_second_slash_is_ignored_while_searching(fruit_dir: Path):
    router, machine, _ = _router(fruit_dir)
    _type(router, "/a/")
    assert machine.search_term == "a"


def test_minus_is_literal_inside_search(fruit_dir: Path):
    (fruit_dir / "a-b").mkdir()
    router, machine, _ = _router(fruit_dir)
    _type(router, "/a-")
    assert machine.search_term == "a-"
    assert machine.current_path == str(fruit_dir)
    assert machine.listing.choice(machine.cursor).label == "a-b"


def test_minus_goes_back_outside_search(fruit_dir: Path):
    router, machine, _ = _router(fruit_dir / "banana")
    router.feed(KeyPress.char("-"))
    assert machine.current_path == str(fruit_dir)
    assert machine.cursor == 0


def test_arrows_ignored_while_searching(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    _type(router, "/b")
    renders = rec.renders
    router.feed(DOWN)
    assert machine.cursor == 3
    assert rec.renders == renders


def test_enter_while_searching_ends_search_and_drills(fruit_dir: Path):
    router, machine, _ = _router(fruit_dir)
    _type(router, "/ban")
    router.feed(ENTER)
    assert not router.searching
    assert isinstance(machine.mode, Browsing)
    assert machine.current_path == os.path.join(str(fruit_dir), "banana")
    assert machine.cursor == 0


def test_enter_on_current_submits_once(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    router.feed(ENTER)
    assert router.closed
    assert len(rec.results) == 1
    assert rec.results[0].path == str(fruit_dir)

    renders = rec.renders
    for key in (DOWN, UP, ENTER, KeyPress.char("/"), KeyPress.char("-"), KeyPress.char(".")):
        router.feed(key)
    assert len(rec.results) == 1
    assert machine.result is rec.results[0]
    assert rec.renders == renders


def test_dot_key_selects_current_directory(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir, default="apple")
    router.feed(KeyPress.char("."))
    assert rec.results[0].path == str(fruit_dir)
    assert rec.results[0].is_directory is True


def test_dot_is_a_search_character(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    _type(router, "/readme.")
    assert machine.search_term == "readme."
    assert rec.results == []


def test_submit_file_from_search(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir)
    _type(router, "/re")
    router.feed(ENTER)
    assert rec.results[0].path == os.path.join(str(fruit_dir), "readme.txt")
    assert rec.results[0].is_file is True
    assert not router.searching


def test_file_enter_is_inert_without_file_selection(fruit_dir: Path):
    router, machine, rec = _router(fruit_dir, default="readme.txt", can_select_file=False)
    router.feed(ENTER)
    assert rec.results == []
    assert not router.closed
    assert machine.current_path == str(fruit_dir)


def test_navigation_error_propagates_and_router_stays_usable(fruit_dir: Path, monkeypatch):
    router, machine, _ = _router(fruit_dir, default="apple")
    real_listdir = os.listdir

    def fake_listdir(path):
        if str(path).endswith("apple"):
            raise PermissionError(13, "Permission denied")
        return real_listdir(path)

    monkeypatch.setattr(os, "listdir", fake_listdir)
    with pytest.raises(DirectoryReadError):
        router.feed(ENTER)
    assert machine.current_path == str(fruit_dir)
    router.feed(DOWN)
    assert machine.cursor == 3


def test_keypress_char_names():
    assert KeyPress.char("A").name == "a"
    assert KeyPress.char("/").name is None
    assert KeyPress.char("-").is_search_char
    assert not KeyPress.char("/").is_search_char
    assert BACKSPACE.is_search_char
