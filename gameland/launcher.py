"""Start screen and game selection menu that launches the individual games."""

from __future__ import annotations

import argparse
import contextlib
import curses
import subprocess
import time
import unicodedata
from dataclasses import dataclass
from typing import Callable

BATTLESHIP_ART = (
    " _             _    _    _              _      _        ",
    "| |           | |  | |  | |            | |    (_)       ",
    "| |__    __ _ | |_ | |_ | |  ___   ___ | |__   _  _ __  ",
    "| '_ \\  / _ || __|| __|| | / _ \\ / __|| '_ \\ | || '_ \\ ",
    "| |_) || (_| || |_ | |_ | ||  __/ \\__ \\| | | || || |_) |",
    "|_.__/  \\__,_| \\__| \\__||_| \\___| |___/|_| |_||_|| .__/ ",
    "                                                 | |    ",
    "                                                 |_|    ",
)

TYPING_ART = (
    " _____           _    _                      ",
    "|_   _|         (_)  (_)                     ",
    "  | |    __ _    _    _   __ _  _ __    __ _ ",
    "  | |   / _` |  | |  | | / _` || '_ \\  / _` |",
    "  | |  | (_| |  | |  | || (_| || | | || (_| |",
    "  \\_/   \\__,_|  | |  | | \\__,_||_| |_| \\__, |",
    "               _/ | _/ |                __/ |",
    "              |__/ |__/                |___/ ",
)

CODA_ART = (
    " _____             _        ",
    "/  __ \\           | |       ",
    "| /  \\/  ___    __| |  __ _ ",
    "| |     / _ \\  / _` | / _` |",
    "| \\__/\\| (_) || (_| || (_| |",
    " \\____/ \\___/  \\__,_| \\__,_|",
    "                            ",
    "                            ",
)

START_ART = (
    " _____                          _                        _ ",
    "|  __ \\                        | |                      | |",
    "| |  \\/  __ _  _ __ ___    ___ | |      __ _  _ __    __| |",
    "| | __  / _` || '_ ` _ \\  / _ \\| |     / _` || '_ \\  / _` |",
    "| |_\\ \\| (_| || | | | | ||  __/| |____| (_| || | | || (_| |",
    " \\____/ \\__,_||_| |_| |_| \\___|\\_____/ \\__,_||_| |_| \\__,_|",
    "                                                           ",
    "                                                           ",
)

PRESS_ENTER = "< ENTER - 게임 시작하기 >"
MENU_TITLE = "게임 선택"
FINISHED_TEXT = "\n게임이 종료되었습니다. 아무 키나 누르면 메인 메뉴로 돌아갑니다..."

_SELECTED, _NORMAL, _PROMPT, _START = 1, 2, 3, 7
_ENTER_KEYS = (ord("\n"), curses.KEY_ENTER)
_QUIT_KEYS = (ord("q"), ord("Q"))
_PREVIOUS_KEYS = (curses.KEY_UP, curses.KEY_LEFT)
_NEXT_KEYS = (curses.KEY_DOWN, curses.KEY_RIGHT)


@dataclass(frozen=True)
class GameEntry:
    """One game on the menu and the program that runs it."""

    name: str
    label: str
    art: tuple[str, ...]
    description: str
    command: str
    pair: int = _NORMAL


GAMES = (
    GameEntry(
        "BATTLE SHIP",
        "배틀쉽",
        BATTLESHIP_ART,
        "전함을 배치하고 상대방의 함대를 찾아 파괴하는 게임",
        "./battle_ship/battleship_client",
        4,
    ),
    GameEntry(
        "TYPING GAME",
        "타이핑",
        TYPING_ART,
        "떨어지는 단어를 빠르게 타이핑하여 점수를 얻는 게임",
        "./typing_game/client",
        5,
    ),
    GameEntry(
        "CODA",
        "coda",
        CODA_ART,
        "색상과 숫자를 맞추는 추리 게임",
        "./coda_module/client",
        6,
    ),
)


def next_selection(index: int, key: int, count: int) -> int:
    """Move the menu selection for a key press, wrapping around at both ends."""
    if key in _PREVIOUS_KEYS:
        return (index - 1) % count
    if key in _NEXT_KEYS:
        return (index + 1) % count
    return index


def _run_command(command: str) -> int:
    return subprocess.run(command, shell=True, check=False).returncode


def launch(entry: GameEntry, runner: Callable[[str], int] | None = None) -> int:
    """Run a game's program and report a failure; return its exit code."""
    runner = runner if runner is not None else _run_command
    print(f"{entry.label} 게임을 시작합니다.")
    code = runner(entry.command)
    if code != 0:
        print(f"{entry.label} 게임 실행에 실패했습니다. (오류 코드: {code})")
    print(FINISHED_TEXT)
    return code


def _width(text: str) -> int:
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        win.addstr(max(y, 0), max(x, 0), text, attr)
    except curses.error:
        pass


def _init_colors() -> None:
    if not curses.has_colors():
        return
    curses.init_pair(1, curses.COLOR_MAGENTA, curses.COLOR_BLACK)
    curses.init_pair(2, curses.COLOR_WHITE, curses.COLOR_BLACK)
    curses.init_pair(3, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    curses.init_pair(4, curses.COLOR_BLUE, curses.COLOR_BLACK)
    curses.init_pair(5, curses.COLOR_RED, curses.COLOR_BLACK)
    curses.init_pair(6, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    curses.init_pair(7, curses.COLOR_CYAN, curses.COLOR_BLACK)


def _intro(stdscr) -> None:
    max_y, max_x = stdscr.getmaxyx()
    for row, line in enumerate(START_ART):
        _put(stdscr, max_y // 2 - 5 + row, (max_x - len(line)) // 2, line, curses.color_pair(_START))
        stdscr.refresh()
        time.sleep(0.2)

    msg_x = (max_x - _width(PRESS_ENTER)) // 2
    stdscr.nodelay(True)
    try:
        while True:
            _put(stdscr, max_y - 3, msg_x, PRESS_ENTER, curses.color_pair(_PROMPT) | curses.A_BLINK)
            stdscr.refresh()
            time.sleep(0.5)
            _put(stdscr, max_y - 3, msg_x, " " * _width(PRESS_ENTER))
            stdscr.refresh()
            time.sleep(0.5)
            if stdscr.getch() in _ENTER_KEYS:
                break
    finally:
        stdscr.nodelay(False)


def _draw_menu(stdscr, selected: int) -> None:
    max_y, max_x = stdscr.getmaxyx()
    stdscr.clear()
    _put(stdscr, 2, (max_x - _width(MENU_TITLE)) // 2, MENU_TITLE)

    highlight = curses.color_pair(_SELECTED) | curses.A_BOLD
    for index, game in enumerate(GAMES):
        start_y = 5 + index * 15
        chosen = index == selected
        name_attr = highlight if chosen else curses.color_pair(_NORMAL)
        _put(stdscr, start_y - 1, 2, "▶ " if chosen else "  ", name_attr)
        _put(stdscr, start_y, (max_x - len(game.name)) // 2, game.name, name_attr)

        art_attr = curses.color_pair(_SELECTED if chosen else game.pair)
        art_y = start_y + 1
        art_x = (max_x - len(game.art[0])) // 2 if game.art else 0
        for row, line in enumerate(game.art):
            _put(stdscr, art_y + row, art_x, line, art_attr)

        _put(stdscr, art_y + 8, (max_x - _width(game.description)) // 2, game.description)

    help_y = max_y - 5
    _put(stdscr, help_y, 2, "↑ ↓ ← → : 게임 선택")
    _put(stdscr, help_y + 1, 2, "ENTER : 게임 시작")
    _put(stdscr, help_y + 2, 2, "Q : 종료")
    _put(
        stdscr,
        max_y - 2,
        (max_x - _width(PRESS_ENTER)) // 2,
        PRESS_ENTER,
        curses.color_pair(_PROMPT) | curses.A_BLINK,
    )
    stdscr.refresh()


def _start_game(stdscr, entry: GameEntry) -> None:
    max_y, max_x = stdscr.getmaxyx()
    stdscr.clear()
    _put(stdscr, max_y // 2, (max_x - 20) // 2, f"{entry.name} 게임을 시작합니다...")
    stdscr.refresh()
    time.sleep(2)

    curses.endwin()
    launch(entry)
    with contextlib.suppress(EOFError):
        input()

    stdscr.clear()
    stdscr.refresh()
    curses.cbreak()
    curses.noecho()
    stdscr.keypad(True)


def run_menu(stdscr) -> None:
    """Show the game menu until the player quits, launching the chosen games."""
    _init_colors()
    curses.cbreak()
    curses.noecho()
    stdscr.keypad(True)
    selected = 0
    while True:
        _draw_menu(stdscr, selected)
        key = stdscr.getch()
        if key in _QUIT_KEYS:
            return
        if key in _ENTER_KEYS:
            _start_game(stdscr, GAMES[selected])
            continue
        selected = next_selection(selected, key, len(GAMES))


def _session(stdscr) -> None:
    _init_colors()
    curses.cbreak()
    curses.noecho()
    stdscr.keypad(True)
    _intro(stdscr)
    run_menu(stdscr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Game launcher")
    parser.parse_args(argv)
    curses.wrapper(_session)
    return 0