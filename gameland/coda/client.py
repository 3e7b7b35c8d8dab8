"""Terminal client for the Coda game server."""

from __future__ import annotations

import argparse
import curses
import enum
import socket
import sys
import time

PORT = 8080
_RECV_SIZE = 2047

TITLE_ART = (
    " _____             _        ",
    "/  __ \\           | |       ",
    "| /  \\/  ___    __| |  __ _ ",
    "| |     / _ \\  / _` | / _` |",
    "| \\__/\\| (_) || (_| || (_| |",
    " \\____/ \\___/  \\__,_| \\__,_|",
    "                            ",
    "                            ",
)

WAITING_TEXT = "다른 플레이어가 접속하기를 기다리는 중..."


class Prompt(enum.Enum):
    """What a server message asks of the player."""

    JOIN = "join"
    FAREWELL = "farewell"
    TURN = "turn"
    GUESS_AGAIN = "guess_again"
    VICTORY = "victory"
    DEFEAT = "defeat"

    @property
    def input_label(self) -> str | None:
        return _INPUT_LABELS.get(self)

    @property
    def max_input(self) -> int:
        return 1023 if self is Prompt.TURN else 2

    @property
    def ends_session(self) -> bool:
        return self in _LINGER

    @property
    def linger(self) -> float:
        """Seconds to keep the final message on screen."""
        return _LINGER.get(self, 0.0)


_INPUT_LABELS = {
    Prompt.JOIN: "게임에 참여하시겠습니까? (y/n): ",
    Prompt.TURN: "당신의 차례입니다. 좌표를 입력하세요 (예: 1 B 5): ",
    Prompt.GUESS_AGAIN: "다시 추측하시겠습니까? (y/n): ",
}

_LINGER = {Prompt.FAREWELL: 2.0, Prompt.VICTORY: 3.0, Prompt.DEFEAT: 3.0}

_RULES = (
    (Prompt.JOIN, ("게임에 참여하시겠습니까?",)),
    (
        Prompt.FAREWELL,
        (
            "상대 플레이어가 연결을 해제하여 게임을 종료합니다...",
            "연결을 해제하셨습니다.",
            "게임을 거부하셨습니다.",
            "상대 플레이어가 게임을 거부하여 연결을 종료합니다...",
        ),
    ),
    (Prompt.TURN, ("당신의 차례입니다.",)),
    (Prompt.GUESS_AGAIN, ("다시 추측하시겠습니까?",)),
    (Prompt.VICTORY, ("게임 종료: 당신이 이겼습니다!",)),
    (Prompt.DEFEAT, ("게임 종료: 당신이 졌습니다!",)),
)


def classify_message(text: str) -> Prompt | None:
    """Return the first prompt whose marker appears in the message, if any."""
    for prompt, markers in _RULES:
        if any(marker in text for marker in markers):
            return prompt
    return None


def _addstr(win, y: int, x: int, text: str) -> None:
    try:
        win.addstr(max(y, 0), max(x, 0), text)
    except curses.error:
        pass


def _ask(win, prompt: Prompt) -> str:
    _addstr(win, 1, 1, prompt.input_label or "")
    win.refresh()
    curses.echo()
    try:
        raw = win.getstr(prompt.max_input)
    finally:
        curses.noecho()
    win.erase()
    win.box()
    win.refresh()
    return raw.decode("utf-8", errors="replace")


def run(stdscr, sock: socket.socket) -> None:
    """Show the title, then answer server prompts until the game ends."""
    if curses.has_colors():
        curses.init_pair(1, curses.COLOR_RED, curses.COLOR_BLACK)
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)

    lines, cols = stdscr.getmaxyx()
    for row, text in enumerate(TITLE_ART):
        _addstr(stdscr, lines // 2 - 4 + row, (cols - len(text)) // 2, text)
        stdscr.refresh()
        time.sleep(0.2)
    time.sleep(2)

    output = curses.newwin(lines - 5, cols, 0, 0)
    entry = curses.newwin(5, cols, lines - 5, 0)
    output.scrollok(True)
    output.box()
    entry.box()
    _addstr(output, (lines - 5) // 2, (cols - len(WAITING_TEXT) * 2) // 2, WAITING_TEXT)
    output.refresh()
    entry.refresh()

    while True:
        data = sock.recv(_RECV_SIZE)
        if not data:
            break
        text = data.decode("utf-8", errors="replace")
        output.clear()
        _addstr(output, 1, 1, text)
        output.refresh()

        prompt = classify_message(text)
        if prompt is None:
            continue
        if prompt.ends_session:
            time.sleep(prompt.linger)
            break
        sock.sendall(_ask(entry, prompt).encode("utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Coda game client")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    try:
        sock = socket.create_connection((args.host, args.port))
    except OSError as exc:
        print(f"연결 실패: {exc}", file=sys.stderr)
        return 1
    with sock:
        curses.wrapper(run, sock)
    return 0