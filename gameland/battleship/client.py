"""Terminal battleship client: single player against the computer, or networked play."""

from __future__ import annotations

import argparse
import contextlib
import curses
import enum
import locale
import logging
import re
import select
import socket
import time
from dataclasses import dataclass

from .board import AiOpponent, AttackResult, Board, display_width, standard_fleet
from .grid import GRID_SIZE, State

LOG_FILE = "client_log.txt"
_log = logging.getLogger(__name__)

TITLE_ART = (
    " _             _    _    _              _      _        ",
    "| |           | |  | |  | |            | |    (_)       ",
    "| |__    __ _ | |_ | |_ | |  ___   ___ | |__   _  _ __  ",
    "| '_ \\  / _ || __|| __|| | / _ \\ / __|| '_ \\ | || '_ \\ ",
    "| |_) || (_| || |_ | |_ | ||  __/ \\__ \\| | | || || |_) |",
    "|_.__/  \\__,_| \\__| \\__||_| \\___| |___/|_| |_||_|| .__/ ",
    "                                                 | |    ",
    "                                                 |_|    ",
)

NET_ART = (
    "______   ___   _____  _____  _      _____     _   _  _____  _____ ",
    "| ___ \\ / _ \\ |_   _||_   _|| |    |  ___|   | \\ | ||  ___||_   _|",
    "| |_/ // /_\\ \\  | |    | |  | |    | |__     |  \\| || |__    | |  ",
    "| ___ \\|  _  |  | |    | |  | |    |  __|    | . ` ||  __|   | |  ",
    "| |_/ /| | | |  | |    | |  | |____| |___  _ | |\\  || |___   | |  ",
    "\\____/ \\_| |_/  \\_/    \\_/  \\_____/\\____/ (_)|_| \\_/\\____/   \\_/  ",
    "                                                                 ",
    "                                                                 ",
)

_ENTER_KEYS = (ord("\n"), curses.KEY_ENTER)
_INT_RE = re.compile(r"\s*([+-]?\d+)")
_ATTACK_RE = re.compile(r"Attack\s*\(\s*([+-]?\d+)\s*([+-]?\d+)")

_BOARD_WIDTH = GRID_SIZE * 4 + 5
_BOARD_HEIGHT = GRID_SIZE * 2 + 2
_BOARD_GAP = 2


@dataclass
class NetCell:
    """A cell of a networked grid: the length of the ship on it (0 for none) and its state."""

    ship: int = 0
    state: State = State.UNSHOT


class NetGrid:
    """A grid of NetCells indexed ``cells[y][x]``."""

    def __init__(self) -> None:
        self.cells = [[NetCell() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]

    def cell(self, x: int, y: int) -> NetCell:
        return self.cells[y][x]

    @staticmethod
    def _footprint(size: int, x: int, y: int, orientation: int) -> list[tuple[int, int]]:
        if orientation == 0:
            return [(x + i, y) for i in range(size)]
        if orientation == 1:
            return [(x, y + i) for i in range(size)]
        raise ValueError(f"orientation must be 0 or 1, not {orientation!r}")

    def can_place(self, size: int, x: int, y: int, orientation: int) -> bool:
        """Whether a ship of this size fits at 0-based (x, y) without overlap."""
        return all(
            0 <= cx < GRID_SIZE and 0 <= cy < GRID_SIZE and self.cells[cy][cx].ship == 0
            for cx, cy in self._footprint(size, x, y, orientation)
        )

    def place(self, size: int, x: int, y: int, orientation: int) -> None:
        """Mark a ship's cells; ValueError if it does not fit."""
        if not self.can_place(size, x, y, orientation):
            raise ValueError(f"a ship of size {size} cannot be placed at ({x}, {y})")
        for cx, cy in self._footprint(size, x, y, orientation):
            self.cells[cy][cx].ship = size

    def mark(self, x: int, y: int, state: State) -> bool:
        """Set a cell's state; False if (x, y) is off the grid."""
        if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
            return False
        self.cells[y][x].state = state
        return True

    def encode_layout(self) -> str:
        """The layout sent to the server: ``S`` for ship cells, ``~`` for water, row by row."""
        return "".join("S" if cell.ship > 0 else "~" for row in self.cells for cell in row)

    def symbols(self, own: bool) -> list[str]:
        """One string per row of display characters, from the owner's or the opponent's view."""
        return ["".join(_own_symbol(c) if own else _enemy_symbol(c) for c in row) for row in self.cells]


def _own_symbol(cell: NetCell) -> str:
    if cell.ship > 0:
        if cell.state is State.HIT:
            return "H"
        if cell.state is State.SUNK:
            return "X"
        if cell.state is State.MISS:
            return "M"
        return "S"
    return "M" if cell.state is State.MISS else "~"


def _enemy_symbol(cell: NetCell) -> str:
    if cell.state is State.HIT:
        return "X"
    if cell.state is State.MISS:
        return "O"
    return "~"


class EventKind(enum.Enum):
    YOUR_TURN = "your_turn"
    OPPONENT_TURN = "opponent_turn"
    HIT = "hit"
    MISS = "miss"
    GAME_OVER = "game_over"
    ATTACKED = "attacked"
    OTHER = "other"


@dataclass(frozen=True)
class ServerEvent:
    """One line from the match server; ATTACKED events carry 0-based coordinates."""

    kind: EventKind
    text: str
    x: int | None = None
    y: int | None = None


def parse_server_line(line: str) -> ServerEvent:
    """Classify a line received from the server, newline included."""
    if line == "YOUR_TURN\n":
        return ServerEvent(EventKind.YOUR_TURN, line)
    if line == "OPPONENT_TURN\n":
        return ServerEvent(EventKind.OPPONENT_TURN, line)
    if line.startswith("Hit"):
        return ServerEvent(EventKind.HIT, line)
    if line.startswith("Miss"):
        return ServerEvent(EventKind.MISS, line)
    if line.startswith("You won") or line.startswith("You lost"):
        return ServerEvent(EventKind.GAME_OVER, line)
    if line.startswith("Attack"):
        match = _ATTACK_RE.match(line)
        if match is None:
            return ServerEvent(EventKind.ATTACKED, line)
        return ServerEvent(EventKind.ATTACKED, line, int(match.group(1)) - 1, int(match.group(2)) - 1)
    return ServerEvent(EventKind.OTHER, line)


def format_attack(x: int, y: int) -> str:
    """The shot message for 1-based coordinates."""
    return f"({x} {y})\n"


def _leading_ints(text: str, count: int) -> tuple[int, ...] | None:
    values = []
    pos = 0
    for _ in range(count):
        match = _INT_RE.match(text, pos)
        if match is None:
            return None
        values.append(int(match.group(1)))
        pos = match.end()
    return tuple(values)


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    with contextlib.suppress(curses.error):
        win.addstr(max(y, 0), max(x, 0), text, attr)


def _prompt(stdscr, y: int, x: int, text: str) -> str:
    _put(stdscr, y, x, text)
    stdscr.refresh()
    curses.echo()
    try:
        raw = stdscr.getstr(max(y, 0), max(x, 0) + display_width(text), 80)
    except curses.error:
        raw = b""
    finally:
        curses.noecho()
    return raw.decode("utf-8", errors="replace")


def _pair(number: int) -> int:
    return curses.color_pair(number) if curses.has_colors() else 0


def _animate(stdscr, art: tuple[str, ...]) -> None:
    max_y, max_x = stdscr.getmaxyx()
    start_y = (max_y - len(art)) // 2
    start_x = (max_x - len(art[0])) // 2
    for row, line in enumerate(art):
        _put(stdscr, start_y + row, start_x, line)
        stdscr.refresh()
        time.sleep(0.2)


def _draw_board(stdscr, board: Board, reveal: bool, start_y: int) -> None:
    max_y, max_x = stdscr.getmaxyx()
    if max_x < _BOARD_WIDTH:
        _put(stdscr, start_y, 0, f"화면이 너무 작습니다. {_BOARD_WIDTH} 만큼 크게 해주세요")
        return
    if max_y < start_y + _BOARD_HEIGHT:
        _put(stdscr, start_y, 0, f"화면이 너무 짧습니다. {start_y + _BOARD_HEIGHT} 만큼 크게 해주세요")
        return
    start_x = max((max_x - _BOARD_WIDTH) // 2, 0)
    for row, line in enumerate(board.render(reveal)):
        _put(stdscr, start_y + row, start_x, line, _pair(2))


def _layout(stdscr) -> tuple[int, int]:
    max_y, _ = stdscr.getmaxyx()
    start_y = max((max_y - (_BOARD_HEIGHT * 2 + _BOARD_GAP + 3)) // 2, 0)
    return start_y, start_y + _BOARD_HEIGHT + _BOARD_GAP


def _draw_status(stdscr, player: Board, enemy: Board) -> int:
    """Draw both boards; return the row for the attack prompt."""
    stdscr.clear()
    max_y, max_x = stdscr.getmaxyx()
    total_height = _BOARD_HEIGHT * 2 + _BOARD_GAP + 3
    if max_x < _BOARD_WIDTH:
        _put(stdscr, max_y // 2, (max_x - 30) // 2, f"화면이 너무 좁습니다. 최소 {_BOARD_WIDTH} 열이 필요합니다.")
        stdscr.refresh()
        return max_y - 1
    if max_y < total_height:
        _put(stdscr, max_y // 2, (max_x - 30) // 2, f"화면이 너무 작습니다. 최소 {total_height} 줄이 필요합니다.")
        stdscr.refresh()
        return max_y - 1
    player_y, enemy_y = _layout(stdscr)
    _put(stdscr, player_y, (max_x - display_width("당신의 보드:")) // 2, "당신의 보드:")
    _draw_board(stdscr, player, True, player_y + 1)
    _put(stdscr, enemy_y, (max_x - display_width("적의 보드:")) // 2, "적의 보드:")
    _draw_board(stdscr, enemy, False, enemy_y + 1)
    stdscr.refresh()
    return min(enemy_y + _BOARD_HEIGHT + 1, max_y - 1)


def _show_error(stdscr, message: str) -> None:
    _, enemy_y = _layout(stdscr)
    _, max_x = stdscr.getmaxyx()
    _put(stdscr, enemy_y + _BOARD_HEIGHT + 2, (max_x - display_width(message)) // 2, message)
    stdscr.refresh()


def _show_line(stdscr, y: int, message: str, pause: float) -> None:
    _, max_x = stdscr.getmaxyx()
    _put(stdscr, y, (max_x - display_width(message)) // 2, message)
    stdscr.refresh()
    time.sleep(pause)


def _place_player_fleet(stdscr, board: Board) -> None:
    for ship in standard_fleet():
        while True:
            stdscr.clear()
            _draw_board(stdscr, board, True, 0)
            max_y, max_x = stdscr.getmaxyx()
            mid_x = (max_x - 20) // 2
            mid_y = (max_y - GRID_SIZE - 6) // 2
            error_y = mid_y + GRID_SIZE + 5
            _put(stdscr, mid_y + GRID_SIZE + 2, mid_x, f"배를 배치하세요: {ship.name} (크기: {ship.size})")
            coords = _leading_ints(_prompt(stdscr, mid_y + GRID_SIZE + 3, mid_x, "시작 위치 (x y): "), 2)
            if coords is None:
                _put(stdscr, error_y, mid_x, "유효하지 않은 좌표입니다. 다시 시도하세요.")
                stdscr.refresh()
                time.sleep(1)
                continue
            x, y = coords[0] - 1, coords[1] - 1
            if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
                _put(stdscr, error_y, mid_x, "좌표가 범위를 벗어났습니다.")
                stdscr.refresh()
                time.sleep(1)
                continue
            answer = _leading_ints(_prompt(stdscr, mid_y + GRID_SIZE + 4, mid_x, "방향 (0: 수평, 1: 수직): "), 1)
            if answer is None:
                _put(stdscr, error_y, mid_x, "유효하지 않은 방향입니다. 다시 시도하세요.")
                stdscr.refresh()
                time.sleep(1)
                continue
            if answer[0] not in (0, 1):
                _put(stdscr, error_y, mid_x, "방향은 0 또는 1이어야 합니다.")
                stdscr.refresh()
                time.sleep(1)
                continue
            if board.can_place(ship, x, y, answer[0]):
                board.place(ship, x, y, answer[0])
                break
            _put(stdscr, error_y, mid_x, "여기에 배를 배치할 수 없습니다. 다른 위치를 선택하세요.")
            stdscr.refresh()
            time.sleep(1)


def run_singleplayer(stdscr) -> None:
    """Play one game against the computer at a chosen difficulty."""
    stdscr.clear()
    max_y, max_x = stdscr.getmaxyx()
    mid_y = max_y // 2 - 3
    mid_x = (max_x - display_width("난이도 선택:")) // 2
    _put(stdscr, mid_y, mid_x, "난이도 선택:")
    _put(stdscr, mid_y + 2, mid_x, "1. 쉬움")
    _put(stdscr, mid_y + 3, mid_x, "2. 보통")
    _put(stdscr, mid_y + 4, mid_x, "3. 어려움")
    choice = _leading_ints(_prompt(stdscr, mid_y + 6, mid_x, "선택: "), 1)
    if choice is None:
        _put(stdscr, mid_y + 8, mid_x, "유효한 번호를 입력하세요.")
        stdscr.refresh()
        time.sleep(2)
        return
    if choice[0] not in (1, 2, 3):
        _put(stdscr, mid_y + 8, mid_x, "잘못된 난이도 선택입니다.")
        stdscr.refresh()
        time.sleep(2)
        return

    player, enemy = Board(), Board()
    _place_player_fleet(stdscr, player)
    ai = AiOpponent(choice[0])
    ai.place_fleet(enemy)

    result_y = 4 * GRID_SIZE + 7
    while True:
        prompt_y = _draw_status(stdscr, player, enemy)
        text = "공격 좌표를 입력하세요 (x y):"
        _, max_x = stdscr.getmaxyx()
        coords = _leading_ints(_prompt(stdscr, prompt_y, (max_x - display_width(text)) // 2, text), 2)
        if coords is None:
            _show_error(stdscr, "유효한 좌표를 입력하세요.")
            time.sleep(1)
            continue
        result = enemy.attack(coords[0] - 1, coords[1] - 1)
        _show_line(stdscr, result_y, result.message, 1)
        if enemy.all_sunk():
            _show_line(stdscr, result_y + 2, "당신이 이겼습니다!", 3)
            return
        ai.attack(player)
        if player.all_sunk():
            _show_line(stdscr, result_y + 2, "당신이 졌습니다.", 3)
            return


def _init_multiplayer_colors() -> None:
    if not curses.has_colors():
        return
    curses.init_pair(1, curses.COLOR_BLUE, curses.COLOR_BLACK)
    curses.init_pair(2, curses.COLOR_RED, curses.COLOR_BLACK)
    curses.init_pair(3, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    curses.init_pair(4, curses.COLOR_MAGENTA, curses.COLOR_BLACK)
    curses.init_pair(5, curses.COLOR_CYAN, curses.COLOR_BLACK)


_OWN_COLORS = {"S": 1, "H": 2, "M": 3, "X": 4}
_ENEMY_COLORS = {"X": 2, "O": 3}
_NET_GRID_WIDTH = GRID_SIZE * 2 + 3
_NET_GRID_HEIGHT = GRID_SIZE + 2
_NET_TOTAL_WIDTH = _NET_GRID_WIDTH * 2 + 10


def _draw_grids(stdscr, own: NetGrid, opponent: NetGrid | None, cursor: list[int],
                your_turn: bool, attack_phase: bool) -> int:
    """Draw both grids side by side; return the left column used for status text."""
    stdscr.clear()
    max_y, max_x = stdscr.getmaxyx()
    if max_x < _NET_TOTAL_WIDTH:
        _put(stdscr, max_y // 2, 0, f"화면이 너무 좁습니다! 최소 {_NET_TOTAL_WIDTH} 열이 필요합니다.")
        stdscr.refresh()
        return 0
    if max_y < _NET_GRID_HEIGHT + 5:
        _put(stdscr, max_y // 2, 0, f"화면이 너무 짧습니다! 최소 {_NET_GRID_HEIGHT + 5} 줄이 필요합니다.")
        stdscr.refresh()
        return 0
    left_x = (max_x - _NET_TOTAL_WIDTH) // 2
    right_x = left_x + _NET_GRID_WIDTH + 10
    header = "  " + "".join(f" {i}" for i in range(1, GRID_SIZE + 1))

    _put(stdscr, 1, left_x, "당신의 그리드")
    _put(stdscr, 2, left_x, header)
    for row, symbols in enumerate(own.symbols(own=True)):
        _put(stdscr, 3 + row, left_x, f"{row + 1} ")
        col_x = left_x + len(f"{row + 1} ")
        for col, char in enumerate(symbols):
            _put(stdscr, 3 + row, col_x + col * 2, f"{char} ", _pair(_OWN_COLORS.get(char, 5)))

    enemy_rows = (opponent if opponent is not None else NetGrid()).symbols(own=False)
    _put(stdscr, 1, right_x, "상대의 그리드")
    _put(stdscr, 2, right_x, header)
    for row, symbols in enumerate(enemy_rows):
        _put(stdscr, 3 + row, right_x, f"{row + 1} ")
        col_x = right_x + len(f"{row + 1} ")
        for col, char in enumerate(symbols):
            if attack_phase and your_turn and row == cursor[1] and col == cursor[0]:
                attr = curses.A_REVERSE
            else:
                attr = _pair(_ENEMY_COLORS.get(char, 5))
            _put(stdscr, 3 + row, col_x + col * 2, f"{char} ", attr)

    status_y = 1 + _NET_GRID_HEIGHT + 2
    if attack_phase:
        if your_turn:
            _put(stdscr, status_y, left_x, "당신의 턴: 화살표 키로 커서를 이동하고 엔터를 눌러 공격하세요.")
        else:
            _put(stdscr, status_y, left_x, "상대의 턴: 상대의 움직임을 기다리는 중...")
    else:
        _put(stdscr, status_y, left_x, "배치 단계입니다.")
    stdscr.refresh()
    return left_x


def _move_cursor(cursor: list[int], key: int) -> None:
    if key == curses.KEY_UP and cursor[1] > 0:
        cursor[1] -= 1
    elif key == curses.KEY_DOWN and cursor[1] < GRID_SIZE - 1:
        cursor[1] += 1
    elif key == curses.KEY_LEFT and cursor[0] > 0:
        cursor[0] -= 1
    elif key == curses.KEY_RIGHT and cursor[0] < GRID_SIZE - 1:
        cursor[0] += 1


def _place_fleet_interactive(stdscr, grid: NetGrid) -> None:
    cursor = [0, 0]
    orientation = 0
    for ship in standard_fleet():
        while True:
            left_x = _draw_grids(stdscr, grid, None, cursor, True, False)
            status_y = _NET_GRID_HEIGHT + 3
            _put(stdscr, status_y, left_x, f"배 배치 중: {ship.name} (크기: {ship.size})")
            _put(stdscr, status_y + 1, left_x, f"방향: {'수평' if orientation == 0 else '수직'}")
            _put(stdscr, status_y + 2, left_x, "방향 변경: 'o' = 수평, 'v' = 수직")
            _put(stdscr, status_y + 3, left_x, "화살표 키로 이동하고 엔터를 눌러 배를 배치하세요.")
            stdscr.refresh()
            key = stdscr.getch()
            if key in (ord("o"), ord("O")):
                orientation = 0
            elif key in (ord("v"), ord("V")):
                orientation = 1
            elif key in _ENTER_KEYS:
                x, y = cursor
                if grid.can_place(ship.size, x, y, orientation):
                    grid.place(ship.size, x, y, orientation)
                    _log.info("Placed ship: %s at (%d, %d) Orientation: %s", ship.name, x + 1, y + 1,
                              "Horizontal" if orientation == 0 else "Vertical")
                    break
                _put(stdscr, status_y + 4, left_x, "유효하지 않은 배치입니다. 다른 위치를 선택하세요.")
                _log.info("Invalid placement attempt at (%d, %d)", x + 1, y + 1)
                stdscr.refresh()
                time.sleep(2)
            else:
                _move_cursor(cursor, key)


def _send_layout(stdscr, sock: socket.socket, grid: NetGrid) -> None:
    max_y, _ = stdscr.getmaxyx()
    layout = grid.encode_layout().encode("ascii")
    try:
        sock.sendall(layout)
    except OSError as exc:
        _put(stdscr, max_y - 2, 0, f"그리드 정보를 전송하지 못했습니다: {exc}")
        _log.info("Failed to send grid information: %s", exc)
        stdscr.refresh()
        time.sleep(2)
        return
    _put(stdscr, max_y - 2, 0, f"그리드 정보를 서버에 전송했습니다. 전송된 바이트: {len(layout)}")
    _put(stdscr, max_y - 1, 0, "상대의 배 배치를 기다리는 중...")
    _log.info("Sent grid information: %s, Bytes: %d", layout.decode("ascii"), len(layout))
    stdscr.refresh()
    time.sleep(2)


def _input_loop(stdscr, sock: socket.socket, own: NetGrid, opponent: NetGrid) -> None:
    cursor = [0, 0]
    your_turn = False
    running = True
    last_attack: tuple[int, int] | None = None
    pending_attack: tuple[int | None, int | None] | None = None
    buffer = b""
    stdscr.nodelay(True)
    stdscr.keypad(True)
    try:
        while running:
            max_y, _ = stdscr.getmaxyx()
            readable, _, _ = select.select([sock], [], [], 0.1)
            if readable:
                data = sock.recv(1024)
                if not data:
                    _put(stdscr, GRID_SIZE + 12, 0, "서버가 연결을 끊었습니다.")
                    _log.info("Server disconnected.")
                    stdscr.refresh()
                    break
                buffer += data
                while running and b"\n" in buffer:
                    raw, buffer = buffer.split(b"\n", 1)
                    line = raw.decode("utf-8", errors="replace") + "\n"
                    _log.info("Received from server: %s", line.rstrip("\n"))
                    if pending_attack is not None:
                        x, y = pending_attack
                        pending_attack = None
                        if x is not None and y is not None:
                            if line.startswith("Hit"):
                                own.mark(x, y, State.HIT)
                            elif line.startswith("Miss"):
                                own.mark(x, y, State.MISS)
                        _put(stdscr, max_y - 1, 0, f"상대의 공격 결과: {line.rstrip()}")
                        continue
                    event = parse_server_line(line)
                    if event.kind is EventKind.YOUR_TURN:
                        your_turn = True
                        _put(stdscr, max_y - 3, 0, "당신의 턴.")
                    elif event.kind is EventKind.OPPONENT_TURN:
                        your_turn = False
                        _put(stdscr, max_y - 3, 0, "상대의 턴.")
                    elif event.kind in (EventKind.HIT, EventKind.MISS):
                        if last_attack is not None:
                            state = State.HIT if event.kind is EventKind.HIT else State.MISS
                            opponent.mark(*last_attack, state)
                            last_attack = None
                            _draw_grids(stdscr, own, opponent, cursor, your_turn, True)
                        _put(stdscr, max_y - 2, 0, f"공격 결과: {line.rstrip()}")
                    elif event.kind is EventKind.GAME_OVER:
                        _put(stdscr, max_y - 1, 0, line.rstrip())
                        _log.info("Game over: %s", line.rstrip())
                        running = False
                    elif event.kind is EventKind.ATTACKED:
                        pending_attack = (event.x, event.y)
                stdscr.refresh()

            if not (running and your_turn):
                continue
            key = stdscr.getch()
            if key == -1:
                continue
            if key in (ord("q"), ord("Q")):
                _log.info("Game terminated by user.")
                running = False
            elif key in _ENTER_KEYS:
                x, y = cursor
                if opponent.cell(x, y).state is not State.UNSHOT:
                    _put(stdscr, max_y - 2, 0, "이미 공격한 위치입니다. 다른 위치를 선택하세요.")
                    _log.info("Attempted to attack already attacked location (%d, %d)", x + 1, y + 1)
                    stdscr.refresh()
                    time.sleep(1)
                    continue
                last_attack = (x, y)
                try:
                    sock.sendall(format_attack(x + 1, y + 1).encode("ascii"))
                except OSError as exc:
                    _put(stdscr, max_y - 2, 0, f"전송 오류 (오류={exc})")
                    _log.info("Send error: %s", exc)
                    stdscr.refresh()
                    time.sleep(2)
                    continue
                _log.info("Sent attack coordinates: (%d, %d)", x + 1, y + 1)
                your_turn = False
                _put(stdscr, max_y - 1, 0, "공격을 보냈습니다. 결과를 기다리는 중...")
                stdscr.refresh()
            else:
                _move_cursor(cursor, key)
                _draw_grids(stdscr, own, opponent, cursor, your_turn, True)
    finally:
        stdscr.nodelay(False)
    _draw_grids(stdscr, own, opponent, cursor, your_turn, True)
    time.sleep(2)


def run_multiplayer(stdscr) -> None:
    """Connect to a match server, place the fleet and play a networked game."""
    stdscr.clear()
    _init_multiplayer_colors()
    _animate(stdscr, NET_ART)
    time.sleep(2)
    stdscr.clear()

    max_y, max_x = stdscr.getmaxyx()
    mid_y = max_y // 2 - 4
    mid_x = (max_x - display_width("서버 IP를 입력하세요:")) // 2
    host = _prompt(stdscr, mid_y, mid_x, "서버 IP를 입력하세요: ").strip()
    port_value = _leading_ints(_prompt(stdscr, mid_y + 2, mid_x, "서버 포트를 입력하세요: "), 1)
    try:
        socket.inet_pton(socket.AF_INET, host)
    except OSError as exc:
        raise ValueError("유효하지 않은 주소/ 지원되지 않는 주소입니다.") from exc
    if port_value is None or not 0 < port_value[0] < 65536:
        raise ValueError("유효하지 않은 포트입니다.")

    with socket.create_connection((host, port_value[0])) as sock:
        _log.info("Connected to server %s:%d", host, port_value[0])
        _put(stdscr, max_y - 1, 0, "서버에 성공적으로 연결되었습니다.")
        stdscr.refresh()
        time.sleep(1)
        own, opponent = NetGrid(), NetGrid()
        _place_fleet_interactive(stdscr, own)
        _send_layout(stdscr, sock, own)
        _input_loop(stdscr, sock, own, opponent)
    _log.info("Multiplayer game ended.")


def _title_screen(stdscr) -> None:
    max_y, max_x = stdscr.getmaxyx()
    for row, line in enumerate(TITLE_ART):
        _put(stdscr, max_y // 2 - 4 + row, (max_x - len(line)) // 2, line)
        stdscr.refresh()
        time.sleep(0.2)
    message = "< 게임 시작하기 - ENTER  >"
    _put(stdscr, max_y // 2 + 5, (max_x - display_width(message)) // 2, message)
    stdscr.refresh()
    while stdscr.getch() not in _ENTER_KEYS:
        pass


def _init_menu_colors(stdscr) -> None:
    if not curses.has_colors():
        return
    curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLUE)
    curses.init_pair(2, curses.COLOR_WHITE, curses.COLOR_BLUE)
    curses.init_pair(3, curses.COLOR_BLUE, curses.COLOR_BLACK)
    stdscr.bkgd(" ", curses.color_pair(1))


def _menu(stdscr) -> int | None:
    stdscr.clear()
    max_y, max_x = stdscr.getmaxyx()
    height, width = 10, 25
    top, left = (max_y - height) // 2, (max_x - width) // 2
    attr = _pair(1)
    _put(stdscr, top, left, "+" + "-" * (width - 2) + "+", attr)
    for row in range(top + 1, top + height - 1):
        _put(stdscr, row, left, "|", attr)
        _put(stdscr, row, left + width - 1, "|", attr)
    _put(stdscr, top + height - 1, left, "+" + "-" * (width - 2) + "+", attr)
    _put(stdscr, top + 1, left + 2, "배틀쉽 게임", attr)
    _put(stdscr, top + 3, left + 2, "모드 선택", attr)
    _put(stdscr, top + 5, left + 2, "1. 싱글 플레이어", attr)
    _put(stdscr, top + 6, left + 2, "2. 멀티게임- 배틀넷", attr)
    _put(stdscr, top + 7, left + 2, "3. 종료", attr)
    choice = _leading_ints(_prompt(stdscr, top + 9, left + 2, "선택: "), 1)
    return choice[0] if choice else None


def _session(stdscr) -> None:
    curses.cbreak()
    stdscr.keypad(True)
    _init_menu_colors(stdscr)
    _title_screen(stdscr)
    while True:
        choice = _menu(stdscr)
        if choice == 1:
            run_singleplayer(stdscr)
        elif choice == 2:
            run_multiplayer(stdscr)
            _init_menu_colors(stdscr)
        elif choice == 3:
            return
        else:
            max_y, max_x = stdscr.getmaxyx()
            _put(stdscr, (max_y - 10) // 2 + 11, (max_x - 25) // 2 + 2, "잘못된 선택입니다. 다시 시도하세요.")
            stdscr.refresh()
            time.sleep(2)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Battleship client")
    parser.add_argument("--log", default=LOG_FILE)
    args = parser.parse_args(argv)
    with contextlib.suppress(locale.Error):
        locale.setlocale(locale.LC_ALL, "")
    logging.basicConfig(filename=args.log, level=logging.INFO, format="%(message)s")
    try:
        curses.wrapper(_session)
    except (OSError, ValueError) as exc:
        print(f"연결 실패: {exc}")
        return 1
    return 0