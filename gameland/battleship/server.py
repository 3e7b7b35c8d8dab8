"""Match server for networked battleship: two clients take turns firing."""

from __future__ import annotations

import argparse
import contextlib
import enum
import logging
import random
import re
import socket
import time

from .grid import DIRECTIONS, GRID_SIZE, Cell, ShipType, State, new_grid

DEFAULT_SHIPS_TOTAL = 8
_LINE_MAX = 255
_GRID_BYTES = GRID_SIZE * GRID_SIZE

_FLEET = (
    ShipType.CARRIER,
    ShipType.BATTLESHIP,
    ShipType.CRUISER,
    ShipType.SUBMARINE,
    ShipType.DESTROYER,
)
# right, down, left, up as (x, y) steps used for random placement
_PLACEMENT_STEPS = ((1, 0), (0, 1), (-1, 0), (0, -1))

_SHOT_RE = re.compile(r"\(\s*([+-]?\d+)(?:\s*([+-]?\d+))?")

MSG_YOUR_TURN = "YOUR_TURN\n"
MSG_OPPONENT_TURN = "OPPONENT_TURN\n"

_log = logging.getLogger(__name__)


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE


def place_ships_randomly(grid: list[list[Cell]], rng: random.Random | None = None) -> None:
    """Place the standard fleet at random on a grid indexed ``grid[x][y]``."""
    rng = rng if rng is not None else random.Random()
    for ship in _FLEET:
        while True:
            x = rng.randrange(GRID_SIZE)
            y = rng.randrange(GRID_SIZE)
            dx, dy = _PLACEMENT_STEPS[rng.randrange(len(_PLACEMENT_STEPS))]
            cells = [(x + dx * i, y + dy * i) for i in range(ship)]
            if all(_in_bounds(cx, cy) and grid[cx][cy].ship == ShipType.NONE for cx, cy in cells):
                for cx, cy in cells:
                    grid[cx][cy].ship = ship
                break


def parse_grid(data: bytes | str) -> list[list[Cell]]:
    """Build a grid from a client's layout; every ``S`` becomes a ship cell."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data:
        raise ValueError("no grid data received")
    grid = new_grid()
    for index, byte in enumerate(data[:_GRID_BYTES]):
        if byte == ord("S"):
            grid[index // GRID_SIZE][index % GRID_SIZE].ship = ShipType.CARRIER
    return grid


def _cell_char(cell: Cell) -> str:
    if cell.ship == ShipType.NONE or cell.state is not State.UNSHOT:
        return cell.state.value
    return str(int(cell.ship))


def render_grid_rows(grid: list[list[Cell]]) -> list[str]:
    """One line per row: shot cells show their state, hidden ships their length."""
    return [" ".join(_cell_char(cell) for cell in row) + "\n" for row in grid]


def _debug_grid(grid: list[list[Cell]]) -> str:
    return "".join(
        "".join(
            (cell.state.value if cell.state is not State.UNSHOT else str(int(cell.ship))) + " "
            for cell in row
        )
        + "\n"
        for row in grid
    )


class ShotOutcome(enum.Enum):
    """Result of a shot; the value is the reply sent to the shooter."""

    INVALID = "Invalid Coordinates\n"
    REPEAT = "You already shot there\n"
    MISS = "Miss\n"
    HIT = "Hit !\n"
    SUNK = "Hit, sunk !\n"
    WON = "Hit, sunk\n You won!\n"


class Fleet:
    """A player's grid under fire, counting the ships sunk so far."""

    def __init__(self, grid: list[list[Cell]], ships_total: int = DEFAULT_SHIPS_TOTAL) -> None:
        self.grid = grid
        self.ships_total = ships_total
        self.sunk = 0

    def _ship_at(self, x: int, y: int) -> ShipType:
        return self.grid[x][y].ship if _in_bounds(x, y) else ShipType.NONE

    def _state_at(self, x: int, y: int) -> State | None:
        return self.grid[x][y].state if _in_bounds(x, y) else None

    def fire(self, x: int, y: int) -> ShotOutcome:
        """Fire at 0-based ``(x, y)``, updating cell states."""
        if not _in_bounds(x, y):
            return ShotOutcome.INVALID
        cell = self.grid[x][y]
        if cell.state is not State.UNSHOT:
            return ShotOutcome.REPEAT
        if cell.ship == ShipType.NONE:
            cell.state = State.MISS
            return ShotOutcome.MISS

        cell.state = State.HIT
        ship = cell.ship
        orientation = 0
        for index, (dx, dy) in enumerate(DIRECTIONS):
            if self._ship_at(x + dx, y + dy) == ship:
                orientation = index
        dx, dy = DIRECTIONS[orientation]

        start_x, start_y = x, y
        while self._ship_at(start_x - dx, start_y - dy) == ship:
            start_x -= dx
            start_y -= dy
        hits = sum(
            1
            for i in range(ship)
            if self._state_at(start_x + dx * i, start_y + dy * i) is State.HIT
        )
        if hits != ship:
            return ShotOutcome.HIT

        self.sunk += 1
        for i in range(ship):
            cx, cy = x + dx * i, y + dy * i
            if _in_bounds(cx, cy):
                self.grid[cx][cy].state = State.SUNK
        return ShotOutcome.WON if self.sunk == self.ships_total else ShotOutcome.SUNK


def _parse_shot(text: str) -> tuple[int, int]:
    """Turn ``(x y)`` with 1-based coordinates into 0-based ones; missing parts count as 0."""
    match = _SHOT_RE.match(text)
    x = int(match.group(1)) if match else 0
    y = int(match.group(2)) if match and match.group(2) is not None else 0
    return x - 1, y - 1


def _peer(conn: socket.socket) -> str:
    with contextlib.suppress(OSError):
        address = conn.getpeername()
        if isinstance(address, tuple) and len(address) >= 2:
            return f"{address[0]},{address[1]:4d}"
        if address:
            return str(address)
    return "?"


class BattleshipServer:
    """Accepts pairs of clients and referees one match per pair."""

    turn_pause = 2.0

    def __init__(self, server_id: str, port: int, ships_total: int = DEFAULT_SHIPS_TOTAL) -> None:
        self.server_id = server_id
        self.port = port
        self.ships_total = ships_total

    def _take_turn(self, reader, conn: socket.socket, target: Fleet) -> ShotOutcome:
        line = reader.readline(_LINE_MAX)
        if not line:
            raise ConnectionError("client disconnected")
        text = line.decode("utf-8", errors="replace")
        _log.info("server %s received from client (%s) : %s", self.server_id, _peer(conn), text)
        outcome = target.fire(*_parse_shot(text))
        conn.sendall(outcome.value.encode("utf-8"))
        for row in render_grid_rows(target.grid):
            conn.sendall(row.encode("utf-8"))
        _log.info("\n%s", _debug_grid(target.grid))
        return outcome

    def play_match(self, conn1: socket.socket, conn2: socket.socket) -> int:
        """Run one match to the end; return the winning player's number (1 or 2)."""
        conns = (conn1, conn2)
        readers = [conn.makefile("rb") for conn in conns]
        try:
            grids = []
            for number, reader in enumerate(readers, 1):
                print(f"클라이언트 {number}의 그리드 수신 중...")
                data = reader.read1(_GRID_BYTES)
                if not data:
                    raise ConnectionError("그리드 데이터 수신 실패")
                grids.append(parse_grid(data))
            fleets = [Fleet(grid, self.ships_total) for grid in grids]

            current = 0
            while True:
                other = 1 - current
                conns[current].sendall(MSG_YOUR_TURN.encode("utf-8"))
                conns[other].sendall(MSG_OPPONENT_TURN.encode("utf-8"))
                outcome = self._take_turn(readers[current], conns[current], fleets[other])
                if outcome is ShotOutcome.WON:
                    return current + 1
                current = other
                time.sleep(self.turn_pause)
        finally:
            for reader in readers:
                with contextlib.suppress(OSError):
                    reader.close()
            for conn in conns:
                with contextlib.suppress(OSError):
                    conn.close()

    def serve_forever(self) -> None:
        """Listen on the port and play matches between successive pairs of clients."""
        with socket.create_server(("", self.port), backlog=5) as server:
            while True:
                conn1, _ = server.accept()
                conn2, _ = server.accept()
                try:
                    winner = self.play_match(conn1, conn2)
                    _log.info("player %d won the match", winner)
                except OSError as exc:
                    _log.error("match aborted: %s", exc)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Battleship match server")
    parser.add_argument("id", help="server identifier shown in the log")
    parser.add_argument("port", type=int)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    server = BattleshipServer(args.id, args.port, DEFAULT_SHIPS_TOTAL)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"{parser.prog}: {exc}")
        return 1
    return 0