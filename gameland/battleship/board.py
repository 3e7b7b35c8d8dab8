"""Single-player battleship boards, the standard fleet and the computer opponent."""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass, field

from .grid import GRID_SIZE

WATER = "~"
SHIP = "S"
HIT = "X"
MISS = "O"


class Orientation(enum.IntEnum):
    HORIZONTAL = 0
    VERTICAL = 1


@dataclass
class Ship:
    """A named ship of a given length and the (x, y) cells it occupies."""

    name: str
    size: int
    cells: list[tuple[int, int]] = field(default_factory=list)
    hits: int = 0

    @property
    def sunk(self) -> bool:
        return self.hits >= self.size


class AttackResult(enum.IntEnum):
    """Outcome of a shot at a board."""

    HIT = 1
    MISS = 0
    REPEAT = -1
    OUT_OF_RANGE = -2

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    AttackResult.HIT: "명중!",
    AttackResult.MISS: "빗나감!",
    AttackResult.REPEAT: "이미 공격한 위치입니다.",
    AttackResult.OUT_OF_RANGE: "좌표가 범위를 벗어났습니다.",
}


def standard_fleet() -> list[Ship]:
    """The five ships each side places, largest first."""
    return [
        Ship("Carrier", 5),
        Ship("Battleship", 4),
        Ship("Cruiser", 3),
        Ship("Submarine", 3),
        Ship("Destroyer", 2),
    ]


def display_width(text: str) -> int:
    """Screen columns of text: three-byte UTF-8 characters such as Hangul count two."""
    width = 0
    data = iter(text.encode("utf-8"))
    for byte in data:
        if byte < 0x80:
            width += 1
        elif byte >= 0xE0:
            width += 2
            next(data, None)
            next(data, None)
        else:
            width += 1
    return width


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE


class Board:
    """A square of water indexed ``cells[y][x]`` with the ships placed on it."""

    def __init__(self) -> None:
        self.cells = [[WATER] * GRID_SIZE for _ in range(GRID_SIZE)]
        self.ships: list[Ship] = []

    @staticmethod
    def _footprint(ship: Ship, x: int, y: int, orientation: int) -> list[tuple[int, int]]:
        direction = Orientation(orientation)
        if direction is Orientation.HORIZONTAL:
            return [(x + i, y) for i in range(ship.size)]
        return [(x, y + i) for i in range(ship.size)]

    def can_place(self, ship: Ship, x: int, y: int, orientation: int) -> bool:
        """Whether the ship fits at 0-based (x, y) without leaving the board or overlapping."""
        try:
            cells = self._footprint(ship, x, y, orientation)
        except ValueError as exc:
            raise ValueError(f"orientation must be 0 or 1, not {orientation!r}") from exc
        return all(_in_bounds(cx, cy) and self.cells[cy][cx] != SHIP for cx, cy in cells)

    def place(self, ship: Ship, x: int, y: int, orientation: int) -> None:
        """Put the ship on the board; ValueError if it cannot go there."""
        if not self.can_place(ship, x, y, orientation):
            raise ValueError(f"{ship.name} cannot be placed at ({x}, {y})")
        ship.cells = self._footprint(ship, x, y, orientation)
        for cx, cy in ship.cells:
            self.cells[cy][cx] = SHIP
        self.ships.append(ship)

    def attack(self, x: int, y: int) -> AttackResult:
        """Fire at 0-based (x, y), marking a hit or a miss."""
        if not _in_bounds(x, y):
            return AttackResult.OUT_OF_RANGE
        mark = self.cells[y][x]
        if mark == SHIP:
            self.cells[y][x] = HIT
            for ship in self.ships:
                if (x, y) in ship.cells:
                    ship.hits += 1
            return AttackResult.HIT
        if mark == WATER:
            self.cells[y][x] = MISS
            return AttackResult.MISS
        return AttackResult.REPEAT

    def all_sunk(self) -> bool:
        return all(ship.sunk for ship in self.ships)

    def has_targets(self) -> bool:
        """Whether any cell is still unshot."""
        return any(mark in (WATER, SHIP) for row in self.cells for mark in row)

    def render(self, reveal: bool = True) -> list[str]:
        """The board as text lines; ships stay hidden as water unless revealed."""
        separator = "    " + "---+" * GRID_SIZE
        lines = ["     " + "".join(f" {col:2d} " for col in range(1, GRID_SIZE + 1)), separator]
        for number, row in enumerate(self.cells, 1):
            marks = "".join(
                f" {WATER if mark == SHIP and not reveal else mark} |" for mark in row
            )
            lines.append(f"{number:2d} | {marks}")
            lines.append(separator)
        return lines


class AiOpponent:
    """Computer player: random shots, and at difficulty 2 or 3 it hunts around hits."""

    def __init__(self, difficulty: int = 1, rng: random.Random | None = None) -> None:
        if difficulty not in (1, 2, 3):
            raise ValueError(f"difficulty must be 1, 2 or 3, not {difficulty!r}")
        self.difficulty = difficulty
        self._rng = rng if rng is not None else random.Random()
        self._targets: list[tuple[int, int]] = []

    def place_fleet(self, board: Board) -> list[Ship]:
        """Place the standard fleet at random positions on the board."""
        fleet = standard_fleet()
        for ship in fleet:
            while True:
                x = self._rng.randrange(GRID_SIZE)
                y = self._rng.randrange(GRID_SIZE)
                orientation = self._rng.randrange(2)
                if board.can_place(ship, x, y, orientation):
                    board.place(ship, x, y, orientation)
                    break
        return fleet

    def _random_shot(self, board: Board) -> tuple[int, int, AttackResult]:
        if not board.has_targets():
            raise ValueError("no cells left to attack")
        while True:
            x = self._rng.randrange(GRID_SIZE)
            y = self._rng.randrange(GRID_SIZE)
            result = board.attack(x, y)
            if result in (AttackResult.HIT, AttackResult.MISS):
                return x, y, result

    def attack(self, board: Board) -> tuple[int, int, AttackResult]:
        """Take one shot; return where it went and what it did."""
        if self.difficulty == 1:
            return self._random_shot(board)

        while self._targets:
            x, y = self._targets.pop()
            result = board.attack(x, y)
            if result in (AttackResult.HIT, AttackResult.MISS):
                return x, y, result

        x, y, result = self._random_shot(board)
        if result is AttackResult.HIT:
            if x > 0:
                self._targets.append((x - 1, y))
            if x < GRID_SIZE - 1:
                self._targets.append((x + 1, y))
            if y > 0:
                self._targets.append((x, y - 1))
            if y < GRID_SIZE - 1:
                self._targets.append((x, y + 1))
        return x, y, result