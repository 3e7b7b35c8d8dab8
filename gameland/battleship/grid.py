"""Cells, ship types and the text form of the battleship server grid."""

from __future__ import annotations

import enum
from dataclasses import dataclass

GRID_SIZE = 10

# right, left, up, down as (x, y) steps
DIRECTIONS = ((1, 0), (-1, 0), (0, -1), (0, 1))


class State(str, enum.Enum):
    """What has happened to a cell; the value is its display character."""

    SUNK = "#"
    HIT = "X"
    MISS = "O"
    UNSHOT = "~"


class ShipType(enum.IntEnum):
    """Ship kinds, valued by their length."""

    CARRIER = 5
    BATTLESHIP = 4
    CRUISER = 3
    SUBMARINE = 3
    DESTROYER = 2
    NONE = 0


@dataclass
class Cell:
    ship: ShipType = ShipType.NONE
    state: State = State.UNSHOT


def new_grid() -> list[list[Cell]]:
    """A GRID_SIZE x GRID_SIZE grid of empty, unshot cells."""
    return [[Cell() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def grid_to_string(grid: list[list[Cell]]) -> str:
    """Each cell's state character followed by a space, one line per row."""
    return "".join("".join(f"{cell.state.value} " for cell in row) + "\n" for row in grid)