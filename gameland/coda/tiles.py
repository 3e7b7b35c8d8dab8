"""Tiles, hands and the shared deck of the Coda guessing game."""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass, field
from typing import Iterator

MAX_NUMBER = 12
MAX_PLAYERS = 2
HAND_SIZE = 4
COLORS = ("B", "W")


@dataclass
class Tile:
    """A numbered tile of one colour, face down until guessed."""

    number: int
    color: str
    revealed: bool = False

    def sort_key(self) -> tuple[int, str]:
        """Order by number first, then by colour."""
        return (self.number, self.color)

    def label(self, hidden: bool = False) -> str:
        """Text such as ``[B5]``; ``[B?]`` when hidden and not yet revealed."""
        if hidden and not self.revealed:
            return f"[{self.color}?]"
        return f"[{self.color}{self.number}]"


class GuessResult(enum.Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    INVALID_POSITION = "invalid_position"


@dataclass
class Hand:
    """The tiles a player holds, always kept in sorted order."""

    tiles: list[Tile] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tiles.sort(key=Tile.sort_key)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, index: int) -> Tile:
        return self.tiles[index]

    def add(self, tile: Tile) -> None:
        self.tiles.append(tile)
        self.tiles.sort(key=Tile.sort_key)

    def guess(self, position: int, color: str, number: int) -> GuessResult:
        """Guess the tile at a 1-based position; a right guess reveals it."""
        if not 1 <= position <= len(self.tiles):
            return GuessResult.INVALID_POSITION
        tile = self.tiles[position - 1]
        if tile.color == color and tile.number == number:
            tile.revealed = True
            return GuessResult.CORRECT
        return GuessResult.WRONG

    def all_revealed(self) -> bool:
        return all(tile.revealed for tile in self.tiles)


def new_deck() -> list[Tile]:
    """A fresh, ordered deck: every number once in black and once in white."""
    return [Tile(number, color) for number in range(1, MAX_NUMBER + 1) for color in COLORS]


class CodaGame:
    """A shuffled deck dealt into two sorted hands."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.deck = new_deck()
        self._rng.shuffle(self.deck)
        self.hands = [
            Hand(self.deck[player * HAND_SIZE:(player + 1) * HAND_SIZE])
            for player in range(MAX_PLAYERS)
        ]
        self._next = MAX_PLAYERS * HAND_SIZE

    @property
    def remaining(self) -> int:
        return len(self.deck) - self._next

    def draw_tile(self, player_id: int) -> Tile | None:
        """Move the next deck tile into a player's hand; None when the deck is empty."""
        if self._next >= len(self.deck):
            return None
        tile = self.deck[self._next]
        self._next += 1
        self.hands[player_id].add(tile)
        return tile