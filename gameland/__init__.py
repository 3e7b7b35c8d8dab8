"""Terminal games: Battleship, Coda, a typing race lobby server and a launcher."""

__version__ = "0.1.0"