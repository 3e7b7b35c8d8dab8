# gameland

A small collection of terminal games with a curses front end:

- **Battleship**: play against the computer at three difficulty levels, or
  against another player through a match server.
- **Coda**: a two-player number-and-colour deduction game played over TCP.
- **Typing race**: a lobby server where players create rooms, chat, pick a
  game mode and time limit, and report scores.

The package uses only the Python standard library. The interactive parts need
a terminal with `curses` support (Linux, macOS and other POSIX systems). Screen
text is in Korean.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

### Battleship

```
gameland-battleship [--log FILE]
```

Shows a title screen (press ENTER), then a menu where you type a number:

1. Single player: choose a difficulty (1 easy, 2 normal, 3 hard), place your
   five ships (Carrier 5, Battleship 4, Cruiser 3, Submarine 3, Destroyer 2)
   by entering a start position `x y` (1 to 10) and an orientation
   (0 horizontal, 1 vertical), then fire at the enemy board by entering
   coordinates `x y`. At difficulty 2 and 3 the computer follows up on its
   hits by shooting at neighbouring cells.
2. Network game: enter the server's IPv4 address and port, place your ships
   with the arrow keys (`o` horizontal, `v` vertical, ENTER to place), then on
   your turn move the cursor over the opponent's grid and press ENTER to fire.
   `Q` on your turn leaves the match.
3. Quit.

Network play writes a log to `client_log.txt` unless `--log` names another
file.

### Battleship match server

```
gameland-battleship-server NAME PORT
```

Listens on `PORT`, takes the first two clients that connect, reads each one's
ship layout, and then alternates turns, telling each client `YOUR_TURN` or
`OPPONENT_TURN`. After every shot it replies with the outcome (`Miss`,
`Hit !`, `Hit, sunk !`, `You already shot there`, `Invalid Coordinates`)
followed by the target grid. A match ends when a player has sunk eight ships;
the server then waits for the next pair. `NAME` appears in its log lines.

### Coda

```
gameland-coda-server [--host HOST] [--port PORT]
gameland-coda [--host HOST] [--port PORT]
```

The server listens on port 8080 by default (the client connects to
`127.0.0.1:8080` by default). It shuffles a deck of the numbers 1 to 12 in
black (`B`) and white (`W`) and deals four tiles to each of two players; hands
are kept sorted by number, then colour. Once two players are connected, each
answers `y` to join; any other answer ends the game for both.

On your turn you see the opponent's tiles (unrevealed ones as `[B?]`) and your
own, and guess an opponent tile as `position colour number`, for example
`1 B 5`. A correct guess reveals the tile and asks whether to guess again;
answering `n` passes the turn. A wrong guess, or a position outside the
opponent's hand, draws you a new tile (while the deck lasts) and passes the
turn. Reveal every opponent tile to win.

### Typing race server

```
gameland-typing-server [--host HOST] [--port PORT] [--log FILE]
```

Listens on port 12345 and appends its log to `server.log` by default. Clients
send their name first and are answered with `WELCOME <name>`; after that they
send commands:

| Command | Effect |
| --- | --- |
| `/create_room <name>` | create a room and join it as host |
| `/join_room <id>` | join an existing room |
| `/list` | list rooms |
| `/chat <message>` | send a message to your room |
| `/set_game <mode> <seconds>` | change the game settings (host only) |
| `/game_list` | list the game modes |
| `/ready` | mark yourself ready; the game starts when everyone in the room is |
| `/help` | show the command list |

Results are reported with `SCORE <n>`, which announces the room's winner once
every member has sent a score, or `GAME_OVER <n>`, which announces the winner
at once to the rest of the room. A bare `GAME_OVER` names the sender as the
winner to every connected user. When the host leaves, the most recent member
to join becomes host. SIGINT, SIGTERM or SIGQUIT closes all connections and
stops the server.

### Launcher

```
gameland
```

Shows a start screen (press ENTER) and then a game selection screen. Use the
arrow keys to choose, ENTER to start and `Q` to quit. Starting a game runs an
external program from the current directory: `./battle_ship/battleship_client`,
`./typing_game/client` or `./coda_module/client`. When it exits, press ENTER
to return to the menu.

## What is not included

- The launcher does not start this package's own commands; the programs it
  runs must exist at the paths above, or it reports a failure code.
- There is no typing race client: the falling-words game itself, and a
  terminal for the lobby's chat and commands, are not part of the package.
  Any TCP client that speaks the text commands above can use the server.

## Library use

The game rules work without a terminal:

```python
import random

from gameland.battleship.board import AiOpponent, Board
from gameland.coda.tiles import CodaGame

game = CodaGame(random.Random(7))
tile = game.draw_tile(0)
print(tile.label(), [t.label() for t in game.hands[0]])

board = Board()
AiOpponent(1, random.Random(7)).place_fleet(board)
print("\n".join(board.render(reveal=True)))
```

Other pieces include `gameland.battleship.server.Fleet` for refereeing shots,
`gameland.battleship.client.NetGrid` and `parse_server_line` for the match
protocol, and `gameland.typingrace.rooms.Lobby` for rooms and users.