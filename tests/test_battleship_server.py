import random
import socket
from collections import Counter

import pytest

from gameland.battleship.grid import GRID_SIZE, ShipType, State, new_grid
from gameland.battleship.server import (
    BattleshipServer,
    Fleet,
    ShotOutcome,
    main,
    parse_grid,
    place_ships_randomly,
    render_grid_rows,
)


def _column_ship_grid():
    return parse_grid(b"SSSSS" + b"~" * 95)


def test_parse_grid_marks_s_cells_as_carrier():
    grid = _column_ship_grid()
    assert [grid[0][y].ship for y in range(5)] == [ShipType.CARRIER] * 5
    assert grid[0][5].ship == ShipType.NONE
    assert all(cell.state is State.UNSHOT for row in grid for cell in row)


def test_parse_grid_short_data_leaves_rest_empty():
    grid = parse_grid(b"~S")
    assert grid[0][1].ship == ShipType.CARRIER
    ships = sum(1 for row in grid for cell in row if cell.ship != ShipType.NONE)
    assert ships == 1


def test_parse_grid_rejects_empty():
    with pytest.raises(ValueError):
        parse_grid(b"")


def test_place_ships_randomly_places_whole_fleet():
    grid = new_grid()
    place_ships_randomly(grid, random.Random(3))
    counts = Counter(cell.ship for row in grid for cell in row if cell.ship != ShipType.NONE)
    assert counts[ShipType.CARRIER] == ShipType.CARRIER
    assert counts[ShipType.BATTLESHIP] == ShipType.BATTLESHIP
    assert counts[ShipType.CRUISER] == 2 * ShipType.CRUISER
    assert counts[ShipType.DESTROYER] == ShipType.DESTROYER


def test_place_ships_randomly_is_deterministic_with_seed():
    first, second = new_grid(), new_grid()
    place_ships_randomly(first, random.Random(11))
    place_ships_randomly(second, random.Random(11))
    assert [[c.ship for c in row] for row in first] == [[c.ship for c in row] for row in second]


def test_render_grid_rows_of_empty_grid():
    rows = render_grid_rows(new_grid())
    assert len(rows) == GRID_SIZE
    assert rows[0] == "~ ~ ~ ~ ~ ~ ~ ~ ~ ~\n"


def test_render_grid_rows_shows_ships_and_shots():
    grid = _column_ship_grid()
    Fleet(grid, 8).fire(0, 0)
    cells = render_grid_rows(grid)[0].split()
    assert cells[0] == State.HIT.value
    assert cells[1] == str(int(ShipType.CARRIER))


def test_fire_outcomes_carry_wire_text():
    fleet = Fleet(_column_ship_grid(), 8)
    assert fleet.fire(9, 9).value == "Miss\n"
    assert fleet.fire(-1, 0).value == "Invalid Coordinates\n"
    winning = Fleet(_column_ship_grid(), 1)
    outcomes = [winning.fire(0, y) for y in range(5)]
    assert outcomes[-1].value == "Hit, sunk\n You won!\n"


def test_fire_miss_then_repeat():
    fleet = Fleet(_column_ship_grid(), 8)
    assert fleet.fire(9, 9) is ShotOutcome.MISS
    assert fleet.grid[9][9].state is State.MISS
    assert fleet.fire(9, 9) is ShotOutcome.REPEAT


def test_fire_out_of_range_is_invalid():
    fleet = Fleet(_column_ship_grid(), 8)
    assert fleet.fire(-1, 0) is ShotOutcome.INVALID
    assert fleet.fire(0, GRID_SIZE) is ShotOutcome.INVALID


def test_sinking_a_ship_marks_it_and_counts():
    fleet = Fleet(_column_ship_grid(), 2)
    outcomes = [fleet.fire(0, y) for y in range(5)]
    assert outcomes[:4] == [ShotOutcome.HIT] * 4
    assert outcomes[4] is ShotOutcome.SUNK
    assert fleet.sunk == 1
    assert all(fleet.grid[0][y].state is State.SUNK for y in range(5))


def test_sinking_last_ship_wins():
    fleet = Fleet(_column_ship_grid(), 1)
    outcomes = [fleet.fire(0, y) for y in range(5)]
    assert outcomes[-1] is ShotOutcome.WON


def _read_all(sock):
    chunks = []
    while True:
        data = sock.recv(4096)
        if not data:
            break
        chunks.append(data)
    return b"".join(chunks).decode("utf-8")


def test_play_match_runs_until_a_fleet_is_sunk():
    server1, client1 = socket.socketpair()
    server2, client2 = socket.socketpair()
    for client in (client1, client2):
        client.settimeout(5)
    client1.sendall(b"~" * 100 + b"".join(f"(1 {y})\n".encode() for y in range(1, 6)))
    client2.sendall(b"SSSSS" + b"~" * 95 + b"(10 10)\n" * 4)

    server = BattleshipServer("test", 0, ships_total=1)
    server.turn_pause = 0
    winner = server.play_match(server1, server2)
    assert winner == 1

    first = _read_all(client1)
    second = _read_all(client2)
    client1.close()
    client2.close()
    assert first.startswith("YOUR_TURN\n")
    assert "Hit, sunk\n You won!\n" in first
    assert second.startswith("OPPONENT_TURN\n")
    assert "Miss\n" in second
    assert "You already shot there\n" in second


def test_main_requires_id_and_port():
    with pytest.raises(SystemExit):
        main([])