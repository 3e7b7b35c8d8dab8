import pytest

from gameland.battleship.client import (
    EventKind,
    NetCell,
    NetGrid,
    ServerEvent,
    format_attack,
    parse_server_line,
)
from gameland.battleship.grid import GRID_SIZE, State


def test_new_cell_is_empty_and_unshot():
    cell = NetCell()
    assert cell.ship == 0
    assert cell.state is State.UNSHOT


def test_empty_grid_layout_is_all_water():
    layout = NetGrid().encode_layout()
    assert layout == "~" * (GRID_SIZE * GRID_SIZE)


def test_place_horizontal_marks_cells_in_row():
    grid = NetGrid()
    grid.place(3, 2, 4, 0)
    assert [grid.cell(x, 4).ship for x in range(2, 5)] == [3, 3, 3]
    assert grid.cell(5, 4).ship == 0
    assert grid.encode_layout().count("S") == 3


def test_place_vertical_marks_cells_in_column():
    grid = NetGrid()
    grid.place(2, 0, 0, 1)
    assert grid.cell(0, 0).ship == 2
    assert grid.cell(0, 1).ship == 2
    assert grid.cell(1, 0).ship == 0


def test_layout_index_is_row_major():
    grid = NetGrid()
    grid.place(2, 0, 1, 0)
    layout = grid.encode_layout()
    assert layout[GRID_SIZE] == "S"
    assert layout[GRID_SIZE + 1] == "S"
    assert layout[0] == "~"


def test_cannot_place_off_edge_or_overlapping():
    grid = NetGrid()
    assert not grid.can_place(5, GRID_SIZE - 2, 0, 0)
    assert not grid.can_place(5, 0, GRID_SIZE - 2, 1)
    grid.place(4, 0, 0, 0)
    assert not grid.can_place(3, 1, 0, 1)
    assert grid.can_place(3, 0, 1, 0)


def test_place_rejects_invalid_position():
    grid = NetGrid()
    grid.place(3, 0, 0, 0)
    with pytest.raises(ValueError):
        grid.place(2, 1, 0, 1)
    assert grid.encode_layout().count("S") == 3


def test_bad_orientation_raises():
    with pytest.raises(ValueError):
        NetGrid().can_place(2, 0, 0, 2)


def test_own_symbols_show_ships_and_hits():
    grid = NetGrid()
    grid.place(2, 0, 0, 0)
    grid.mark(1, 0, State.HIT)
    grid.mark(5, 5, State.MISS)
    rows = grid.symbols(own=True)
    assert rows[0][0] == "S"
    assert rows[0][1] == "H"
    assert rows[5][5] == "M"
    assert rows[9][9] == "~"


def test_opponent_symbols_hide_ships():
    grid = NetGrid()
    grid.place(2, 0, 0, 0)
    grid.mark(0, 0, State.HIT)
    grid.mark(3, 3, State.MISS)
    rows = grid.symbols(own=False)
    assert rows[0][0] == "X"
    assert rows[0][1] == "~"
    assert rows[3][3] == "O"
    assert len(rows) == GRID_SIZE
    assert all(len(row) == GRID_SIZE for row in rows)


def test_mark_outside_grid_returns_false():
    grid = NetGrid()
    assert grid.mark(GRID_SIZE, 0, State.HIT) is False
    assert grid.mark(-1, 0, State.HIT) is False
    assert grid.mark(0, 0, State.MISS) is True
    assert grid.cell(0, 0).state is State.MISS


@pytest.mark.parametrize(
    "line, kind",
    [
        ("YOUR_TURN\n", EventKind.YOUR_TURN),
        ("OPPONENT_TURN\n", EventKind.OPPONENT_TURN),
        ("Hit !\n", EventKind.HIT),
        ("Hit, sunk !\n", EventKind.HIT),
        ("Miss\n", EventKind.MISS),
        ("You won!\n", EventKind.GAME_OVER),
        ("You lost\n", EventKind.GAME_OVER),
        ("You already shot there\n", EventKind.OTHER),
        ("YOUR_TURN", EventKind.OTHER),
        ("~ ~ ~ ~ ~ ~ ~ ~ ~ ~\n", EventKind.OTHER),
    ],
)
def test_parse_server_line_kinds(line, kind):
    event = parse_server_line(line)
    assert event.kind is kind
    assert event.text == line


def test_parse_attack_converts_to_zero_based():
    event = parse_server_line("Attack (3 7)\n")
    assert event == ServerEvent(EventKind.ATTACKED, "Attack (3 7)\n", 2, 6)


def test_parse_malformed_attack_has_no_coordinates():
    event = parse_server_line("Attack now\n")
    assert event.kind is EventKind.ATTACKED
    assert event.x is None and event.y is None


def test_format_attack_wire_form():
    assert format_attack(1, 10) == "(1 10)\n"


def test_format_attack_round_trips_through_attack_line():
    event = parse_server_line("Attack " + format_attack(4, 9))
    assert (event.x, event.y) == (3, 8)