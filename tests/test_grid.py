from gameland.battleship.grid import (
    DIRECTIONS,
    GRID_SIZE,
    Cell,
    ShipType,
    State,
    grid_to_string,
    new_grid,
)


def test_new_grid_is_empty_and_square():
    grid = new_grid()
    assert len(grid) == GRID_SIZE
    assert all(len(row) == GRID_SIZE for row in grid)
    assert all(cell == Cell(ShipType.NONE, State.UNSHOT) for row in grid for cell in row)


def test_new_grid_cells_are_independent():
    grid = new_grid()
    grid[0][0].state = State.HIT
    grid[0][0].ship = ShipType.CARRIER
    assert grid[0][1].state is State.UNSHOT
    assert grid[1][0].ship is ShipType.NONE


def test_grid_to_string_of_fresh_grid():
    lines = grid_to_string(new_grid()).split("\n")
    assert lines[-1] == ""
    assert len(lines) == GRID_SIZE + 1
    assert all(line == "~ " * GRID_SIZE for line in lines[:-1])


def test_grid_to_string_shows_states():
    grid = new_grid()
    grid[2][3].state = State.HIT
    grid[5][0].state = State.MISS
    grid[9][9].state = State.SUNK
    lines = grid_to_string(grid).splitlines()
    assert lines[2][6] == "X"
    assert lines[5][0] == "O"
    assert lines[9][18] == "#"
    assert lines[0].split() == ["~"] * GRID_SIZE


def test_state_values_are_display_characters():
    grid = new_grid()
    grid[0][0].state = State("X")
    grid[0][1].state = State("#")
    line = grid_to_string(grid).splitlines()[0]
    assert line.split()[:3] == ["X", "#", "~"]
    assert grid[0][0].state is State.HIT
    assert grid[0][1].state is State.SUNK


def test_ship_types_are_lengths_in_grid_cells():
    grid = new_grid()
    grid[0][0].ship = ShipType.SUBMARINE
    grid[0][1].ship = ShipType.CARRIER
    grid[0][2].ship = ShipType.DESTROYER
    assert grid[0][0].ship is ShipType.CRUISER
    assert [int(grid[0][y].ship) for y in range(4)] == [3, 5, 2, 0]


def test_directions_step_to_distinct_neighbours_in_grid():
    grid = new_grid()
    centre = GRID_SIZE // 2
    neighbours = {(centre + dx, centre + dy) for dx, dy in DIRECTIONS}
    assert len(neighbours) == 4
    assert all(abs(x - centre) + abs(y - centre) == 1 for x, y in neighbours)
    assert all(grid[x][y] == Cell(ShipType.NONE, State.UNSHOT) for x, y in neighbours)