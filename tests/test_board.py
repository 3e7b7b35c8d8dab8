import random

import pytest

from gameland.battleship.board import (
    AiOpponent,
    AttackResult,
    Board,
    Ship,
    display_width,
    standard_fleet,
)
from gameland.battleship.grid import GRID_SIZE


def _count(board, mark):
    return sum(row.count(mark) for row in board.cells)


def test_standard_fleet():
    fleet = standard_fleet()
    assert [ship.name for ship in fleet] == [
        "Carrier",
        "Battleship",
        "Cruiser",
        "Submarine",
        "Destroyer",
    ]
    assert [ship.size for ship in fleet] == [5, 4, 3, 3, 2]
    assert all(ship.hits == 0 and not ship.cells for ship in fleet)


def test_attack_results_carry_codes_and_messages():
    board = Board()
    board.place(Ship("Destroyer", 2), 4, 4, 0)
    hit = board.attack(4, 4)
    miss = board.attack(0, 0)
    repeat = board.attack(0, 0)
    outside = board.attack(GRID_SIZE, 0)
    assert [int(r) for r in (hit, miss, repeat, outside)] == [1, 0, -1, -2]
    assert hit.message == "명중!"
    assert outside.message == "좌표가 범위를 벗어났습니다."


def test_display_width():
    assert display_width("abc") == 3
    assert display_width("") == 0
    assert display_width("한") == 2
    assert display_width("a한b") == display_width("ab") + display_width("한")


def test_place_horizontal_and_vertical():
    board = Board()
    carrier = Ship("Carrier", 5)
    board.place(carrier, 0, 0, 0)
    assert carrier.cells == [(i, 0) for i in range(5)]
    destroyer = Ship("Destroyer", 2)
    board.place(destroyer, 9, 8, 1)
    assert destroyer.cells == [(9, 8), (9, 9)]
    assert _count(board, "S") == 7
    assert board.ships == [carrier, destroyer]


def test_can_place_rejects_edges_and_overlap():
    board = Board()
    board.place(Ship("Cruiser", 3), 2, 2, 0)
    assert not board.can_place(Ship("Carrier", 5), 6, 0, 0)
    assert not board.can_place(Ship("Carrier", 5), 0, 6, 1)
    assert not board.can_place(Ship("Destroyer", 2), 3, 1, 1)
    assert board.can_place(Ship("Destroyer", 2), 3, 3, 1)
    assert not board.can_place(Ship("Destroyer", 2), -1, 0, 0)


def test_place_invalid_raises():
    board = Board()
    board.place(Ship("Cruiser", 3), 0, 0, 0)
    with pytest.raises(ValueError):
        board.place(Ship("Destroyer", 2), 1, 0, 1)
    with pytest.raises(ValueError):
        board.can_place(Ship("Destroyer", 2), 5, 5, 2)
    assert len(board.ships) == 1


def test_attack_outcomes():
    board = Board()
    ship = Ship("Destroyer", 2)
    board.place(ship, 4, 4, 0)
    assert board.attack(4, 4) is AttackResult.HIT
    assert board.cells[4][4] == "X"
    assert ship.hits == 1
    assert board.attack(0, 0) is AttackResult.MISS
    assert board.cells[0][0] == "O"
    assert board.attack(4, 4) is AttackResult.REPEAT
    assert board.attack(0, 0) is AttackResult.REPEAT
    assert board.attack(GRID_SIZE, 0) is AttackResult.OUT_OF_RANGE
    assert board.attack(0, -1) is AttackResult.OUT_OF_RANGE
    assert ship.hits == 1


def test_all_sunk():
    board = Board()
    ships = [Ship("Cruiser", 3), Ship("Destroyer", 2)]
    board.place(ships[0], 0, 0, 0)
    board.place(ships[1], 0, 5, 1)
    for ship in ships:
        for x, y in ship.cells:
            assert not board.all_sunk()
            board.attack(x, y)
    assert board.all_sunk()
    assert all(ship.sunk for ship in ships)


def test_render_hides_ships_unless_revealed():
    board = Board()
    board.place(Ship("Destroyer", 2), 0, 0, 0)
    hidden = board.render(False)
    shown = board.render(True)
    assert len(hidden) == GRID_SIZE * 2 + 2
    assert " S |" not in "".join(hidden)
    assert shown[2].count(" S |") == 2
    assert shown[2].startswith(" 1 |")
    assert hidden[2].count(" ~ |") == GRID_SIZE
    assert hidden[1] == hidden[3]


def test_render_shows_hits_and_misses():
    board = Board()
    board.place(Ship("Destroyer", 2), 0, 0, 0)
    board.attack(0, 0)
    board.attack(5, 5)
    lines = board.render(False)
    assert " X |" in lines[2]
    assert " O |" in lines[2 + 5 * 2]


def test_ai_place_fleet():
    board = Board()
    fleet = AiOpponent(1, random.Random(7)).place_fleet(board)
    assert _count(board, "S") == sum(ship.size for ship in fleet)
    cells = [cell for ship in fleet for cell in ship.cells]
    assert len(cells) == len(set(cells))
    assert all(board.cells[y][x] == "S" for x, y in cells)
    assert board.ships == fleet


def test_ai_attacks_every_cell_then_raises():
    board = Board()
    ai = AiOpponent(1, random.Random(3))
    ai.place_fleet(board)
    seen = set()
    for _ in range(GRID_SIZE * GRID_SIZE):
        x, y, result = ai.attack(board)
        assert result in (AttackResult.HIT, AttackResult.MISS)
        seen.add((x, y))
    assert len(seen) == GRID_SIZE * GRID_SIZE
    assert board.all_sunk()
    with pytest.raises(ValueError):
        ai.attack(board)


def test_ai_hunts_neighbours_after_hit():
    board = Board()
    ship = Ship("Destroyer", 2)
    board.place(ship, 0, 0, 0)
    for y in range(GRID_SIZE):
        for x in range(GRID_SIZE):
            if (x, y) not in ship.cells:
                board.attack(x, y)
    ai = AiOpponent(2, random.Random(11))
    first = ai.attack(board)
    assert first[2] is AttackResult.HIT
    second = ai.attack(board)
    assert second[2] is AttackResult.HIT
    assert {first[:2], second[:2]} == set(ship.cells)
    assert board.all_sunk()


def test_ai_rejects_bad_difficulty():
    with pytest.raises(ValueError):
        AiOpponent(0)
    with pytest.raises(ValueError):
        AiOpponent(4)