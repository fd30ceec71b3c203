"""Tests for the Board cell model and its place/explode primitives."""

import pytest

from chainreaction.game.board import CAPTURE, EXPLOSION, Board
from chainreaction.game.errors import (
    CellAtCapacity,
    CellOwnershipConflict,
    NotExplodable,
    OutOfBounds,
)


@pytest.mark.parametrize('rows,cols', [(6, 10), (2, 2), (3, 3), (1, 4), (5, 1)])
def test_capacity_follows_edge_adjacency(rows, cols):
    board = Board(rows, cols)
    for row in range(rows):
        for col in range(cols):
            extremes = int(row in (0, rows - 1)) + int(col in (0, cols - 1))
            expected = {2: 2, 1: 3, 0: 4}[extremes]
            assert board.capacity_for(row, col) == expected
            assert board.cells[row][col].capacity == expected


def test_default_board_is_six_by_ten_and_empty():
    board = Board()
    assert (board.rows, board.cols) == (6, 10)
    assert all(cell.token_count == 0 and cell.owner is None for line in board.cells for cell in line)
    assert board.is_settled()


def test_scenario_a_two_by_two_capacity():
    board = Board(2, 2)
    assert all(cell.capacity == 2 for line in board.cells for cell in line)

    cell = board.place_token(0, 0, 'P')
    assert (cell.token_count, cell.owner) == (1, 'P')
    cell = board.place_token(0, 0, 'P')
    assert (cell.token_count, cell.owner) == (2, 'P')
    assert board.settled_candidates() == [(0, 0)]


@pytest.mark.parametrize('row,col', [(-1, 0), (0, -1), (6, 0), (0, 10), (99, 99)])
def test_place_out_of_bounds(row, col):
    board = Board()
    with pytest.raises(OutOfBounds):
        board.place_token(row, col, 'P')


def test_place_on_foreign_cell_conflicts_regardless_of_count():
    board = Board(2, 2)
    board.place_token(0, 0, 'Q')
    with pytest.raises(CellOwnershipConflict):
        board.place_token(0, 0, 'P')

    board.place_token(0, 0, 'Q')  # now at capacity
    with pytest.raises(CellOwnershipConflict) as excinfo:
        board.place_token(0, 0, 'P')
    assert excinfo.value.kind == 'CellOwnershipConflict'
    assert board.cells[0][0].token_count == 2


def test_place_on_full_own_cell_is_rejected():
    board = Board(2, 2)
    board.place_token(1, 1, 'P')
    board.place_token(1, 1, 'P')
    with pytest.raises(CellAtCapacity):
        board.place_token(1, 1, 'P')
    assert board.cells[1][1].token_count == 2


def test_neighbors_are_orthogonal_and_in_bounds():
    board = Board(3, 3)
    assert board.neighbors_of(1, 1) == [(0, 1), (2, 1), (1, 0), (1, 2)]
    assert sorted(board.neighbors_of(0, 0)) == [(0, 1), (1, 0)]
    assert sorted(board.neighbors_of(2, 1)) == [(1, 1), (2, 0), (2, 2)]
    assert Board(1, 1).neighbors_of(0, 0) == []


def test_scenario_b_explosion_captures_neighbors():
    board = Board(2, 2)
    board.place_token(0, 0, 'P')
    board.place_token(0, 0, 'P')
    board.place_token(1, 0, 'Q')

    events = board.explode(0, 0, 'P')

    source = board.cells[0][0]
    assert (source.token_count, source.owner) == (0, None)
    assert (board.cells[1][0].token_count, board.cells[1][0].owner) == (2, 'P')
    assert (board.cells[0][1].token_count, board.cells[0][1].owner) == (1, 'P')

    assert events[0].kind == EXPLOSION
    assert (events[0].row, events[0].col, events[0].owner, events[0].token_count) == (0, 0, None, 0)
    captures = {(e.row, e.col): e for e in events[1:]}
    assert all(e.kind == CAPTURE and e.owner == 'P' for e in captures.values())
    assert captures[(1, 0)].token_count == 2
    assert captures[(0, 1)].token_count == 1


def test_explode_requires_capacity_and_matching_owner():
    board = Board(2, 2)
    board.place_token(0, 0, 'P')
    with pytest.raises(NotExplodable):
        board.explode(0, 0, 'P')
    board.place_token(0, 0, 'P')
    with pytest.raises(NotExplodable):
        board.explode(0, 0, 'Q')
    assert board.cells[0][0].token_count == 2


def test_cells_owned_by_and_reset():
    board = Board(3, 3)
    board.place_token(0, 0, 'P')
    board.place_token(2, 2, 'P')
    board.place_token(1, 1, 'Q')
    assert board.cells_owned_by('P') == [(0, 0), (2, 2)]
    assert board.cells_owned_by('Q') == [(1, 1)]
    assert board.cells_owned_by('R') == []

    board.reset()
    assert board.cells_owned_by('P') == []
    assert board.cells[1][1].capacity == 4


def test_to_dict_shape():
    board = Board(2, 3)
    board.place_token(0, 1, 'P')
    data = board.to_dict()
    assert data['rows'] == 2 and data['cols'] == 3
    assert data['cells'][0][1] == {'token_count': 1, 'owner': 'P', 'capacity': 3}
