from munch.utils.grid import block, column_cells, in_bounds, index, is_adjacent, neighbors, position_of, row_cells


def test_index_round_trips_row_major():
    assert index(0, 0) == 0
    assert index(1, 0) == 8
    assert index(7, 7) == 63
    assert position_of(index(3, 5)) == (3, 5)
    assert index(2, 1, size=4) == 9


def test_in_bounds_never_raises():
    assert in_bounds(0, 0)
    assert in_bounds(7, 7)
    assert not in_bounds(-1, 0)
    assert not in_bounds(0, 8)
    assert not in_bounds(100, -100)


def test_is_adjacent():
    assert is_adjacent((0, 0), (0, 1))
    assert is_adjacent((0, 0), (1, 0))
    assert not is_adjacent((0, 0), (1, 1))
    assert not is_adjacent((0, 0), (2, 0))
    assert not is_adjacent((3, 3), (3, 3))


def test_neighbors_clip_to_board():
    assert sorted(neighbors((0, 0))) == [(0, 1), (1, 0)]
    assert len(neighbors((4, 4))) == 4


def test_block_and_lines_clip_to_board():
    assert len(list(block((0, 0), 1))) == 4
    assert len(list(block((0, 0), 2))) == 9
    assert len(list(block((4, 4), 2))) == 25
    assert row_cells(-1) == []
    assert column_cells(8) == []
    assert len(row_cells(3)) == 8
