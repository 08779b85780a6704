import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import numpy as np
import pytest

from gridpath.planning.node_grid import NodeGrid, build_grid, set_walkable


def positions(nodes):
    return [node.position for node in nodes]


class TestGridConstruction:

    def test_build_grid_dimensions(self):
        grid = build_grid(4, 2, 3)

        assert grid.dimensions == (4, 2, 3)
        assert grid.max_size == 24
        assert sum(1 for _ in grid) == 24
        assert all(node.walkable for node in grid)

    def test_default_dimensions(self):
        grid = NodeGrid()
        assert grid.dimensions == (3, 3, 3)

    def test_each_coordinate_has_one_node(self):
        grid = build_grid(3, 2, 2)
        seen = {node.position for node in grid}

        assert len(seen) == grid.max_size
        for node in grid:
            assert grid.get_node(*node.position) is node

    @pytest.mark.parametrize("dims", [(0, 1, 1), (3, -1, 3), (2, 2, 0)])
    def test_rejects_non_positive_dimensions(self, dims):
        with pytest.raises(ValueError):
            build_grid(*dims)

    def test_rejects_non_integer_dimensions(self):
        with pytest.raises(ValueError):
            NodeGrid({"max_x": 2.5, "max_y": 1, "max_z": 1})

    def test_vertical_search_flag(self):
        assert not build_grid(3, 1, 3).vertical_search
        assert build_grid(3, 2, 3).vertical_search

    def test_out_of_bounds_lookup_returns_none(self):
        grid = build_grid(3, 1, 3)

        assert grid.get_node(-1, 0, 0) is None
        assert grid.get_node(3, 0, 0) is None
        assert grid.get_node(0, 1, 0) is None
        assert grid.get_node(2, 0, 2) is not None

    def test_integral_float_coordinates(self):
        grid = build_grid(3, 1, 3)

        assert grid.get_node(1.0, 0, 2.0) is grid.get_node(1, 0, 2)
        assert grid.get_node(np.int64(2), 0, 0).position == (2, 0, 0)
        assert grid.get_node(3.0, 0, 0) is None

    def test_fractional_coordinates_rejected(self):
        grid = build_grid(3, 1, 3)

        with pytest.raises(ValueError):
            grid.get_node(1.5, 0, 0)

    def test_get_node_at_position_rounds(self):
        grid = build_grid(3, 3, 3)

        assert grid.get_node_at_position((0.4, 0.6, 1.5)).position == (0, 1, 2)
        assert grid.get_node_at_position((2.5, 0.0, -0.4)).position == (2, 0, 0)
        assert grid.get_node_at_position((3.2, 0.0, 0.0)) is None


class TestWalkability:

    def test_set_walkable(self):
        grid = build_grid(3, 1, 3)

        assert set_walkable(grid, 1, 0, 1, False)
        assert not grid.get_node(1, 0, 1).walkable
        assert not grid.is_walkable(1, 0, 1)

        assert grid.set_walkable(1, 0, 1, True)
        assert grid.is_walkable(1, 0, 1)

    def test_set_walkable_out_of_bounds(self):
        grid = build_grid(3, 1, 3)
        assert not grid.set_walkable(5, 0, 0, False)

    def test_walkable_mask(self):
        grid = build_grid(2, 1, 3)
        grid.set_walkable(1, 0, 2, False)

        mask = grid.walkable_mask()

        assert mask.shape == (2, 1, 3)
        assert mask.dtype == bool
        assert not mask[1, 0, 2]
        assert mask.sum() == 5

    def test_set_walkable_mask(self):
        grid = build_grid(2, 1, 2)
        mask = np.array([[[True, False]], [[False, True]]])

        assert grid.set_walkable_mask(mask)
        assert grid.is_walkable(0, 0, 0)
        assert not grid.is_walkable(0, 0, 1)
        assert not grid.is_walkable(1, 0, 0)
        np.testing.assert_array_equal(grid.walkable_mask(), mask)

    def test_set_walkable_mask_shape_mismatch(self):
        grid = build_grid(2, 1, 2)

        assert not grid.set_walkable_mask(np.zeros((3, 1, 2), dtype=bool))
        assert all(node.walkable for node in grid)

    def test_get_info(self):
        grid = build_grid(3, 1, 3)
        grid.set_walkable(0, 0, 0, False)
        grid.set_walkable(1, 0, 0, False)

        info = grid.get_info()

        assert info.dimensions == (3, 1, 3)
        assert info.total_cells == 9
        assert info.walkable_cells == 7
        assert info.blocked_cells == 2
        assert not info.vertical_search


class TestPlanarNeighbours:

    def test_centre_has_eight_neighbours(self):
        grid = build_grid(3, 1, 3)
        neighbours = grid.get_neighbours(grid.get_node(1, 0, 1))

        assert len(neighbours) == 8
        assert all(node.y == 0 for node in neighbours)
        assert (1, 0, 1) not in positions(neighbours)

    def test_corner_has_three_neighbours(self):
        grid = build_grid(3, 1, 3)
        neighbours = grid.get_neighbours(grid.get_node(0, 0, 0))

        assert set(positions(neighbours)) == {(0, 0, 1), (1, 0, 0), (1, 0, 1)}

    def test_neighbour_order_is_stable(self):
        grid = build_grid(3, 1, 3)
        neighbours = grid.get_neighbours(grid.get_node(1, 0, 1))

        assert positions(neighbours) == [
            (0, 0, 0), (0, 0, 1), (0, 0, 2),
            (1, 0, 0), (1, 0, 2),
            (2, 0, 0), (2, 0, 1), (2, 0, 2),
        ]

    def test_unwalkable_cells_excluded(self):
        grid = build_grid(3, 1, 3)
        grid.set_walkable(2, 0, 1, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(1, 0, 1)))

        assert (2, 0, 1) not in neighbours

    def test_diagonal_blocked_by_corner(self):
        grid = build_grid(3, 1, 3)
        grid.set_walkable(1, 0, 0, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 0, 0)))

        assert neighbours == [(0, 0, 1)]

    def test_diagonal_needs_both_orthogonal_cells(self):
        grid = build_grid(3, 1, 3)
        grid.set_walkable(0, 0, 1, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(1, 0, 1)))

        assert (0, 0, 0) not in neighbours
        assert (0, 0, 2) not in neighbours
        assert (2, 0, 0) in neighbours

    def test_diagonal_rejected_at_grid_edge(self):
        grid = build_grid(2, 1, 2)
        grid.set_walkable(0, 0, 1, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 0, 0)))

        assert neighbours == [(1, 0, 0)]


class TestVerticalNeighbours:

    def test_centre_has_twenty_six_neighbours(self):
        grid = build_grid(3, 3, 3)
        neighbours = grid.get_neighbours(grid.get_node(1, 1, 1))

        assert len(neighbours) == 26
        assert len(set(positions(neighbours))) == 26

    def test_corner_has_seven_neighbours(self):
        grid = build_grid(3, 3, 3)
        neighbours = grid.get_neighbours(grid.get_node(0, 0, 0))

        assert len(neighbours) == 7
        assert (0, 0, 0) not in positions(neighbours)

    def test_step_down_across_ledge(self):
        grid = build_grid(2, 3, 1)
        grid.set_walkable(1, 1, 0, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 2, 0)))

        assert neighbours == [(0, 1, 0), (1, 0, 0), (1, 2, 0)]

    def test_step_down_rejected_when_level_cell_blocked(self):
        grid = build_grid(2, 3, 1)
        grid.set_walkable(1, 1, 0, False)
        grid.set_walkable(1, 2, 0, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 2, 0)))

        assert neighbours == [(0, 1, 0)]

    def test_step_up_rejected_when_level_cell_blocked(self):
        grid = build_grid(2, 2, 1)
        grid.set_walkable(1, 0, 0, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 0, 0)))

        assert neighbours == [(0, 1, 0)]

    def test_diagonal_ascent_needs_cell_below_target(self):
        grid = build_grid(2, 2, 2)

        open_neighbours = positions(grid.get_neighbours(grid.get_node(0, 0, 0)))
        assert (1, 1, 1) in open_neighbours

        grid.set_walkable(1, 0, 1, False)
        neighbours = positions(grid.get_neighbours(grid.get_node(0, 0, 0)))

        assert set(neighbours) == {(0, 0, 1), (0, 1, 0), (0, 1, 1), (1, 0, 0), (1, 1, 0)}

    def test_pure_vertical_drop_through_blocked_cell(self):
        grid = build_grid(1, 3, 1)
        grid.set_walkable(0, 1, 0, False)

        neighbours = positions(grid.get_neighbours(grid.get_node(0, 2, 0)))

        assert neighbours == [(0, 0, 0)]

    def test_walkability_read_at_search_time(self):
        grid = build_grid(3, 1, 3)
        centre = grid.get_node(1, 0, 1)
        assert len(grid.get_neighbours(centre)) == 8

        grid.set_walkable(1, 0, 2, False)

        assert len(grid.get_neighbours(centre)) == 5
