"""Tests for geoschem/generator/voxelizer.py: palette and volume compilation."""

from __future__ import annotations

import numpy as np
import pytest

from geoschem.errors import VolumeTooLargeError
from geoschem.generator.voxelizer import Voxelizer, build_palette, compile_block_volume
from geoschem.models import Grid, GridBounds


def bounds(length, width, height, min_y=0):
    return GridBounds(min_x=0, min_y=min_y, min_z=0, length=length, width=width, height=height)


class TestPalette:
    def test_contour_only(self):
        assert build_palette("minecraft:stone") == {"minecraft:air": 0, "minecraft:stone": 1}

    def test_with_fill(self):
        palette = build_palette("minecraft:stone", "minecraft:dirt")
        assert palette == {"minecraft:air": 0, "minecraft:stone": 1, "minecraft:dirt": 2}

    def test_duplicate_fill_rejected(self):
        with pytest.raises(ValueError):
            build_palette("minecraft:stone", "minecraft:stone")


class TestCompile:
    def test_single_contour_index(self):
        grid = Grid(width=5, length=5)
        grid.mark_contour(2, 2, 3)
        volume = compile_block_volume(grid, bounds(5, 5, 4))
        assert volume.shape == (100,)
        assert volume[87] == 1
        assert np.count_nonzero(volume) == 1

    def test_layout_is_y_z_x(self):
        grid = Grid(width=2, length=3)
        grid.mark_contour(1, 2, 11)
        volume = compile_block_volume(grid, bounds(3, 2, 2, min_y=10))
        cube = volume.reshape(2, 2, 3)
        assert cube[1, 1, 2] == 1
        assert np.count_nonzero(cube) == 1

    def test_fill_and_contour_layers(self):
        grid = Grid(width=1, length=1)
        cell = grid.cell(0, 0)
        cell.add_contour(2)
        cell.propose_fill(0)
        volume = compile_block_volume(grid, bounds(1, 1, 3))
        assert volume.tolist() == [2, 0, 1]

    def test_elevation_outside_height_skipped(self):
        grid = Grid(width=1, length=1)
        grid.mark_contour(0, 0, 10)
        volume = compile_block_volume(grid, bounds(1, 1, 2))
        assert volume.tolist() == [0, 0]

    def test_oversized_rejected_before_allocation(self):
        with pytest.raises(VolumeTooLargeError):
            Voxelizer().compile(Grid(40000, 40000), bounds(40000, 40000, 1))
