"""
Unit tests for the gradient-magnitude edge detection engine.

Tests ensure that:
1. Output size and alpha are always preserved
2. Border pixels are never computed
3. Known patterns produce the expected magnitudes
4. Degenerate sizes and overflow are handled deterministically
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pixelfx.core.grid import PixelGrid
from pixelfx.core.gradient import (
    edge_detect,
    gradient_components,
    narrow_magnitude,
    OverflowPolicy,
    HORIZONTAL_KERNEL,
    VERTICAL_KERNEL,
)


def magnitudes(grid: PixelGrid) -> np.ndarray:
    """Red channel of an edge-detection result."""
    return grid.pixels[:, :, 0].astype(np.int32)


class TestKernels:
    """Test the fixed directional kernels."""

    def test_kernel_weights(self):
        """Kernels hold the standard directional weights."""
        assert HORIZONTAL_KERNEL.tolist() == [[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]]
        assert VERTICAL_KERNEL.tolist() == [[-1, -2, -1], [0, 0, 0], [1, 2, 1]]

    def test_kernels_are_read_only(self):
        """Kernels cannot be mutated at runtime."""
        with pytest.raises(ValueError):
            HORIZONTAL_KERNEL[0, 0] = 5
        with pytest.raises(ValueError):
            VERTICAL_KERNEL[1, 1] = 5


class TestEdgeDetect:
    """Test the edge_detect operation."""

    @pytest.fixture
    def random_grid(self):
        rng = np.random.default_rng(42)
        return PixelGrid(rng.integers(0, 256, size=(9, 13), dtype=np.uint8))

    def test_output_shape_and_alpha(self, random_grid):
        """Output has the input size, four channels and opaque alpha."""
        result = edge_detect(random_grid)

        assert result.width == random_grid.width
        assert result.height == random_grid.height
        assert result.channels == 4
        assert np.all(result.pixels[:, :, 3] == 255)

    def test_colour_channels_match(self, random_grid):
        """Magnitude is written to R, G and B alike."""
        result = edge_detect(random_grid)

        assert np.array_equal(result.pixels[:, :, 0], result.pixels[:, :, 1])
        assert np.array_equal(result.pixels[:, :, 0], result.pixels[:, :, 2])

    def test_border_pixels_keep_default(self, random_grid):
        """First/last row and column are opaque black."""
        pixels = edge_detect(random_grid).pixels

        for border in (pixels[0], pixels[-1], pixels[:, 0], pixels[:, -1]):
            assert np.all(border[:, :3] == 0)
            assert np.all(border[:, 3] == 255)

    def test_uniform_image_has_no_edges(self):
        """Constant intensity gives zero magnitude everywhere."""
        grid = PixelGrid(np.full((6, 7), 77, dtype=np.uint8))

        assert np.all(magnitudes(edge_detect(grid)) == 0)

    def test_vertical_step_edge(self, step_array):
        """Pixels along a step edge are stronger than the flat regions."""
        result = magnitudes(edge_detect(PixelGrid(step_array)))

        interior = result[1:-1]
        # Columns 3 and 4 straddle the step; 1 and 6 sit in flat regions
        assert np.all(interior[:, 3] > interior[:, 1])
        assert np.all(interior[:, 4] > interior[:, 6])
        assert np.all(interior[:, 1] == 0)
        assert np.all(interior[:, 6] == 0)

    def test_small_step_exact_magnitude(self):
        """A step of 20 gives gx = 80 at the boundary."""
        array = np.full((5, 6), 100, dtype=np.uint8)
        array[:, 3:] = 120

        result = magnitudes(edge_detect(PixelGrid(array)))

        assert np.all(result[1:-1, 2] == 80)
        assert np.all(result[1:-1, 3] == 80)
        assert np.all(result[1:-1, 1] == 0)

    def test_horizontal_step_uses_vertical_kernel(self):
        """A horizontal step is picked up through gy."""
        array = np.zeros((3, 3), dtype=np.uint8)
        array[2, :] = 10

        gx, gy = gradient_components(PixelGrid(array))

        assert gx[0, 0] == 0
        assert gy[0, 0] == 40
        assert magnitudes(edge_detect(PixelGrid(array)))[1, 1] == 40

    def test_magnitude_is_rounded(self):
        """sqrt(gx^2 + gy^2) is rounded to the nearest integer."""
        array = np.zeros((3, 3), dtype=np.uint8)
        array[1, 2] = 10
        array[2, 2] = 10

        gx, gy = gradient_components(PixelGrid(array))
        assert (gx[0, 0], gy[0, 0]) == (30, 10)

        # sqrt(1000) = 31.62...
        assert magnitudes(edge_detect(PixelGrid(array)))[1, 1] == 32

    def test_boundary_scenario_5x5(self, boundary_5x5):
        """Columns next to the boundary saturate near 255."""
        result = magnitudes(edge_detect(PixelGrid(boundary_5x5)))

        assert np.all(result[1:4, 1] >= 250)
        assert np.all(result[1:4, 3] >= 250)

    def test_flat_regions_beside_boundary(self):
        """Pure 0 and pure 255 regions away from the boundary stay at 0."""
        array = np.zeros((5, 9), dtype=np.uint8)
        array[:, 4] = 128
        array[:, 5:] = 255

        result = magnitudes(edge_detect(PixelGrid(array)))

        assert np.all(result[1:4, 1:3] == 0)
        assert np.all(result[1:4, 6:8] == 0)
        assert np.all(result[1:4, 3:6] >= 250)

    def test_mirror_symmetry(self, random_grid):
        """Mirroring the input mirrors the magnitude grid."""
        direct = edge_detect(random_grid)
        mirrored = edge_detect(random_grid.mirrored())

        assert mirrored == direct.mirrored()

    def test_input_not_modified(self, random_grid):
        """edge_detect is pure."""
        before = random_grid.to_array()
        edge_detect(random_grid)

        assert np.array_equal(random_grid.pixels, before)

    def test_deterministic(self, random_grid):
        """Repeated calls give identical output."""
        assert edge_detect(random_grid) == edge_detect(random_grid)

    @pytest.mark.parametrize("height,width", [(1, 1), (2, 5), (5, 2), (2, 2), (1, 10)])
    def test_degenerate_sizes(self, height, width):
        """Grids without interior pixels are all default."""
        grid = PixelGrid(np.full((height, width), 200, dtype=np.uint8))

        result = edge_detect(grid)

        assert (result.height, result.width) == (height, width)
        assert np.all(result.pixels[:, :, :3] == 0)
        assert np.all(result.pixels[:, :, 3] == 255)

    def test_rejects_rgba_input(self, rgba_image):
        """Only luminance grids are accepted."""
        with pytest.raises(ValueError, match="single-channel"):
            edge_detect(PixelGrid(rgba_image))


class TestOverflow:
    """Test narrowing of magnitudes above 255."""

    def test_saturate_by_default(self, overflow_3x3):
        """A magnitude of 360 saturates to 255."""
        result = magnitudes(edge_detect(PixelGrid(overflow_3x3)))

        assert result[1, 1] == 255

    def test_wrap(self, overflow_3x3):
        """A magnitude of 360 wraps to 104."""
        result = magnitudes(edge_detect(PixelGrid(overflow_3x3), OverflowPolicy.WRAP))

        assert result[1, 1] == 104

    def test_policy_from_string(self, overflow_3x3):
        """Policies may be given by value."""
        result = magnitudes(edge_detect(PixelGrid(overflow_3x3), "wrap"))

        assert result[1, 1] == 104

    def test_unknown_policy(self, overflow_3x3):
        """Unknown policy names are rejected."""
        with pytest.raises(ValueError):
            edge_detect(PixelGrid(overflow_3x3), "clip")

    def test_narrow_magnitude(self):
        """Values in range are unchanged by either policy."""
        values = np.array([0, 17, 255, 256, 1442])

        assert narrow_magnitude(values).tolist() == [0, 17, 255, 255, 255]
        assert narrow_magnitude(values, OverflowPolicy.WRAP).tolist() == [0, 17, 255, 0, 162]


class TestGradientComponents:
    """Test the raw gradient planes."""

    def test_shapes(self):
        """Planes cover only the interior."""
        grid = PixelGrid(np.zeros((6, 9), dtype=np.uint8))

        gx, gy = gradient_components(grid)

        assert gx.shape == (4, 7)
        assert gy.shape == (4, 7)
        assert gx.dtype == np.int32

    def test_signed_values(self):
        """Falling intensity gives a negative gx."""
        array = np.zeros((3, 3), dtype=np.uint8)
        array[:, 0] = 90

        gx, _ = gradient_components(PixelGrid(array))

        assert gx[0, 0] == -360

    def test_empty_for_degenerate(self):
        """No interior means empty planes."""
        gx, gy = gradient_components(PixelGrid(np.zeros((2, 8), dtype=np.uint8)))

        assert gx.size == 0
        assert gy.size == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
