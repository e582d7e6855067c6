"""
Gradient-magnitude edge detection.

Two fixed 3x3 directional kernels are run over a luminance grid and combined
into a per-pixel gradient magnitude. Border pixels have no full neighbourhood
and are left at opaque black.
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np

from .grid import PixelGrid


def _kernel(rows) -> np.ndarray:
    kernel = np.array(rows, dtype=np.int32)
    kernel.flags.writeable = False
    return kernel


HORIZONTAL_KERNEL = _kernel([[-1, 0, 1],
                             [-2, 0, 2],
                             [-1, 0, 1]])

VERTICAL_KERNEL = _kernel([[-1, -2, -1],
                           [0, 0, 0],
                           [1, 2, 1]])


class OverflowPolicy(Enum):
    """How magnitudes above 255 are narrowed to 8 bits."""

    SATURATE = "saturate"
    WRAP = "wrap"


def _weighted_sum(luma: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Kernel-weighted 3x3 neighbourhood sum for every interior pixel."""
    height, width = luma.shape
    total = np.zeros((height - 2, width - 2), dtype=np.int32)
    for dy in range(3):
        for dx in range(3):
            weight = int(kernel[dy, dx])
            if weight:
                total += weight * luma[dy:dy + height - 2, dx:dx + width - 2]
    return total


def gradient_components(luminance_grid: PixelGrid) -> Tuple[np.ndarray, np.ndarray]:
    """
    Raw horizontal and vertical gradients of the interior region.

    Args:
        luminance_grid: Single-channel grid

    Returns:
        Tuple of (gx, gy) int32 arrays of shape (height - 2, width - 2);
        both are empty when the grid has no interior pixels
    """
    if not luminance_grid.is_luminance:
        raise ValueError(
            f"edge detection expects a single-channel grid, got {luminance_grid.channels} channels"
        )

    if luminance_grid.width < 3 or luminance_grid.height < 3:
        empty = np.zeros((0, 0), dtype=np.int32)
        return empty, empty.copy()

    luma = luminance_grid.pixels.astype(np.int32)
    return _weighted_sum(luma, HORIZONTAL_KERNEL), _weighted_sum(luma, VERTICAL_KERNEL)


def narrow_magnitude(magnitude: np.ndarray,
                     overflow: OverflowPolicy = OverflowPolicy.SATURATE) -> np.ndarray:
    """Narrow non-negative integer magnitudes to uint8."""
    if overflow is OverflowPolicy.WRAP:
        return (magnitude % 256).astype(np.uint8)
    return np.clip(magnitude, 0, 255).astype(np.uint8)


def edge_detect(luminance_grid: PixelGrid,
                overflow: Union[OverflowPolicy, str] = OverflowPolicy.SATURATE) -> PixelGrid:
    """
    Compute the gradient-magnitude image of a luminance grid.

    Args:
        luminance_grid: Single-channel 8-bit grid of any size >= 1x1
        overflow: Narrowing policy for magnitudes above 255

    Returns:
        RGBA grid of the same size; interior pixels carry the magnitude in
        R, G and B, every pixel has alpha 255
    """
    overflow = OverflowPolicy(overflow)
    output = PixelGrid.blank_rgba(luminance_grid.width, luminance_grid.height)

    gx, gy = gradient_components(luminance_grid)
    if gx.size == 0:
        return output

    gx = gx.astype(np.float64)
    gy = gy.astype(np.float64)
    magnitude = np.rint(np.sqrt(gx * gx + gy * gy)).astype(np.int64)

    output.pixels[1:-1, 1:-1, :3] = narrow_magnitude(magnitude, overflow)[:, :, np.newaxis]
    return output
