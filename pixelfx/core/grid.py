"""Dense 8-bit pixel grids shared by the codec and the gradient engine."""

from dataclasses import dataclass

import numpy as np

LUMINANCE_CHANNELS = 1
RGBA_CHANNELS = 4


@dataclass
class PixelGrid:
    """
    A rectangular grid of 8-bit samples.

    ``pixels`` has shape (height, width) for single-channel luminance or
    (height, width, 4) for RGBA.
    """

    pixels: np.ndarray

    def __post_init__(self):
        """Validate the grid invariants."""
        if not isinstance(self.pixels, np.ndarray):
            raise TypeError(f"pixels must be a numpy array, got {type(self.pixels).__name__}")

        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")

        if self.pixels.ndim == 3 and self.pixels.shape[2] == LUMINANCE_CHANNELS:
            self.pixels = self.pixels[:, :, 0]

        if self.pixels.ndim == 3:
            if self.pixels.shape[2] != RGBA_CHANNELS:
                raise ValueError(
                    f"pixels must have 1 or 4 channels, got {self.pixels.shape[2]}"
                )
        elif self.pixels.ndim != 2:
            raise ValueError(f"pixels must be 2-D or 3-D, got {self.pixels.ndim} dimensions")

        if self.pixels.shape[0] < 1 or self.pixels.shape[1] < 1:
            raise ValueError(
                f"grid must be at least 1x1, got {self.pixels.shape[1]}x{self.pixels.shape[0]}"
            )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return LUMINANCE_CHANNELS if self.pixels.ndim == 2 else RGBA_CHANNELS

    @property
    def is_luminance(self) -> bool:
        return self.channels == LUMINANCE_CHANNELS

    @classmethod
    def from_array(cls, array) -> 'PixelGrid':
        """Build a grid from any array-like of values in [0, 255]."""
        return cls(np.ascontiguousarray(np.asarray(array, dtype=np.uint8)))

    @classmethod
    def blank_rgba(cls, width: int, height: int) -> 'PixelGrid':
        """Opaque black RGBA grid of the given size."""
        pixels = np.zeros((height, width, RGBA_CHANNELS), dtype=np.uint8)
        pixels[:, :, 3] = 255
        return cls(pixels)

    def to_array(self) -> np.ndarray:
        """Return a copy of the underlying samples."""
        return self.pixels.copy()

    def mirrored(self) -> 'PixelGrid':
        """Horizontally mirrored copy."""
        return PixelGrid(np.ascontiguousarray(self.pixels[:, ::-1]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))
