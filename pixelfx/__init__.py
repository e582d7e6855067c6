"""
PixelFX - Image Transformation Operations
=========================================

Grayscale conversion, Gaussian blur and gradient-magnitude edge detection
over base64 image payloads, with a pure NumPy edge-detection core.
"""

from .api import initialize, apply_grayscale, apply_blur, apply_edge_detection
from .core.errors import (
    ErrorKind,
    ImageProcessingError,
    PayloadDecodeError,
    ImageDecodeError,
    ImageEncodeError,
)

__version__ = "0.1.0"

__all__ = [
    'initialize',
    'apply_grayscale',
    'apply_blur',
    'apply_edge_detection',
    'ErrorKind',
    'ImageProcessingError',
    'PayloadDecodeError',
    'ImageDecodeError',
    'ImageEncodeError',
]
