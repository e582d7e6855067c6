"""
Core processing modules for PixelFX.

Contains the pixel grid model, the gradient edge-detection engine, the
Pillow-backed codec and filters, and the pipeline that sequences them.
"""

from .grid import PixelGrid
from .gradient import edge_detect, gradient_components, OverflowPolicy, HORIZONTAL_KERNEL, VERTICAL_KERNEL
from .pipeline import ImagePipeline, OPERATIONS

__all__ = [
    'PixelGrid',
    'edge_detect',
    'gradient_components',
    'OverflowPolicy',
    'HORIZONTAL_KERNEL',
    'VERTICAL_KERNEL',
    'ImagePipeline',
    'OPERATIONS',
]
