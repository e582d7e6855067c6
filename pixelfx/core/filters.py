"""Grayscale and blur filters, delegated to Pillow."""

import math

from PIL import Image, ImageFilter

from ..utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_SIGMA = 1.0


def _has_alpha(img: Image.Image) -> bool:
    return 'A' in img.getbands() or 'transparency' in img.info


def _filterable(img: Image.Image) -> Image.Image:
    """Convert palette, bilevel and wide-integer modes to a mode filters accept."""
    if img.mode in ('L', 'LA', 'RGB', 'RGBA'):
        return img
    if img.mode in ('1', 'I', 'I;16', 'F'):
        return img.convert('L')
    return img.convert('RGBA' if _has_alpha(img) else 'RGB')


def grayscale(img: Image.Image) -> Image.Image:
    """
    Convert to grayscale, keeping an alpha channel when the source has one.

    Args:
        img: Source image in any mode

    Returns:
        Image in mode 'L' or 'LA'
    """
    img = _filterable(img)
    target = 'LA' if _has_alpha(img) else 'L'
    if img.mode == target:
        return img.copy()
    return img.convert(target)


def blur(img: Image.Image, sigma: float) -> Image.Image:
    """
    Gaussian blur with standard deviation ``sigma``.

    A non-positive or non-finite sigma falls back to 1.0.

    Args:
        img: Source image in any mode
        sigma: Standard deviation of the Gaussian kernel, in pixels

    Returns:
        Blurred image
    """
    sigma = float(sigma)
    if not math.isfinite(sigma) or sigma <= 0:
        logger.warning(f"Invalid blur sigma {sigma}, using {FALLBACK_SIGMA}")
        sigma = FALLBACK_SIGMA

    return _filterable(img).filter(ImageFilter.GaussianBlur(radius=sigma))
