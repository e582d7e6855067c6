"""
Image and payload codec.

Wraps Pillow for container decoding/encoding and the standard library's
base64 for the data-URL payloads exchanged with the host. Failures are
translated into the package error taxonomy; a partially decoded image is
never returned.
"""

import base64
import binascii
import io
from typing import Union

import numpy as np
from PIL import Image

from ..utils.logging import get_logger
from .errors import PayloadDecodeError, ImageDecodeError, ImageEncodeError
from .grid import PixelGrid

logger = get_logger(__name__)

DEFAULT_OUTPUT_FORMAT = "PNG"
DEFAULT_OUTPUT_MIME = "image/png"


def strip_format_marker(payload: Union[str, bytes]) -> str:
    """
    Remove an optional ``data:<mime>;base64,`` marker.

    Everything up to and including the first comma is dropped; a payload
    without a comma is returned unchanged.
    """
    if isinstance(payload, bytes):
        payload = payload.decode('ascii', errors='replace')

    _, comma, body = payload.partition(',')
    return (body if comma else payload).strip()


def decode_payload(payload: Union[str, bytes], max_bytes: int = 0) -> bytes:
    """
    Decode a (possibly data-URL prefixed) base64 payload to raw bytes.

    Args:
        payload: Payload string from the host
        max_bytes: Maximum decoded size; 0 disables the check

    Returns:
        Decoded bytes

    Raises:
        PayloadDecodeError: If the payload is not valid base64 or is too large
    """
    body = strip_format_marker(payload)

    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadDecodeError(str(e)) from e

    if max_bytes and len(data) > max_bytes:
        raise PayloadDecodeError(f"payload is {len(data)} bytes, limit is {max_bytes}")

    return data


def encode_payload(data: bytes, mime: str = DEFAULT_OUTPUT_MIME) -> str:
    """Wrap raw bytes as a ``data:<mime>;base64,`` payload."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def load_image(data: bytes) -> Image.Image:
    """
    Decode raw bytes into a fully loaded Pillow image.

    Raises:
        ImageDecodeError: If Pillow cannot identify or read the data
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Exception as e:
        raise ImageDecodeError(str(e) or type(e).__name__) from e

    logger.debug(f"Decoded {img.format} image {img.width}x{img.height} mode={img.mode}")
    return img


def save_image(img: Image.Image, output_format: str = DEFAULT_OUTPUT_FORMAT) -> bytes:
    """
    Serialize a Pillow image.

    Raises:
        ImageEncodeError: If Pillow cannot write the image
    """
    buffer = io.BytesIO()
    try:
        img.save(buffer, format=output_format)
    except Exception as e:
        raise ImageEncodeError(str(e) or type(e).__name__) from e

    return buffer.getvalue()


def image_to_grid(img: Image.Image) -> PixelGrid:
    """Convert any Pillow image to an RGBA grid."""
    if img.mode in ('I', 'I;16', 'F'):
        img = img.convert('L')
    if img.mode != 'RGBA':
        img = img.convert('RGBA')
    return PixelGrid(np.array(img, dtype=np.uint8))


def grid_to_image(grid: PixelGrid) -> Image.Image:
    return Image.fromarray(grid.pixels)


def decode(data: bytes) -> PixelGrid:
    """
    Decode encoded image bytes into an RGBA grid.

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    return image_to_grid(load_image(data))


def encode(grid: PixelGrid, output_format: str = DEFAULT_OUTPUT_FORMAT) -> bytes:
    """
    Encode a grid losslessly (PNG by default).

    Raises:
        ImageEncodeError: If the grid cannot be serialized
    """
    return save_image(grid_to_image(grid), output_format)


def to_luma(grid: PixelGrid) -> PixelGrid:
    """
    Reduce a colour grid to single-channel luminance.

    Uses Pillow's ITU-R 601-2 luma transform (L = R*299/1000 + G*587/1000 +
    B*114/1000); alpha is ignored. Luminance grids are returned as a copy.
    """
    if grid.is_luminance:
        return PixelGrid(grid.to_array())

    img = Image.fromarray(grid.pixels).convert('L')
    return PixelGrid(np.array(img, dtype=np.uint8))
