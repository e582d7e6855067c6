"""
Decode -> transform -> encode orchestration.

Sequences the codec, the Pillow filters and the gradient engine for one
image at a time and turns collaborator failures into the package error
taxonomy. Nothing is cached between runs.
"""

import time
from typing import Optional, Callable, Dict, Union

from ..utils.config import Config
from ..utils.logging import get_logger, payload_fingerprint, MetricsLogger, log_image_operation
from . import codec, filters
from .errors import ImageProcessingError
from .gradient import edge_detect

logger = get_logger(__name__)

OPERATIONS = ('grayscale', 'blur', 'edges')


class ImagePipeline:
    """
    Runs a single image operation end to end.

    Every public method is self-contained: the input is decoded, transformed
    and re-encoded within the call, and any failure aborts the whole call.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            config: Configuration object. If None, uses defaults.
        """
        self.config = config or Config()
        self.metrics_logger = MetricsLogger(logger)

        self._handlers: Dict[str, Callable[..., bytes]] = {
            'grayscale': self._grayscale,
            'blur': self._blur,
            'edges': self._edges,
        }

        logger.debug(f"ImagePipeline initialized with overflow_policy={self.config.overflow_policy}")

    def grayscale_bytes(self, data: bytes) -> bytes:
        """Grayscale-convert encoded image bytes; returns encoded bytes."""
        return self.run_bytes('grayscale', data)

    def blur_bytes(self, data: bytes, sigma: Optional[float] = None) -> bytes:
        """Gaussian-blur encoded image bytes; sigma defaults to the config value."""
        return self.run_bytes('blur', data, sigma=sigma)

    def edge_detect_bytes(self, data: bytes) -> bytes:
        """Run gradient edge detection on encoded image bytes."""
        return self.run_bytes('edges', data)

    def run_bytes(self, operation: str, data: bytes, **params) -> bytes:
        """
        Run a named operation on encoded image bytes.

        Args:
            operation: One of OPERATIONS
            data: Encoded input image
            **params: Operation parameters (``sigma`` for blur)

        Returns:
            Encoded output image

        Raises:
            ValueError: For an unknown operation name
            ImageProcessingError: If decoding or encoding fails
        """
        handler = self._handlers.get(operation)
        if handler is None:
            raise ValueError(f"Unknown operation {operation!r}, expected one of {OPERATIONS}")

        fingerprint = payload_fingerprint(data)
        start_time = time.time()

        try:
            result = handler(data, **params)
        except ImageProcessingError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(f"{operation} failed for image_{fingerprint}: {e}")
            self._record(operation, duration_ms, False, {'error_kind': e.kind.value})
            raise

        duration_ms = (time.time() - start_time) * 1000
        self._record(operation, duration_ms, True, {'input_bytes': len(data), 'output_bytes': len(result)})
        log_image_operation(logger, fingerprint, operation, {**params, 'size_kb': round(len(data) / 1024, 2)})

        return result

    def process_payload(self, payload: Union[str, bytes], operation: str, **params) -> str:
        """
        Run an operation on a host payload.

        Args:
            payload: Base64 image, optionally prefixed with a data-URL marker
            operation: One of OPERATIONS
            **params: Operation parameters

        Returns:
            ``data:<mime>;base64,`` payload of the result

        Raises:
            ImageProcessingError: On any payload, decode or encode failure
        """
        data = codec.decode_payload(payload, self.config.max_payload_bytes)
        result = self.run_bytes(operation, data, **params)
        return codec.encode_payload(result, self.config.output_mime)

    def _grayscale(self, data: bytes) -> bytes:
        img = codec.load_image(data)
        return codec.save_image(filters.grayscale(img), self.config.output_format)

    def _blur(self, data: bytes, sigma: Optional[float] = None) -> bytes:
        if sigma is None:
            sigma = self.config.default_blur_sigma
        img = codec.load_image(data)
        return codec.save_image(filters.blur(img, sigma), self.config.output_format)

    def _edges(self, data: bytes) -> bytes:
        luma = codec.to_luma(codec.decode(data))
        edges = edge_detect(luma, self.config.overflow_policy)
        return codec.encode(edges, self.config.output_format)

    def _record(self, operation, duration_ms, success, details):
        if self.config.log_timings:
            self.metrics_logger.log_operation(operation, duration_ms, success=success, details=details)
