"""
Host-facing entry points.

Each function takes a base64 image payload (a ``data:<mime>;base64,`` marker
is optional) and returns a ``data:image/png;base64,`` payload. Failures raise
an ImageProcessingError whose message is suitable for showing to the caller.
"""

import sys
import threading
from typing import Optional

from .core.pipeline import ImagePipeline
from .utils.config import Config
from .utils.logging import get_logger, set_package_level

logger = get_logger(__name__)

_initialized = False
_init_lock = threading.Lock()


def initialize(log_level: Optional[str] = None) -> None:
    """
    One-time process-wide set-up.

    Installs an exception hook that logs uncaught exceptions through the
    package logger before delegating to the previous hook. Safe to call any
    number of times; only the first call has an effect.

    Args:
        log_level: Optional level applied to all pixelfx loggers
    """
    global _initialized

    with _init_lock:
        if _initialized:
            return

        if log_level:
            set_package_level(log_level.upper())

        previous_hook = sys.excepthook

        def _log_uncaught(exc_type, exc_value, exc_tb):
            if not issubclass(exc_type, KeyboardInterrupt):
                logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))
            previous_hook(exc_type, exc_value, exc_tb)

        sys.excepthook = _log_uncaught
        _initialized = True
        logger.debug("pixelfx initialized")


def apply_grayscale(payload: str, config: Optional[Config] = None) -> str:
    """Convert the payload image to grayscale."""
    return ImagePipeline(config).process_payload(payload, 'grayscale')


def apply_blur(payload: str, sigma: float, config: Optional[Config] = None) -> str:
    """Gaussian-blur the payload image with standard deviation ``sigma``."""
    return ImagePipeline(config).process_payload(payload, 'blur', sigma=sigma)


def apply_edge_detection(payload: str, config: Optional[Config] = None) -> str:
    """Replace the payload image with its gradient-magnitude edge map."""
    return ImagePipeline(config).process_payload(payload, 'edges')
