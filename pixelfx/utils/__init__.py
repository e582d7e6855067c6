"""
Utility modules for PixelFX.

Contains payload-safe logging and configuration management.
"""

from .logging import get_logger, payload_fingerprint
from .config import Config, get_default_config

__all__ = ['get_logger', 'payload_fingerprint', 'Config', 'get_default_config']
