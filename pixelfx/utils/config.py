"""
Configuration management for the image operations.

Settings are plain dataclass fields so a configuration can be saved next to
processed output and loaded back to reproduce the exact same results.
"""

import json
import math
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict, Any, Union

from .logging import get_logger

logger = get_logger(__name__)

OVERFLOW_POLICIES = ("saturate", "wrap")
SUPPORTED_OUTPUT_FORMATS = {"PNG": "image/png"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """
    Configuration settings for PixelFX.

    All settings that influence the produced pixels or the output payload.
    """

    # Edge detection settings
    overflow_policy: str = "saturate"  # How magnitudes above 255 are narrowed

    # Blur settings
    default_blur_sigma: float = 1.0

    # Output settings
    output_format: str = "PNG"
    output_mime: str = "image/png"

    # Input limits (0 disables the check)
    max_payload_bytes: int = 0

    # Logging settings
    log_level: str = "INFO"
    log_timings: bool = True

    # Where the CLI writes results when no explicit path is given
    output_dir: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(
                f"overflow_policy must be one of {OVERFLOW_POLICIES}, got {self.overflow_policy!r}"
            )

        if not math.isfinite(self.default_blur_sigma) or self.default_blur_sigma <= 0:
            raise ValueError(f"default_blur_sigma must be > 0, got {self.default_blur_sigma}")

        self.output_format = self.output_format.upper()
        if self.output_format not in SUPPORTED_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {sorted(SUPPORTED_OUTPUT_FORMATS)}, got {self.output_format!r}"
            )

        if self.output_mime != SUPPORTED_OUTPUT_FORMATS[self.output_format]:
            raise ValueError(
                f"output_mime {self.output_mime!r} does not match output_format {self.output_format}"
            )

        if self.max_payload_bytes < 0:
            raise ValueError(f"max_payload_bytes must be >= 0, got {self.max_payload_bytes}")

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")

        if self.output_dir and not isinstance(self.output_dir, Path):
            self.output_dir = Path(self.output_dir)

        logger.debug(f"Configuration initialized with overflow_policy={self.overflow_policy}")

    def save(self, path: Union[str, Path]) -> None:
        """
        Save configuration to JSON file.

        Args:
            path: Path to save configuration

        Example:
            >>> config = Config(overflow_policy="wrap")
            >>> config.save("config.json")
        """
        path = Path(path)

        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Config':
        """
        Load configuration from JSON file.

        Args:
            path: Path to configuration file

        Returns:
            Config instance

        Example:
            >>> config = Config.load("config.json")
        """
        path = Path(path)

        with open(path, 'r') as f:
            config_dict = json.load(f)

        if config_dict.get('output_dir'):
            config_dict['output_dir'] = Path(config_dict['output_dir'])

        config = cls(**config_dict)
        logger.info(f"Configuration loaded from {path}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        config_dict = asdict(self)

        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = value.as_posix()  # Always use forward slashes

        return config_dict

    def update(self, **kwargs) -> None:
        """
        Update configuration parameters.

        Args:
            **kwargs: Parameters to update

        Example:
            >>> config = Config()
            >>> config.update(overflow_policy="wrap")
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
                logger.debug(f"Updated {key} = {value}")
            else:
                logger.warning(f"Unknown configuration parameter: {key}")

        # Re-validate
        self.__post_init__()


def get_default_config() -> Config:
    """
    Get the default configuration.

    Returns:
        Default Config instance

    Example:
        >>> get_default_config().overflow_policy
        'saturate'
    """
    return Config()
