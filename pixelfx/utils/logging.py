"""
Payload-safe logging utilities for the image operations.

This module provides logging functionality that keeps encoded image
payloads out of log output, using hash-based fingerprints and
sanitized message formats.
"""

import logging
import hashlib
import re
import sys
from pathlib import Path
from typing import Optional, Union, Dict, Any
from datetime import datetime
import json


# data:image/png;base64,AAAA... or a bare base64 run long enough to be a payload
DATA_URL_PATTERN = re.compile(r'data:[\w/+.-]+;base64,[A-Za-z0-9+/=]*')
BASE64_RUN_PATTERN = re.compile(r'[A-Za-z0-9+/]{64,}={0,2}')


class PayloadSafeFormatter(logging.Formatter):
    """Formatter that redacts inline image payloads."""

    def __init__(self, include_timestamp: bool = True):
        """
        Initialize the payload-safe formatter.

        Args:
            include_timestamp: Whether to include timestamps in log messages
        """
        if include_timestamp:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            date_fmt = "%Y-%m-%d %H:%M:%S"
        else:
            format_str = "%(name)s - %(levelname)s - %(message)s"
            date_fmt = None

        super().__init__(format_str, datefmt=date_fmt)

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with payload redaction.

        Args:
            record: The log record to format

        Returns:
            Formatted log message
        """
        if hasattr(record, 'msg'):
            record.msg = self._sanitize_message(str(record.msg))

        return super().format(record)

    def _sanitize_message(self, message: str) -> str:
        """
        Replace embedded payloads with their fingerprints.

        Args:
            message: Original message

        Returns:
            Sanitized message
        """
        def replace_data_url(match):
            return f"[payload {payload_fingerprint(match.group(0))}]"

        message = DATA_URL_PATTERN.sub(replace_data_url, message)
        message = BASE64_RUN_PATTERN.sub(replace_data_url, message)

        return message


def payload_fingerprint(data: Union[str, bytes, Path]) -> str:
    """
    Generate a short, stable identifier for a payload.

    Args:
        data: Payload string, raw bytes or a path

    Returns:
        Hexadecimal hash string (first 16 characters for brevity)

    Example:
        >>> len(payload_fingerprint(b"\\x89PNG"))
        16
    """
    if isinstance(data, Path):
        data = str(data)
    if isinstance(data, str):
        data = data.encode('utf-8')

    return hashlib.sha256(data).hexdigest()[:16]


class MetricsLogger:
    """Logger for operation timings."""

    def __init__(self, logger: logging.Logger):
        """
        Initialize metrics logger.

        Args:
            logger: Base logger instance
        """
        self.logger = logger
        self.metrics: Dict[str, Any] = {
            'start_time': datetime.now().isoformat(),
            'operations': [],
            'performance': {}
        }

    def log_operation(self,
                     operation: str,
                     duration_ms: float,
                     success: bool = True,
                     details: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an operation with timing and success status.

        Args:
            operation: Name of the operation
            duration_ms: Duration in milliseconds
            success: Whether operation succeeded
            details: Additional details (payload strings are fingerprinted)
        """
        op_data = {
            'operation': operation,
            'duration_ms': duration_ms,
            'success': success,
            'timestamp': datetime.now().isoformat()
        }

        if details:
            op_data['details'] = self._sanitize_details(details)

        self.metrics['operations'].append(op_data)

        status = "completed" if success else "failed"
        self.logger.info(f"Operation '{operation}' {status} in {duration_ms:.2f}ms")

    def log_performance(self, metric_name: str, value: float) -> None:
        """
        Log a performance metric.

        Args:
            metric_name: Name of the metric (e.g., 'megapixels_per_second')
            value: Metric value
        """
        self.metrics['performance'][metric_name] = value
        self.logger.info(f"Performance metric - {metric_name}: {value:.3f}")

    def _sanitize_details(self, details: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = {}
        for key, value in details.items():
            if isinstance(value, bytes) or (isinstance(value, str) and len(value) > 64):
                sanitized[key] = payload_fingerprint(value)
            else:
                sanitized[key] = value
        return sanitized

    def save_metrics(self, output_path: Path) -> None:
        """
        Save metrics to JSON file.

        Args:
            output_path: Path to save metrics JSON
        """
        self.metrics['end_time'] = datetime.now().isoformat()

        with open(output_path, 'w') as f:
            json.dump(self.metrics, f, indent=2, default=str)

        self.logger.info(f"Metrics saved to {output_path}")


def get_logger(name: str,
               level: Union[str, int] = logging.INFO,
               log_file: Optional[Path] = None,
               include_timestamp: bool = True) -> logging.Logger:
    """
    Get a configured logger with payload-safe formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logging
        include_timestamp: Whether to include timestamps

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Edge detection started")
        2024-01-01 12:00:00 - __main__ - INFO - Edge detection started
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(PayloadSafeFormatter(include_timestamp))
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(PayloadSafeFormatter(include_timestamp))
            logger.addHandler(file_handler)

    return logger


def set_package_level(level: Union[str, int]) -> None:
    """Apply a logging level to every logger already created under pixelfx."""
    for name in list(logging.root.manager.loggerDict):
        if name == 'pixelfx' or name.startswith('pixelfx.'):
            logging.getLogger(name).setLevel(level)


def log_image_operation(logger: logging.Logger,
                        fingerprint: str,
                        operation: str,
                        metadata: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an image operation without exposing the image payload.

    Args:
        logger: Logger instance
        fingerprint: Payload fingerprint from payload_fingerprint()
        operation: Name of the operation performed
        metadata: Optional metadata (only size-like keys are kept)

    Example:
        >>> log_image_operation(logger, "a3f5c8d2b1e4f6a9", "edges")
        INFO - Applied edges to image_a3f5c8d2b1e4f6a9
    """
    safe_metadata = {}
    if metadata:
        for key, value in metadata.items():
            if key in ['width', 'height', 'channels', 'format', 'size_kb', 'sigma']:
                safe_metadata[key] = value

    log_msg = f"Applied {operation} to image_{fingerprint}"
    if safe_metadata:
        log_msg += f" - metadata: {safe_metadata}"

    logger.info(log_msg)
