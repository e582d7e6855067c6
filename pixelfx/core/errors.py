"""
Error taxonomy for the image operations.

Every failure in the decode -> transform -> encode flow is reported as one of
a closed set of kinds plus a free-form context string, independent of which
imaging library raised the underlying exception.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    PAYLOAD_DECODE = "payload_decode"
    IMAGE_DECODE = "image_decode"
    IMAGE_ENCODE = "image_encode"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorKind.PAYLOAD_DECODE: "Could not decode input payload",
    ErrorKind.IMAGE_DECODE: "Could not decode image data",
    ErrorKind.IMAGE_ENCODE: "Could not encode output image",
}


class ImageProcessingError(Exception):
    """
    Base error for all image operation failures.

    Attributes:
        kind: The ErrorKind of the failure
        context: Free-form detail about what went wrong
    """

    kind: ErrorKind = None

    def __init__(self, context: str = "", kind: ErrorKind = None):
        if kind is not None:
            self.kind = kind
        if self.kind is None:
            raise TypeError("ImageProcessingError requires an ErrorKind")
        self.context = context
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.context:
            return f"{self.kind.description}: {self.context}"
        return self.kind.description


class PayloadDecodeError(ImageProcessingError):
    """The input payload is not valid base64 (or exceeds the size limit)."""

    kind = ErrorKind.PAYLOAD_DECODE


class ImageDecodeError(ImageProcessingError):
    """The decoded bytes are not an image the decoder can read."""

    kind = ErrorKind.IMAGE_DECODE


class ImageEncodeError(ImageProcessingError):
    """The result could not be serialized."""

    kind = ErrorKind.IMAGE_ENCODE

