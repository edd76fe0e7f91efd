class SpriteProcessingError(Exception):
    """Base class for every failure the sprite pipeline can surface."""


class InvalidDimensions(SpriteProcessingError):
    """Zero or negative width, height or target size."""


class DecodeFailure(SpriteProcessingError):
    """The source image could not be materialised into a pixel buffer."""


class EncodeFailure(SpriteProcessingError):
    """A processed buffer could not be serialised into an image container."""
