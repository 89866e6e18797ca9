"""Exceptions raised by imagediff."""

__all__ = [
    'ConfigError',
    'DimensionMismatchError',
    'EmptyImageError',
    'ImageDiffError',
    'InvalidImageError',
    'PreconditionError',
]


class ImageDiffError(Exception):
    """Base class for every imagediff failure."""


class PreconditionError(ImageDiffError, ValueError):
    """Inputs violate a precondition checked before any diff work starts."""


class DimensionMismatchError(PreconditionError):
    """Raised when two images that must share bounds do not."""

    def __init__(self, left_size: tuple[int, int], right_size: tuple[int, int]):
        self.left_size = left_size
        self.right_size = right_size
        super().__init__(
            f'Images must have the same dimensions: '
            f'{left_size[0]}x{left_size[1]} vs {right_size[0]}x{right_size[1]}'
        )


class EmptyImageError(PreconditionError):
    """Raised for images with zero width or height."""


class InvalidImageError(ImageDiffError, ValueError):
    """Raised when an array cannot be interpreted as an RGBA image."""


class ConfigError(ImageDiffError):
    """Raised for unparseable configuration values."""
