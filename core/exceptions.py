"""
Exception types raised by the image operations facade.
"""

from typing import Optional


class ImagingError(Exception):
    """Base class for all imaging errors"""


class ConfigurationError(ImagingError):
    """No usable imaging back end, or an unknown driver was configured"""


class InvalidArgument(ImagingError, ValueError):
    """An operation received arguments it cannot work with"""


class ImageError(ImagingError):
    """The imaging back end failed to open, manipulate or write an image"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
