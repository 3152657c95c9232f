from .base import ConfigurationError

__all__ = ("InvalidWindow", "InvalidData")


class InvalidWindow(ConfigurationError):
    """
    Raised whenever a window is misspecified or falls outside its image
    """


class InvalidData(ConfigurationError):
    """
    Raised when pixel data has the wrong shape or unusable values.
    """
