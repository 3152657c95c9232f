from .base import ConfigurationError, PhotoModelError

__all__ = ("UnrecognizedModel", "InvalidParameter", "UninitializedFunction")


class UnrecognizedModel(ConfigurationError):
    """
    Raised when the user tries to invoke a function object that does not exist.
    """


class InvalidParameter(ConfigurationError):
    """
    Raised when a parameter vector does not match what a function object needs.
    """


class UninitializedFunction(PhotoModelError):
    """
    Raised when a function object is evaluated before `setup` was called.
    """
