__all__ = ("PhotoModelError", "ConfigurationError", "SpecificationConflict", "ActiveStateError")


class PhotoModelError(Exception):
    """
    Base exception for all photomodel processes.
    """


class ConfigurationError(PhotoModelError):
    """
    Raised while building a model when the configuration cannot describe a
    valid model. Nothing is constructed when this is raised.
    """


class SpecificationConflict(ConfigurationError):
    """
    Raised when the inputs to an object are conflicting and/or ambiguous
    """


class ActiveStateError(PhotoModelError):
    """
    Raised when a model's parameters are modified while it is being evaluated.
    """
