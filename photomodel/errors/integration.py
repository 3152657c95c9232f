from .base import PhotoModelError

__all__ = ("IntegrationConvergenceError",)


class IntegrationConvergenceError(PhotoModelError):
    """
    Raised when a line-of-sight integral misses its tolerance within the
    subdivision budget and the error estimate is too large to accept. The
    best estimate is kept on the exception.
    """

    def __init__(self, message, value=None, abserr=None, x=None, y=None):
        super().__init__(message)
        self.value = value
        self.abserr = abserr
        self.x = x
        self.y = y
