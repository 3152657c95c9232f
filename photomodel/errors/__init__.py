from .base import PhotoModelError, ConfigurationError, SpecificationConflict, ActiveStateError
from .image import InvalidWindow, InvalidData
from .models import UnrecognizedModel, InvalidParameter, UninitializedFunction
from .integration import IntegrationConvergenceError

__all__ = (
    "PhotoModelError",
    "ConfigurationError",
    "SpecificationConflict",
    "ActiveStateError",
    "InvalidWindow",
    "InvalidData",
    "UnrecognizedModel",
    "InvalidParameter",
    "UninitializedFunction",
    "IntegrationConvergenceError",
)
