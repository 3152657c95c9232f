# Base function object
from .base import FunctionObject, RadialFunction

# Profiles
from .gaussian1d import Gaussian1D
from .gaussian import Gaussian
from .exponential import Exponential
from .expdisk3d import ExponentialDisk3D
from .flatsky import FlatSky

# Assembly
from .model_object import ModelObject, ModelObject1D
from .setup_model import setup_model_object, setup_model_object_1d

from . import func, mixins

__all__ = (
    "FunctionObject",
    "RadialFunction",
    "Gaussian1D",
    "Gaussian",
    "Exponential",
    "ExponentialDisk3D",
    "FlatSky",
    "ModelObject",
    "ModelObject1D",
    "setup_model_object",
    "setup_model_object_1d",
    "func",
    "mixins",
)
