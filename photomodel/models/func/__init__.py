from .base import all_subclasses
from .convolution import convolve
from .gaussian import gaussian
from .exponential import exponential
from .expdisk3d import expdisk3d_density, expdisk3d_faceon
from .transform import to_component_frame, elliptical_radius

__all__ = (
    "all_subclasses",
    "convolve",
    "gaussian",
    "exponential",
    "expdisk3d_density",
    "expdisk3d_faceon",
    "to_component_frame",
    "elliptical_radius",
)
