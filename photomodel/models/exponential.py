from torch import Tensor

from .base import FunctionObject
from .mixins import EllipticalMixin
from ..utils.decorators import combine_docstrings
from . import func

__all__ = ("Exponential",)


@combine_docstrings
class Exponential(EllipticalMixin, FunctionObject):
    """Elliptical 2D exponential, $I(R) = I_0 e^{-R/h}$. This is what a thin
    exponential disk looks like in projection.

    **Parameters:**
    -    `I_0`: Central intensity in counts per pixel.
    -    `h`: Scale length along the major axis, in pixels.
    """

    _short_name = "Exponential"
    _function_name = "Elliptical Exponential function"
    _parameter_labels = ("PA", "ell", "I_0", "h")
    usable = True

    def _setup(self, PA: float, ell: float, I_0: float, h: float):
        self.setup_geometry(PA, ell)
        self.I_0 = I_0
        self.h = h

    def radial_model(self, R: Tensor) -> Tensor:
        return func.exponential(R, self.h, self.I_0)
