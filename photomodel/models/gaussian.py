from torch import Tensor

from .base import FunctionObject
from .mixins import EllipticalMixin
from ..utils.decorators import combine_docstrings
from . import func

__all__ = ("Gaussian",)


@combine_docstrings
class Gaussian(EllipticalMixin, FunctionObject):
    """Elliptical 2D Gaussian, $I(R) = I_0 \\exp(-R^2 / 2\\sigma^2)$.

    **Parameters:**
    -    `I_0`: Central intensity in counts per pixel.
    -    `sigma`: Standard deviation along the major axis, in pixels.
    """

    _short_name = "Gaussian"
    _function_name = "Elliptical Gaussian function"
    _parameter_labels = ("PA", "ell", "I_0", "sigma")
    usable = True

    def _setup(self, PA: float, ell: float, I_0: float, sigma: float):
        self.setup_geometry(PA, ell)
        self.I_0 = I_0
        self.sigma = sigma

    def radial_model(self, R: Tensor) -> Tensor:
        return func.gaussian(R, self.sigma, self.I_0)
