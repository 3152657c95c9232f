from torch import Tensor

from .base import RadialFunction
from ..utils.conversions.units import sb_to_intensity
from . import func

__all__ = ("Gaussian1D",)


class Gaussian1D(RadialFunction):
    """Gaussian profile along a line, or radially on an image.

    Flux-related parameters are in surface brightness (mag/arcsec^2) but the
    output is linear intensity:

    $$I(r) = I_0 \\exp\\left(-\\frac{r^2}{2\\sigma^2}\\right)$$
    $$I_0 = 10^{0.4 (z.p. - \\mu_0)}$$

    **Parameters:**
    -    `mu_0`: Central surface brightness in mag/arcsec^2.
    -    `sigma`: Standard deviation, in pixels.
    """

    _short_name = "Gaussian-1D"
    _function_name = "Gaussian-1D function"
    _parameter_labels = ("mu_0", "sigma")
    usable = True

    def _setup(self, mu_0: float, sigma: float):
        self.mu_0 = mu_0
        self.sigma = sigma
        self.I_0 = sb_to_intensity(mu_0, self.zeropoint)

    def radial_model(self, R: Tensor) -> Tensor:
        return func.gaussian(R, self.sigma, self.I_0)
