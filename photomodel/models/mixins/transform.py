import math

from torch import Tensor

from .. import func


class EllipticalMixin:
    """A profile with elliptical isophotes, set by a position angle and an
    ellipticity.

    Given some x, y the component frame coordinates are

    $$x' = \\Delta x \\cos PA + \\Delta y \\sin PA$$
    $$y' = -\\Delta x \\sin PA + \\Delta y \\cos PA$$

    and the radius handed to `radial_model` is
    $R = \\sqrt{x'^2 + (y' / q)^2}$ with $q = 1 - {\\rm ell}$.

    **Parameters:**
    -    `PA`: Position angle of the major axis in degrees, counter-clockwise
         from the +x axis.
    -    `ell`: Ellipticity, 1 - b/a. Zero is circular.
    """

    def setup_geometry(self, PA: float, ell: float):
        self.PA = PA
        self.ell = ell
        pa_rad = math.radians(PA)
        self.cos_pa = math.cos(pa_rad)
        self.sin_pa = math.sin(pa_rad)
        self.q = 1.0 - ell

    def _brightness(self, x: Tensor, y: Tensor) -> Tensor:
        xp, yp = func.to_component_frame(x, y, self.x0, self.y0, self.cos_pa, self.sin_pa)
        return self.radial_model(func.elliptical_radius(xp, yp, self.q))
