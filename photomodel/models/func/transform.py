from typing import Tuple
from torch import Tensor


def to_component_frame(
    x: Tensor, y: Tensor, x0: float, y0: float, cos_pa: float, sin_pa: float
) -> Tuple[Tensor, Tensor]:
    """
    Shift to the component centre and rotate so the major axis (at position
    angle PA counter-clockwise from +x) lies along the new x axis.
    """
    dx = x - x0
    dy = y - y0
    return dx * cos_pa + dy * sin_pa, -dx * sin_pa + dy * cos_pa


def elliptical_radius(xp: Tensor, yp: Tensor, q: float) -> Tensor:
    """Radius in the component frame for axis ratio q = 1 - ellipticity."""
    return (xp**2 + (yp / q) ** 2).sqrt()
