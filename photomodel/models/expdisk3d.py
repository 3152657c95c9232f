import math
from typing import Optional

import torch
from torch import Tensor

from .base import FunctionObject
from ..utils.integration import QuadOptions, QuadResult, adaptive_quad
from ..errors import IntegrationConvergenceError
from .. import config
from . import func

__all__ = ("ExponentialDisk3D",)


class ExponentialDisk3D(FunctionObject):
    """Integrated intensity of a 3D perfect exponential disk seen at some
    inclination.

    The luminosity density in the disk frame is

    $$\\rho(R, z) = I_0 e^{-R/h} e^{-|z|/h_z}$$

    and the intensity at a sky pixel is $\\rho$ integrated along the line of
    sight through that pixel. The sky coordinates are first rotated so the
    line of nodes (the major axis, at position angle PA) lies along x. The
    integral runs over $|s| \\le$ `integration_multiplier` $\\times \\max(h, h_z)$
    with adaptive quadrature and a break point where the line of sight
    crosses the midplane.

    An inclination of exactly zero uses the closed form face-on projection
    $2 h_z I_0 e^{-R/h}$ instead of integrating; every other inclination is
    integrated numerically.

    **Parameters:**
    -    `PA`: Position angle of the line of nodes in degrees, counter-clockwise from +x.
    -    `inc`: Inclination to the line of sight in degrees, 0 is face-on.
    -    `I_0`: Central luminosity density (counts per pixel per pixel of depth).
    -    `h`: Radial exponential scale length in pixels.
    -    `h_z`: Vertical exponential scale height in pixels.

    **Options:**
    -    `quad_options`: `QuadOptions` with the integration tolerances,
         subdivision budget and acceptance threshold for degraded results.
         The integral is taken for unit `I_0` and scaled afterwards, so the
         tolerances are relative to the central density.
    -    `integration_multiplier`: half length of the integration path in units
         of the larger scale length.
    """

    _short_name = "ExponentialDisk3D"
    _function_name = "Exponential disk (3D, line-of-sight integrated)"
    _parameter_labels = ("PA", "inc", "I_0", "h", "h_z")
    _options = ("quad_options", "integration_multiplier")
    usable = True

    def __init__(
        self,
        *args,
        quad_options: Optional[QuadOptions] = None,
        integration_multiplier: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.quad_options = QuadOptions() if quad_options is None else quad_options
        self.integration_multiplier = float(
            config.INTEGRATION_MULTIPLIER if integration_multiplier is None else integration_multiplier
        )

    def _setup(self, PA: float, inc: float, I_0: float, h: float, h_z: float):
        self.PA = PA
        self.inc = inc
        self.I_0 = I_0
        self.h = h
        self.h_z = h_z

        pa_rad = math.radians(PA)
        inc_rad = math.radians(inc)
        self.cos_pa = math.cos(pa_rad)
        self.sin_pa = math.sin(pa_rad)
        self.cos_inc = math.cos(inc_rad)
        self.sin_inc = math.sin(inc_rad)
        self.face_on = inc == 0
        self.integration_limit = self.integration_multiplier * max(h, h_z)

    def integrate_line_of_sight(self, xp: float, yp: float) -> QuadResult:
        """Raw integration result for one point given in the component frame
        (major axis along x), for unit central density. Multiply `value` and
        `abserr` by `I_0` for the intensity."""
        y_d0 = yp * self.cos_inc
        z_d0 = yp * self.sin_inc
        points = None
        if self.cos_inc != 0:
            # where the line of sight crosses the midplane, z_d = 0
            points = (z_d0 / self.cos_inc,)
        return adaptive_quad(
            func.expdisk3d_density,
            -self.integration_limit,
            self.integration_limit,
            args=(xp, y_d0, z_d0, self.cos_inc, self.sin_inc, 1.0, self.h, self.h_z),
            epsabs=self.quad_options.epsabs,
            epsrel=self.quad_options.epsrel,
            limit=self.quad_options.limit,
            points=points,
        )

    def _brightness(self, x: Tensor, y: Tensor) -> Tensor:
        xp, yp = func.to_component_frame(x, y, self.x0, self.y0, self.cos_pa, self.sin_pa)
        if self.face_on:
            return func.expdisk3d_faceon((xp**2 + yp**2).sqrt(), self.I_0, self.h, self.h_z)

        xp, yp = torch.broadcast_tensors(xp, yp)
        values = []
        n_degraded = 0
        worst = 0.0
        for xv, yv in zip(xp.flatten().tolist(), yp.flatten().tolist()):
            result = self.integrate_line_of_sight(xv, yv)
            if not result.converged:
                if not self.quad_options.accepts(result):
                    value = self.I_0 * result.value
                    abserr = abs(self.I_0) * result.abserr
                    raise IntegrationConvergenceError(
                        f"{self.name}: line of sight integral did not converge at component frame "
                        f"({xv:.3f}, {yv:.3f}), estimate {value:.6g} +- {abserr:.3g}. {result.message}",
                        value=value,
                        abserr=abserr,
                        x=xv,
                        y=yv,
                    )
                n_degraded += 1
                worst = max(worst, result.abserr)
            values.append(self.I_0 * result.value)

        if n_degraded > 0:
            config.logger.warning(
                f"{self.name}: accepted {n_degraded} unconverged line of sight integrals, largest error estimate {worst:.3g} per unit I_0"
            )
        return torch.tensor(values, dtype=config.DTYPE, device=x.device).reshape(xp.shape)
