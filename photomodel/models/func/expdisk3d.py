import math

import torch


def expdisk3d_density(
    s: float,
    x_d: float,
    y_d0: float,
    z_d0: float,
    cos_inc: float,
    sin_inc: float,
    I0: float,
    h: float,
    h_z: float,
) -> float:
    """Luminosity density of a doubly exponential disk at distance `s` along
    a line of sight.

    The line of sight passes through disk coordinates `(x_d, y_d0, z_d0)` at
    `s = 0` and moves along `(0, sin_inc, -cos_inc)`, so that for a face-on
    disk it runs straight through the disk plane. Plain floats, this is
    called by the integrator once per sample.
    """
    y_d = y_d0 + s * sin_inc
    z_d = z_d0 - s * cos_inc
    R = math.sqrt(x_d * x_d + y_d * y_d)
    return I0 * math.exp(-R / h) * math.exp(-abs(z_d) / h_z)


def expdisk3d_faceon(R: torch.Tensor, I0: float, h: float, h_z: float) -> torch.Tensor:
    """Line of sight integral of the disk seen exactly face-on,
    $2 h_z I_0 e^{-R/h}$."""
    return (2 * h_z * I0) * torch.exp(-R / h)
