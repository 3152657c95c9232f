import numpy as np
import torch

__all__ = (
    "sb_to_intensity",
    "intensity_to_sb",
    "flux_to_mag",
)


def sb_to_intensity(mu: float, zeropoint: float) -> float:
    """Converts surface brightness (mag/arcsec^2) into linear intensity
    per pixel.

    $$I = 10^{0.4 (z.p. - \\mu)}$$

    where $z.p.$ is the zeropoint.

    """
    return 10 ** (0.4 * (zeropoint - mu))


def intensity_to_sb(intensity: float, zeropoint: float) -> float:
    """Inverse of `sb_to_intensity`.

    $$\\mu = z.p. - 2.5\\log_{10}(I)$$

    """
    if isinstance(intensity, torch.Tensor):
        return zeropoint - 2.5 * torch.log10(intensity)
    return zeropoint - 2.5 * np.log10(intensity)


def flux_to_mag(flux: float, zeropoint: float) -> float:
    """Converts a flux total into logarithmic magnitude units.

    $$m = -2.5\\log_{10}(flux) + z.p.$$

    where $z.p.$ is the zeropoint.

    """
    return -2.5 * np.log10(flux) + zeropoint

