import math

import numpy as np
import photomodel as pm


def gaussian_psf(sigma, size):
    """Normalized circular gaussian kernel of odd `size`."""
    r = np.arange(size) - size // 2
    X, Y = np.meshgrid(r, r, indexing="xy")
    psf = np.exp(-0.5 * (X**2 + Y**2) / sigma**2)
    return psf / np.sum(psf)


def gaussian_pixel_integral(i, j, x0, y0, sigma, I0=1.0):
    """Mean of a circular gaussian over the unit pixel centred on (i, j)."""

    def axis(c, c0):
        s = sigma * math.sqrt(2)
        return (
            sigma
            * math.sqrt(math.pi / 2)
            * (math.erf((c + 0.5 - c0) / s) - math.erf((c - 0.5 - c0) / s))
        )

    return I0 * axis(i, x0) * axis(j, y0)


def make_gaussian_options(
    x0=16.0,
    y0=16.0,
    mu_0=20.0,
    sigma=3.0,
    zeropoint=26.0,
    **kwargs,
):
    options = pm.ModelOptions(zeropoint=zeropoint, **kwargs)
    options.add_function("Gaussian-1D", [mu_0, sigma], x0, y0)
    return options


def make_basic_gaussian_model(
    N=32,
    M=32,
    x0=16.0,
    y0=16.0,
    mu_0=20.0,
    sigma=3.0,
    zeropoint=26.0,
    psf=None,
    rand=12345,
    **kwargs,
):
    """A single Gaussian-1D function object on an N x M (rows x columns)
    image of noise."""
    np.random.seed(rand)
    options = make_gaussian_options(x0, y0, mu_0, sigma, zeropoint)
    return pm.setup_model_object(
        options,
        (M, N),
        np.random.normal(scale=0.1, size=(N, M)),
        psf=psf,
        **kwargs,
    )


def make_disk_options(PA=30.0, inc=60.0, I_0=1.0, h=4.0, h_z=1.0, x0=6.0, y0=5.0, **kwargs):
    options = pm.ModelOptions(**kwargs)
    options.add_function("ExponentialDisk3D", [PA, inc, I_0, h, h_z], x0, y0)
    return options
