import math

import numpy as np
import pytest

import photomodel as pm
from photomodel.utils.integration import adaptive_quad

######################################################################
# Adaptive quadrature
######################################################################


def test_quad_smooth():
    result = adaptive_quad(lambda s: math.exp(-0.5 * s * s), -10.0, 10.0)
    assert result.converged, "smooth integrand should converge"
    assert np.isclose(result.value, math.sqrt(2 * math.pi), rtol=1e-8)
    assert result.abserr < 1e-6


def test_quad_infinite_bounds():
    result = adaptive_quad(lambda s, h: math.exp(-abs(s) / h), -np.inf, np.inf, args=(2.0,))
    assert result.converged
    assert np.isclose(result.value, 4.0, rtol=1e-8)


def test_quad_break_points():
    result = adaptive_quad(
        lambda s: math.exp(-abs(s - 1.3)), -20.0, 20.0, points=(1.3, 50.0), epsabs=1e-12, epsrel=1e-12
    )
    assert result.converged, "break point outside the interval should be ignored"
    assert np.isclose(result.value, 2 - math.exp(-18.7) - math.exp(-21.3), rtol=1e-10)


def test_quad_not_converged():
    result = adaptive_quad(lambda s: math.exp(-abs(s)), -50.0, 50.0, epsabs=1e-14, epsrel=1e-13, limit=1)
    assert not result.converged, "a single interval cannot resolve the cusp"
    assert result.abserr > 0
    assert result.message != "", "QUADPACK message should be kept"


def test_quad_options():
    options = pm.QuadOptions()
    assert options.epsabs == pm.config.QUAD_EPSABS
    assert options.limit == pm.config.QUAD_LIMIT
    assert options.to_dict()["accept_abserr"] == pm.config.QUAD_ACCEPT_ABSERR

    degraded = pm.QuadResult(1.0, 1e-5, False, 10)
    assert pm.QuadOptions(accept_abserr=1e-4).accepts(degraded)
    assert not pm.QuadOptions(accept_abserr=1e-6).accepts(degraded)

    with pytest.raises(pm.errors.SpecificationConflict):
        pm.QuadOptions(limit=0)
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.QuadOptions(limit=2.5)
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.QuadOptions(epsabs=-1.0)
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.QuadOptions(epsabs=0.0, epsrel=1e-20)
