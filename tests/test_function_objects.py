import math

import numpy as np
import pytest
import torch

import photomodel as pm
from photomodel.models import FunctionObject, Gaussian1D, Gaussian, Exponential, FlatSky

######################################################################
# Function objects
######################################################################


def test_registry():
    names = FunctionObject.List_Models(usable=True, types=True)
    for name in ("Gaussian-1D", "Gaussian", "Exponential", "ExponentialDisk3D", "FlatSky"):
        assert name in names, f"{name} should be registered"

    F = FunctionObject(model_type="Gaussian-1D", zeropoint=26.0)
    assert isinstance(F, Gaussian1D), "model_type should build the registered subclass"
    assert F.zeropoint == 26.0, "options should reach the subclass"

    with pytest.raises(pm.errors.UnrecognizedModel):
        FunctionObject(model_type="Sersic-Spiral")
    with pytest.raises(pm.errors.ConfigurationError):
        FunctionObject.lookup("not a function")


def test_metadata():
    assert Gaussian1D.n_params == 2, "Gaussian-1D has two parameters"
    assert Gaussian1D.parameter_labels == ["mu_0", "sigma"], "labels should be in order"
    assert pm.models.ExponentialDisk3D.parameter_labels == ["PA", "inc", "I_0", "h", "h_z"]
    assert Gaussian1D.short_name == "Gaussian-1D"
    assert "quad_options" in pm.models.ExponentialDisk3D.options, "options are collected over the mro"
    assert "zeropoint" in pm.models.ExponentialDisk3D.options, "options are collected over the mro"

    with pytest.raises(TypeError):
        Gaussian1D(not_an_option=1)


def test_uninitialized_evaluation():
    F = Gaussian1D()
    assert not F.initialized
    with pytest.raises(pm.errors.UninitializedFunction):
        F.brightness(1.0, 1.0)


def test_setup_parameter_window():
    F = Gaussian1D(zeropoint=26.0)
    params = torch.tensor([99.0, 99.0, 20.0, 3.0, 99.0], dtype=torch.float64)
    F.setup(params, 2, 16.0, 16.0)
    assert F.initialized
    assert F.mu_0 == 20.0 and F.sigma == 3.0, "setup should read its own window of the vector"

    with pytest.raises(pm.errors.InvalidParameter):
        F.setup(params, 4, 16.0, 16.0)

    G = Gaussian(zeropoint=26.0)
    with pytest.raises(pm.errors.SpecificationConflict):
        G.setup([0.0, 0.0, 1.0, 2.0], 0, 16.0)


def test_gaussian1d_values():
    F = Gaussian1D(zeropoint=26.0)
    F.setup([20.0, 3.0], 0, 16.0, 16.0)
    I0 = 10 ** (0.4 * (26.0 - 20.0))

    assert np.isclose(F.brightness(16.0, 16.0).item(), I0, rtol=1e-12), "peak should be I_0"
    for k in (1, 2, 3):
        expected = I0 * math.exp(-0.5 * k**2)
        assert np.isclose(F.brightness(16.0 + 3.0 * k, 16.0).item(), expected, rtol=1e-12)
        assert np.isclose(F.brightness(16.0, 16.0 - 3.0 * k).item(), expected, rtol=1e-12)

    # along a line
    x = torch.tensor([13.0, 16.0, 19.0], dtype=torch.float64)
    line = F.brightness(x)
    assert np.allclose(line.numpy(), [I0 * math.exp(-0.5), I0, I0 * math.exp(-0.5)], rtol=1e-12)


def test_repeated_brightness():
    F = Gaussian1D(zeropoint=0.0)
    F.setup([0.0, 2.0], 0, 3.0, 4.0)
    x, y = torch.meshgrid(torch.arange(8.0), torch.arange(8.0), indexing="xy")
    first = F.brightness(x, y)
    second = F.brightness(x, y)
    assert torch.equal(first, second), "brightness should not modify cached state"


def test_elliptical_profiles():
    G = Gaussian()
    G.setup([90.0, 0.5, 2.0, 3.0], 0, 10.0, 10.0)
    # major axis along +y at PA = 90
    assert np.isclose(G.brightness(10.0, 13.0).item(), 2.0 * math.exp(-0.5), rtol=1e-12)
    assert np.isclose(G.brightness(11.5, 10.0).item(), 2.0 * math.exp(-0.5), rtol=1e-12)

    E = Exponential()
    E.setup([0.0, 0.0, 5.0, 2.0], 0, 0.0, 0.0)
    assert np.isclose(E.brightness(4.0, 0.0).item(), 5.0 * math.exp(-2.0), rtol=1e-12)
    assert np.isclose(E.brightness(0.0, -4.0).item(), 5.0 * math.exp(-2.0), rtol=1e-12)


def test_flatsky():
    S = FlatSky()
    S.setup([3.5], 0, 0.0)
    x = torch.zeros((4, 5), dtype=torch.float64)
    assert torch.all(S.brightness(x, x) == 3.5), "flat sky is constant"
    assert S.brightness(x[0]).shape == (5,), "flat sky works along a line"
