import io

import numpy as np
import pytest
import torch

import photomodel as pm
from utils import make_gaussian_options

######################################################################
# Model setup and validation
######################################################################


def test_flat_data():
    options = make_gaussian_options(x0=3.0, y0=1.0)
    data = np.arange(12, dtype=np.float64)
    model = pm.setup_model_object(options, (4, 3), data)
    assert model.target.shape == (3, 4), "flat data should be read row-major as (rows, columns)"
    assert model.target.data[1, 0].item() == 4.0
    assert model.create_model_image().shape == (3, 4)


def test_data_is_not_copied():
    data = np.zeros((6, 5))
    model = pm.setup_model_object(make_gaussian_options(x0=2.0, y0=2.0), (5, 6), data)
    model.create_model_image()
    assert np.all(data == 0), "the target grids should never be written to"
    data[0, 0] = 7.0
    assert model.target.data[0, 0].item() == 7.0, "float64 grids should be referenced, not copied"


def test_mismatched_shapes():
    options = make_gaussian_options()
    data = np.zeros((32, 32))
    with pytest.raises(pm.errors.InvalidData) as excinfo:
        pm.setup_model_object(options, (32, 32), data, mask=np.zeros((31, 32)))
    assert isinstance(excinfo.value, pm.errors.ConfigurationError), "shape errors are configuration errors"
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), data, error=np.ones((32, 33)))
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), np.zeros(1000))
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 31), data)
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (0, 32), data)


def test_bad_psf():
    options = make_gaussian_options()
    data = np.zeros((32, 32))
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), data, psf=np.ones((33, 5)))
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), data, psf=np.ones(9))
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), data, psf=np.zeros((3, 3)))

    model = pm.setup_model_object(options, (32, 32), data, psf=2 * np.ones((3, 3)))
    assert np.isclose(torch.sum(model.target.psf.data).item(), 1.0), "psf should be normalized"


def test_bad_error():
    options = make_gaussian_options()
    data = np.zeros((32, 32))
    error = np.ones((32, 32))
    error[4, 4] = 0.0
    with pytest.raises(pm.errors.InvalidData):
        pm.setup_model_object(options, (32, 32), data, error=error)

    mask = np.zeros((32, 32))
    mask[4, 4] = 1
    model = pm.setup_model_object(options, (32, 32), data, error=error, mask=mask)
    assert model.weight_image()[4, 4].item() == 0, "masked pixels may have any error"


def test_oversample_validation():
    data = np.zeros((32, 32))
    options = make_gaussian_options(oversample_factor=3, oversample_region=(30, 34, 0, 4))
    with pytest.raises(pm.errors.InvalidWindow):
        pm.setup_model_object(options, (32, 32), data)

    options = make_gaussian_options(oversample_factor=0, oversample_region=(0, 4, 0, 4))
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.setup_model_object(options, (32, 32), data)

    with pytest.raises(pm.errors.SpecificationConflict):
        pm.setup_model_object(make_gaussian_options(), (32, 32), data, psf_oversampled=np.ones((5, 5)))

    options = make_gaussian_options(oversample_factor=3)
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.setup_model_object(options, (32, 32), data)

    model = pm.setup_model_object(options, (32, 32), data, oversample_region=(10, 14, 10, 14))
    assert model.oversample.window.extent == (10, 14, 10, 14), "explicit region overrides the options"
    assert model.oversample.factor == 3


def test_function_validation():
    data = np.zeros((16, 16))

    options = pm.ModelOptions()
    options.add_function("Gaussian-2D-Spiral", [1.0], 8.0, 8.0)
    with pytest.raises(pm.errors.UnrecognizedModel):
        pm.setup_model_object(options, (16, 16), data)

    options = pm.ModelOptions()
    options.add_function("Gaussian-1D", [20.0], 8.0, 8.0)
    with pytest.raises(pm.errors.InvalidParameter):
        pm.setup_model_object(options, (16, 16), data)

    options = pm.ModelOptions()
    options.add_function("Gaussian-1D", [20.0, 3.0], 8.0)
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.setup_model_object(options, (16, 16), data)

    with pytest.raises(pm.errors.SpecificationConflict):
        pm.setup_model_object(pm.ModelOptions(), (16, 16), data)

    with pytest.raises(pm.errors.SpecificationConflict):
        pm.ModelOptions(max_chunk_pixels=0)


def test_options_parameter_mapping():
    options = pm.ModelOptions()
    options.add_function("Gaussian-1D", {"sigma": 3.0, "mu_0": 20.0}, 8.0, 8.0)
    model = pm.setup_model_object(options, (16, 16), np.zeros((16, 16)))
    assert model.parameters.tolist() == [20.0, 3.0], "mapped parameters are ordered by label"

    options = pm.ModelOptions()
    options.add_function("Gaussian-1D", {"sigma": 3.0, "mu": 20.0}, 8.0, 8.0)
    with pytest.raises(pm.errors.InvalidParameter):
        pm.setup_model_object(options, (16, 16), np.zeros((16, 16)))


def test_options_from_yaml():
    document = """
zeropoint: 26.0
max_chunk_pixels: 100
integration:
  epsabs: 1.0e-8
  limit: 200
oversample:
  factor: 3
  region: [12, 20, 12, 20]
functions:
  - name: Gaussian-1D
    center: [16, 16]
    parameters: {mu_0: 20.0, sigma: 3.0}
  - name: ExponentialDisk3D
    x0: 10
    y0: 11
    parameters: [45.0, 60.0, 1.0, 5.0, 1.0]
  - name: FlatSky
    parameters: [0.1]
"""
    options = pm.ModelOptions.from_yaml(document)
    assert options.zeropoint == 26.0
    assert options.max_chunk_pixels == 100
    assert options.quad_options.epsabs == 1e-8
    assert options.quad_options.limit == 200
    assert options.quad_options.epsrel == pm.config.QUAD_EPSREL, "unset tolerances take the default"
    assert options.oversample_factor == 3
    assert options.oversample_region == (12, 20, 12, 20)
    assert [f.name for f in options.functions] == ["Gaussian-1D", "ExponentialDisk3D", "FlatSky"]

    model = pm.setup_model_object(options, (32, 32), np.zeros((32, 32)))
    assert model.n_params == 8
    assert model.functions[1].quad_options.limit == 200, "integration options reach the disk"
    assert model.functions[0].zeropoint == 26.0, "zeropoint reaches the functions"

    same = pm.ModelOptions.from_yaml(io.StringIO(document))
    assert same.oversample_region == options.oversample_region, "files are read as well as strings"


def test_options_from_dict_errors():
    with pytest.raises(pm.errors.ConfigurationError):
        pm.ModelOptions.from_dict({"zeropint": 26.0})
    with pytest.raises(pm.errors.ConfigurationError):
        pm.ModelOptions.from_dict({"functions": [{"name": "FlatSky"}]})
    with pytest.raises(pm.errors.ConfigurationError):
        pm.ModelOptions.from_yaml("- just\n- a list\n")
    with pytest.raises(pm.errors.SpecificationConflict):
        pm.ModelOptions.from_dict(
            {"functions": [{"name": "FlatSky", "parameters": [1.0], "center": [1, 2], "x0": 1}]}
        )


def test_setup_logs_summary(caplog):
    with caplog.at_level("INFO"):
        pm.setup_model_object(make_gaussian_options(), (32, 32), np.zeros((32, 32)))
    assert "Gaussian-1D" in caplog.text, "model construction should log a summary"
