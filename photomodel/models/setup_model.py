from typing import Optional, Sequence

import torch

from .base import FunctionObject
from .model_object import ModelObject, ModelObject1D
from ..image import TargetImage, PSFImage, OversampleRegion
from ..options import ModelOptions
from ..errors import InvalidData, SpecificationConflict
from .. import config

__all__ = ("setup_model_object", "setup_model_object_1d", "build_functions")


def build_functions(options: ModelOptions, ndim: int = 2):
    """Instantiate the function objects named in `options`.

    Returns a list of `(function, x0, y0)` in declaration order. Only the
    options each function class understands are passed to it.
    """
    shared = {
        "zeropoint": options.zeropoint,
        "quad_options": options.quad_options,
        "integration_multiplier": options.integration_multiplier,
    }
    functions = []
    for k, spec in enumerate(options.functions):
        F = FunctionObject.lookup(spec.name)
        kwargs = {key: value for key, value in shared.items() if key in F.options}
        function = F(name=spec.label or f"{spec.name}_{k}", **kwargs)
        if ndim == 1 and function.ndim != 1:
            raise SpecificationConflict(f"{spec.name} cannot be used in a 1D model")

        x0, y0 = spec.x0, spec.y0
        if not function.uses_center:
            x0 = 0.0 if x0 is None else x0
            y0 = 0.0 if y0 is None else y0
        if x0 is None or (ndim == 2 and y0 is None):
            raise SpecificationConflict(f"{function.name} needs a centre")
        functions.append((function, x0, y0))
    return functions


def _check_ncols_nrows(ncols_nrows: Sequence[int]):
    if len(ncols_nrows) != 2:
        raise InvalidData(f"ncols_nrows must be (columns, rows), not {ncols_nrows}")
    for n in ncols_nrows:
        if int(n) != n or n < 1:
            raise InvalidData(f"Image dimensions must be positive integers, not {ncols_nrows}")
    return (int(ncols_nrows[0]), int(ncols_nrows[1]))


def setup_model_object(
    options: ModelOptions,
    ncols_nrows: Sequence[int],
    data,
    psf=None,
    mask=None,
    error=None,
    psf_oversampled=None,
    oversample_region: Optional[Sequence[int]] = None,
) -> ModelObject:
    """Validate inputs and assemble a `ModelObject`. Nothing is evaluated.

    **Args:**
    -  `options`: `ModelOptions` naming the function objects and settings.
    -  `ncols_nrows`: (columns, rows) of the image.
    -  `data`: image pixels, flat row-major or of shape (rows, columns).
    -  `psf`: optional PSF grid, no larger than the image.
    -  `mask`: optional mask, nonzero pixels are excluded from fitting.
    -  `error`: optional one sigma uncertainty per pixel.
    -  `psf_oversampled`: optional PSF sampled at the oversampling factor,
       only allowed together with an oversample region.
    -  `oversample_region`: extent `(i_low, i_high, j_low, j_high)`,
       overrides `options.oversample_region`.

    The grids are wrapped, not copied, where possible, and the returned
    model never modifies them.
    """
    ncols_nrows = _check_ncols_nrows(ncols_nrows)
    target = TargetImage(
        data=data,
        mask=mask,
        error=error,
        psf=psf,
        ncols_nrows=ncols_nrows,
        name="target",
    )

    if oversample_region is None:
        oversample_region = options.oversample_region
    region = None
    if oversample_region is not None:
        region = OversampleRegion(oversample_region, options.oversample_factor)
        region.check_within(target.shape)
    elif options.oversample_factor != 1:
        raise SpecificationConflict(
            f"Oversampling factor {options.oversample_factor} was given without an oversample region"
        )

    if psf_oversampled is not None:
        if region is None:
            raise SpecificationConflict("An oversampled PSF was given without an oversample region")
        if not isinstance(psf_oversampled, PSFImage):
            psf_oversampled = PSFImage(data=psf_oversampled, name="oversampled psf")

    functions = build_functions(options, ndim=2)
    if len(functions) == 0:
        raise SpecificationConflict("A model needs at least one function object")

    model = ModelObject(
        target,
        oversample=region,
        psf_oversampled=psf_oversampled,
        max_chunk_pixels=options.max_chunk_pixels,
    )
    for function, x0, y0 in functions:
        model.add_function(function, x0, y0)
    model.parameters = options.initial_parameters(lambda spec: FunctionObject.lookup(spec.name).parameter_labels)

    config.logger.info(model.describe())
    return model


def setup_model_object_1d(
    options: ModelOptions,
    x,
    data,
    error=None,
    mask=None,
    data_in_magnitudes: bool = False,
) -> ModelObject1D:
    """Assemble a `ModelObject1D` for a profile sampled at positions `x`."""
    x = torch.as_tensor(x, dtype=config.DTYPE, device=config.DEVICE)
    if x.dim() != 1 or x.numel() == 0:
        raise InvalidData("Profile positions must be a non-empty one dimensional sequence")
    grids = {}
    for name, values in (("data", data), ("error", error), ("mask", mask)):
        if values is None:
            continue
        values = torch.as_tensor(values, device=config.DEVICE)
        if tuple(values.shape) != tuple(x.shape):
            raise InvalidData(f"Profile {name} has shape {tuple(values.shape)}, positions have {tuple(x.shape)}")
        grids[name] = values

    if "error" in grids:
        usable = grids["mask"] == 0 if "mask" in grids else torch.ones_like(x, dtype=torch.bool)
        err = grids["error"][usable]
        if not torch.all(torch.isfinite(err) & (err > 0)).item():
            raise InvalidData("Profile errors must be positive and finite on all unmasked points")

    functions = build_functions(options, ndim=1)
    if len(functions) == 0:
        raise SpecificationConflict("A model needs at least one function object")

    model = ModelObject1D(
        x,
        grids.get("data", None),
        error=grids.get("error", None),
        mask=grids.get("mask", None),
        data_in_magnitudes=data_in_magnitudes,
        zeropoint=options.zeropoint,
    )
    for function, x0, _ in functions:
        model.add_function(function, x0)
    model.parameters = options.initial_parameters(lambda spec: FunctionObject.lookup(spec.name).parameter_labels)

    config.logger.info(model.describe())
    return model
