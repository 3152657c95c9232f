import math
from typing import List, Optional, Tuple

import torch
from torch import Tensor

from .base import FunctionObject
from ..image import TargetImage, PSFImage, Window, OversampleRegion
from ..image import func as image_func
from ..errors import ActiveStateError, InvalidParameter, SpecificationConflict
from ..utils.conversions.units import flux_to_mag, intensity_to_sb
from .. import config
from . import func

__all__ = ("ModelObject", "ModelObject1D")


class ActiveEvaluation:
    """Mark a model as being evaluated.

    While inside the context the model's parameter vector cannot be
    replaced, so function objects always see the vector they were set up
    with. Leaving the context (normally or through an exception) releases
    the model again.
    """

    def __init__(self, model):
        self.model = model

    def __enter__(self):
        if self.model._evaluating:
            raise ActiveStateError(f"{self.model.name} is already being evaluated")
        self.model._evaluating = True
        return self.model

    def __exit__(self, *args, **kwargs):
        self.model._evaluating = False


######################################################################
class BaseModelObject:
    """Bookkeeping shared by the 1D and 2D models: an ordered list of
    function objects, each owning a contiguous window of one parameter
    vector.

    Windows are handed out in the order functions are added and never move
    afterwards; function `k` owns
    `parameters[offsets[k] : offsets[k] + functions[k].n_params]`.
    """

    def __init__(self, *, name: Optional[str] = None):
        self.name = "model" if name is None else name
        self.functions: List[FunctionObject] = []
        self.centers: List[Tuple[float, Optional[float]]] = []
        self.offsets: List[int] = []
        self._parameters = None
        self._evaluating = False

    def add_function(self, function: FunctionObject, xc: float, yc: Optional[float] = None) -> int:
        """Append a function object centred on (xc, yc). Returns the offset
        of its parameter window."""
        if self._parameters is not None:
            raise SpecificationConflict(
                f"Cannot add {function.name} to {self.name} after its parameters were set"
            )
        offset = self.n_params
        self.functions.append(function)
        self.centers.append((xc, yc))
        self.offsets.append(offset)
        return offset

    @property
    def n_params(self) -> int:
        return sum(f.n_params for f in self.functions)

    @property
    def parameter_windows(self) -> List[Tuple[int, int]]:
        """(offset, count) of every function object's parameter window."""
        return [(o, f.n_params) for o, f in zip(self.offsets, self.functions)]

    def parameter_labels(self) -> List[str]:
        """Label of every entry of the parameter vector, suffixed with the
        index of the function object which owns it."""
        labels = []
        for k, function in enumerate(self.functions):
            labels.extend(f"{label}_{k}" for label in function.parameter_labels)
        return labels

    def function_names(self) -> List[str]:
        return [f.short_name for f in self.functions]

    @property
    def parameters(self) -> Optional[Tensor]:
        """The current parameter vector. Assigning a new vector is refused
        while the model is being evaluated."""
        return self._parameters

    @parameters.setter
    def parameters(self, values):
        if self._evaluating:
            raise ActiveStateError(f"Cannot set parameters of {self.name} while it is being evaluated")
        values = torch.as_tensor(values, dtype=config.DTYPE, device=config.DEVICE).flatten()
        if values.numel() != self.n_params:
            raise InvalidParameter(
                f"{self.name} has {self.n_params} parameters, got a vector of length {values.numel()}"
            )
        self._parameters = values.clone()

    def _require_parameters(self, params):
        if params is not None:
            self.parameters = params
        if self._parameters is None:
            raise InvalidParameter(f"No parameters have been given to {self.name}")

    def setup_functions(self, params=None):
        """Run `setup` once on every function object with the current
        parameters, or with `params` after storing them."""
        self._require_parameters(params)
        for function, offset, (xc, yc) in zip(self.functions, self.offsets, self.centers):
            function.setup(self._parameters, offset, xc, yc)

    def _evaluate(self, x: Tensor, y: Optional[Tensor] = None) -> Tensor:
        # contributions are summed in the order the functions were added
        total = torch.zeros(x.shape, dtype=config.DTYPE, device=x.device)
        for function in self.functions:
            total = total + function.brightness(x, y)
        return total

    def describe(self) -> str:
        lines = [f"{self.name}: {len(self.functions)} function objects, {self.n_params} parameters"]
        for k, (function, (offset, count)) in enumerate(zip(self.functions, self.parameter_windows)):
            xc, yc = self.centers[k]
            centre = f"x0 = {xc}" if yc is None else f"(x0, y0) = ({xc}, {yc})"
            lines.append(
                f"  [{k}] {function.short_name} at {centre}, parameters {offset}..{offset + count - 1}: "
                + ", ".join(function.parameter_labels)
            )
        return "\n".join(lines)


######################################################################
class ModelObject(BaseModelObject):
    """A model image built from any number of function objects.

    Every pixel of the model is the sum of every function object evaluated
    at the pixel centre. Pixels inside the oversample region are instead
    split into `factor x factor` sub-pixels, the sum is evaluated at each
    sub-pixel centre and the mean is assigned to the pixel.

    The target image (data, mask, error, PSF) is held by reference and never
    modified.

    **Args:**
    -  `target`: the `TargetImage` which sets the pixel grid.
    -  `oversample`: optional `OversampleRegion`.
    -  `psf_oversampled`: optional `PSFImage` sampled at the oversampling
       factor, used to convolve the oversample region in `sample`.
    -  `max_chunk_pixels`: evaluation is split into tiles of about this many
       pixels. Results do not depend on the tiling.

    Basic usage:

    ```{python}
    model = ModelObject(target)
    model.add_function(Gaussian1D(zeropoint=26.0), 16.0, 16.0)
    model.parameters = [20.0, 3.0]
    image = model.create_model_image()
    ```
    """

    def __init__(
        self,
        target: TargetImage,
        *,
        oversample: Optional[OversampleRegion] = None,
        psf_oversampled: Optional[PSFImage] = None,
        max_chunk_pixels: Optional[int] = None,
        name: Optional[str] = None,
    ):
        super().__init__(name=name)
        self.target = target
        self.oversample = oversample
        if psf_oversampled is not None and oversample is None:
            raise SpecificationConflict("An oversampled PSF needs an oversample region")
        self.psf_oversampled = psf_oversampled
        self.max_chunk_pixels = int(config.MAX_CHUNK_PIXELS if max_chunk_pixels is None else max_chunk_pixels)
        if self.max_chunk_pixels < 1:
            raise SpecificationConflict(f"max_chunk_pixels must be positive, not {self.max_chunk_pixels}")

    def add_function(self, function: FunctionObject, xc: float, yc: Optional[float] = None) -> int:
        if yc is None:
            raise SpecificationConflict(f"{function.name} needs a y centre in a 2D model")
        return super().add_function(function, xc, yc)

    @property
    def oversampling(self) -> bool:
        return self.oversample is not None and self.oversample.factor > 1

    def _oversampled_window(self, window: Window, factor: int) -> Tensor:
        x, y = image_func.oversampled_meshgrid(window, factor, config.DTYPE, config.DEVICE)
        return image_func.reduce(self._evaluate(x, y), factor)

    def _sample_window(self, window: Window) -> Tensor:
        x, y = image_func.window_center_meshgrid(window, config.DTYPE, config.DEVICE)
        overlap = window & self.oversample.window if self.oversampling else Window((0, 0, 0, 0))
        if overlap.is_empty():
            return self._evaluate(x, y)

        local = _local_slices(overlap, window)
        inside = torch.zeros(window.shape, dtype=torch.bool, device=x.device)
        inside[local] = True
        sample = torch.zeros(window.shape, dtype=config.DTYPE, device=x.device)
        sample[~inside] = self._evaluate(x[~inside], y[~inside])
        sample[local] = self._oversampled_window(overlap, self.oversample.factor)
        return sample

    def _sample(self, window: Window) -> Tensor:
        if window.n_pixels <= self.max_chunk_pixels:
            return self._sample_window(window)
        sample = torch.zeros(window.shape, dtype=config.DTYPE, device=config.DEVICE)
        for chunk in window.chunk(self.max_chunk_pixels):
            sample[_local_slices(chunk, window)] = self._sample_window(chunk)
        return sample

    def create_model_image(self, params=None) -> Tensor:
        """Evaluate the model before PSF convolution.

        **Args:**
        -  `params`: new parameter vector, if None the current one is used.

        **Returns:**
        -  tensor of shape (rows, columns) matching the target image.
        """
        self._require_parameters(params)
        with ActiveEvaluation(self):
            self.setup_functions()
            return self._sample(self.target.window)

    def _convolved_oversample_region(self) -> Tensor:
        """The oversample region evaluated at the fine resolution, convolved
        with the oversampled PSF and box averaged back down."""
        factor = self.oversample.factor
        pad = math.ceil(self.psf_oversampled.psf_pad / factor)
        window = self.oversample.window.copy()
        window.pad(pad)
        x, y = image_func.oversampled_meshgrid(window, factor, config.DTYPE, config.DEVICE)
        fine = func.convolve(self._evaluate(x, y), self.psf_oversampled.data)
        crop = pad * factor
        fine = fine[crop : fine.shape[0] - crop, crop : fine.shape[1] - crop]
        return image_func.reduce(fine, factor)

    def sample(self, params=None) -> Tensor:
        """Evaluate the model and convolve it with the target PSF.

        The model is evaluated on the image padded by half the PSF size so
        light from just outside the image is scattered in correctly. If an
        oversampled PSF was given, the oversample region is replaced by its
        own fine resolution evaluation convolved with that PSF. Without any
        PSF this is the same as `create_model_image`.
        """
        if not self.target.has_psf and self.psf_oversampled is None:
            return self.create_model_image(params)

        self._require_parameters(params)
        psf = self.target.psf
        pad = 0 if psf is None else psf.psf_pad
        window = self.target.window
        window.pad(pad)
        with ActiveEvaluation(self):
            self.setup_functions()
            working = self._sample(window)
            if psf is not None:
                working = func.convolve(working, psf.data)
            model = working[pad : pad + self.target.n_rows, pad : pad + self.target.n_columns]
            if self.psf_oversampled is not None:
                model[self.oversample.window.slices] = self._convolved_oversample_region()
        return model

    def weight_image(self) -> Tensor:
        return self.target.weight()

    def fit_mask(self) -> Tensor:
        return self.target.fit_mask()

    def total_flux(self, params=None) -> float:
        return torch.sum(self.create_model_image(params)).item()

    def total_magnitude(self, zeropoint: float, params=None) -> float:
        return flux_to_mag(self.total_flux(params), zeropoint)

    def describe(self) -> str:
        lines = [super().describe(), f"  image: {self.target.n_columns} x {self.target.n_rows} pixels"]
        if self.oversample is not None:
            lines.append(f"  oversampling: {self.oversample}")
        if self.target.has_psf:
            psf = self.target.psf
            lines.append(f"  psf: {psf.n_columns} x {psf.n_rows} pixels")
        return "\n".join(lines)


######################################################################
class ModelObject1D(BaseModelObject):
    """A model of a one dimensional profile, such as a surface brightness
    profile along a galaxy's major axis.

    Every function object is evaluated at positions `x` along the line, each
    with its own centre. When `data_in_magnitudes` is True the summed
    intensity is converted to surface brightness with `zeropoint` so it can
    be compared directly with a profile given in mag/arcsec^2.
    """

    def __init__(
        self,
        x,
        data=None,
        *,
        error=None,
        mask=None,
        data_in_magnitudes: bool = False,
        zeropoint: Optional[float] = None,
        name: Optional[str] = None,
    ):
        super().__init__(name=name)
        self.x = torch.as_tensor(x, dtype=config.DTYPE, device=config.DEVICE)
        self.data = None if data is None else torch.as_tensor(data, dtype=config.DTYPE, device=config.DEVICE)
        self.error = None if error is None else torch.as_tensor(error, dtype=config.DTYPE, device=config.DEVICE)
        self.mask = None if mask is None else torch.as_tensor(mask, device=config.DEVICE) != 0
        self.data_in_magnitudes = data_in_magnitudes
        self.zeropoint = float(config.ZEROPOINT if zeropoint is None else zeropoint)

    def add_function(self, function: FunctionObject, xc: float, yc: Optional[float] = None) -> int:
        if function.ndim != 1:
            raise SpecificationConflict(f"{function.name} cannot be evaluated in a 1D model")
        return super().add_function(function, xc, None)

    def create_model_image(self, params=None) -> Tensor:
        """Evaluate the profile at every position in `x`."""
        self._require_parameters(params)
        with ActiveEvaluation(self):
            self.setup_functions()
            model = self._evaluate(self.x)
        if self.data_in_magnitudes:
            return intensity_to_sb(model, self.zeropoint)
        return model

    def fit_mask(self) -> Tensor:
        if self.mask is None:
            return torch.zeros(self.x.shape, dtype=torch.bool, device=self.x.device)
        return self.mask

    def weight_image(self) -> Tensor:
        if self.error is None:
            weight = torch.ones_like(self.x)
        else:
            weight = 1 / self.error**2
        return torch.where(self.fit_mask(), torch.zeros_like(weight), weight)


def _local_slices(inner: Window, outer: Window) -> Tuple[slice, slice]:
    """Slices selecting `inner` from an array covering `outer`."""
    return (
        slice(inner.j_low - outer.j_low, inner.j_high - outer.j_low),
        slice(inner.i_low - outer.i_low, inner.i_high - outer.i_low),
    )
