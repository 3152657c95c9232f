from typing import Optional, Sequence

import torch
from torch import Tensor

from ..utils.decorators import classproperty
from ..errors import UnrecognizedModel, UninitializedFunction, InvalidParameter, SpecificationConflict
from .. import config
from . import func

__all__ = ("FunctionObject", "RadialFunction")


######################################################################
class FunctionObject:
    """Base class for all photomodel function objects.

    A function object computes the light contributed by one physical
    component at any sky coordinate. Evaluation happens in two phases:

    1. `setup(params, offset, xc, yc)` reads this object's slice of the shared
       parameter vector and the component centre, and caches everything
       that does not depend on the coordinate (amplitudes, trig of angles).
    2. `brightness(x, y)` evaluates the profile from the cached values only.
       It may be called any number of times, in any order, until the next
       `setup`.

    Subclasses declare their parameters in `_parameter_labels`, implement
    `_setup(*values)` and `_brightness(x, y)`, and set `usable = True` to
    appear in the registry under `_short_name`. Profiles that can also be
    evaluated along a line (1D models) set `ndim = 1` and implement
    `_brightness_1d(x)`.

    Calling `FunctionObject(model_type="Gaussian-1D")` builds the registered
    subclass with that short name.

    **Options:**
    -  `zeropoint`: magnitude zero point for profiles parameterized by
       surface brightness.
    """

    _short_name = "function"
    _function_name = "function object"
    _parameter_labels = ()
    _options = ("zeropoint",)
    ndim = 2
    uses_center = True
    usable = False

    def __new__(cls, *, model_type=None, **kwargs):
        if model_type is not None:
            return super(FunctionObject, cls).__new__(FunctionObject.lookup(model_type))
        return super().__new__(cls)

    def __init__(self, *, name: Optional[str] = None, zeropoint: Optional[float] = None, **kwargs):
        self.name = self.short_name if name is None else name
        self.zeropoint = float(config.ZEROPOINT if zeropoint is None else zeropoint)

        # Set any user defined options for the function
        for kwarg in list(kwargs.keys()):
            if kwarg in self.options:
                setattr(self, kwarg, kwargs.pop(kwarg))

        kwargs.pop("model_type", None)  # model_type is handled by __new__
        if len(kwargs) > 0:
            raise TypeError(
                f"Unrecognized keyword arguments for {self.__class__.__name__}: {', '.join(kwargs.keys())}"
            )

        self.x0 = None
        self.y0 = None
        self._initialized = False

    @classproperty
    def short_name(cls) -> str:
        return cls._short_name

    @classproperty
    def function_name(cls) -> str:
        return cls._function_name

    @classproperty
    def parameter_labels(cls) -> list:
        return list(cls._parameter_labels)

    @classproperty
    def n_params(cls) -> int:
        return len(cls._parameter_labels)

    @classproperty
    def options(cls) -> set:
        options = set()
        for subcls in cls.mro():
            if subcls is object:
                continue
            options.update(subcls.__dict__.get("_options", []))
        return options

    @classmethod
    def List_Models(cls, usable: Optional[bool] = None, types: bool = False) -> set:
        MODELS = func.all_subclasses(cls)
        result = set()
        for model in MODELS:
            if not (model.__dict__.get("usable", False) is usable or usable is None):
                continue
            if types:
                result.add(model.short_name)
            else:
                result.add(model)
        return result

    @classmethod
    def lookup(cls, model_type: str):
        """The registered function object class with short name `model_type`."""
        for M in FunctionObject.List_Models(usable=True):
            if M.short_name == model_type:
                return M
        raise UnrecognizedModel(
            f"Unknown function type: {model_type}. Available: {', '.join(sorted(FunctionObject.List_Models(usable=True, types=True)))}"
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def setup(self, params: Sequence[float], offset: int, xc: float, yc: Optional[float] = None):
        """Extract this object's parameters from `params[offset:offset + n_params]`,
        store the centre and precompute every coordinate independent value."""
        n = self.n_params
        if offset < 0 or len(params) < offset + n:
            raise InvalidParameter(
                f"{self.name} needs parameters {offset} to {offset + n - 1} but the parameter vector has length {len(params)}"
            )
        if isinstance(params, Tensor):
            values = params[offset : offset + n].tolist()
        else:
            values = [float(p) for p in params[offset : offset + n]]
        if yc is None and self.ndim == 2:
            raise SpecificationConflict(f"{self.name} is a 2D function and needs a y centre")
        self.x0 = float(xc)
        self.y0 = None if yc is None else float(yc)
        self._setup(*values)
        self._initialized = True

    def brightness(self, x, y=None) -> Tensor:
        """Flux contributed at (x, y), or at x along a line when `y` is None.
        Accepts floats or tensors and returns a tensor of the same shape."""
        if not self._initialized:
            raise UninitializedFunction(f"{self.name} was evaluated before setup was called")
        x = torch.as_tensor(x, dtype=config.DTYPE, device=config.DEVICE)
        if y is None:
            if self.ndim != 1:
                raise SpecificationConflict(f"{self.name} can only be evaluated in 2D")
            return self._brightness_1d(x)
        if self.y0 is None and self.uses_center:
            raise SpecificationConflict(f"{self.name} was set up without a y centre")
        y = torch.as_tensor(y, dtype=config.DTYPE, device=config.DEVICE)
        return self._brightness(x, y)

    def _setup(self, *values):
        raise NotImplementedError(f"{self.__class__.__name__} does not implement _setup")

    def _brightness(self, x: Tensor, y: Tensor) -> Tensor:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement _brightness")

    def _brightness_1d(self, x: Tensor) -> Tensor:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement _brightness_1d")

    def __str__(self):
        return f"{self.short_name}({', '.join(self.parameter_labels)})"


class RadialFunction(FunctionObject):
    """Function object defined by a radial profile `radial_model(R)`.

    On a 2D grid `R` is the distance from the centre; along a line it is
    `|x - xc|`, so the same profile serves 1D and 2D models.
    """

    ndim = 1

    def _brightness(self, x: Tensor, y: Tensor) -> Tensor:
        return self.radial_model(((x - self.x0) ** 2 + (y - self.y0) ** 2).sqrt())

    def _brightness_1d(self, x: Tensor) -> Tensor:
        return self.radial_model((x - self.x0).abs())

    def radial_model(self, R: Tensor) -> Tensor:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement radial_model")
