from typing import List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .utils.integration import QuadOptions
from .errors import SpecificationConflict, InvalidParameter, ConfigurationError
from . import config

__all__ = ("FunctionSpec", "ModelOptions")


class FunctionSpec:
    """One function object in a model configuration.

    **Args:**
    -  `name`: registered short name of the function, e.g. "Gaussian-1D".
    -  `parameters`: initial values, either in the order of the function's
       parameter labels or as a mapping from label to value.
    -  `x0`, `y0`: component centre in pixel coordinates. Functions that
       ignore their centre (a flat sky) may leave both as None. One
       dimensional models only use `x0`.
    -  `label`: optional name for the function object, used in log messages.
    """

    def __init__(
        self,
        name: str,
        parameters: Union[Sequence[float], Mapping[str, float]],
        x0: Optional[float] = None,
        y0: Optional[float] = None,
        label: Optional[str] = None,
    ):
        self.name = name
        self.parameters = parameters
        self.x0 = None if x0 is None else float(x0)
        self.y0 = None if y0 is None else float(y0)
        self.label = label

    def parameter_values(self, labels: Sequence[str]) -> List[float]:
        """Initial parameter values ordered by `labels`."""
        if isinstance(self.parameters, Mapping):
            missing = set(labels) - set(self.parameters)
            unknown = set(self.parameters) - set(labels)
            if missing or unknown:
                raise InvalidParameter(
                    f"{self.name} takes parameters {', '.join(labels)}; missing: {sorted(missing)}, unknown: {sorted(unknown)}"
                )
            return [float(self.parameters[label]) for label in labels]
        values = [float(p) for p in self.parameters]
        if len(values) != len(labels):
            raise InvalidParameter(
                f"{self.name} takes {len(labels)} parameters ({', '.join(labels)}), got {len(values)}"
            )
        return values

    @classmethod
    def from_dict(cls, entry: Mapping) -> "FunctionSpec":
        entry = dict(entry)
        try:
            name = entry.pop("name")
            parameters = entry.pop("parameters")
        except KeyError as e:
            raise ConfigurationError(f"Function entry {entry} is missing {e}") from e
        center = entry.pop("center", None)
        x0 = entry.pop("x0", None)
        y0 = entry.pop("y0", None)
        if center is not None:
            if x0 is not None or y0 is not None:
                raise SpecificationConflict(f"{name}: give either center or x0/y0, not both")
            x0, y0 = tuple(center) if len(center) == 2 else (center[0], None)
        label = entry.pop("label", None)
        if len(entry) > 0:
            raise ConfigurationError(f"Unrecognized keys for function {name}: {', '.join(entry)}")
        return cls(name, parameters, x0=x0, y0=y0, label=label)

    def __repr__(self):
        return f"FunctionSpec({self.name!r}, {self.parameters!r}, x0={self.x0}, y0={self.y0})"


class ModelOptions:
    """Everything needed to build a model apart from the pixel data.

    **Args:**
    -  `functions`: sequence of `FunctionSpec`, in the order their
       contributions are summed and their parameters are laid out.
    -  `zeropoint`: magnitude zero point for surface brightness parameters.
    -  `quad_options`: `QuadOptions` for functions integrated numerically.
    -  `oversample_factor`: integer sub-pixel factor for the oversample region.
    -  `oversample_region`: extent `(i_low, i_high, j_low, j_high)` of the
       oversample region, or None for no oversampling.
    -  `max_chunk_pixels`: largest tile evaluated at once.

    Options can also be read from a mapping or YAML document:

    ```yaml
    zeropoint: 26.0
    integration: {epsabs: 1.0e-6, limit: 500}
    oversample: {factor: 5, region: [10, 20, 10, 20]}
    functions:
      - name: Gaussian-1D
        center: [16, 16]
        parameters: {mu_0: 20.0, sigma: 3.0}
    ```
    """

    def __init__(
        self,
        functions: Sequence[FunctionSpec] = (),
        *,
        zeropoint: Optional[float] = None,
        quad_options: Optional[QuadOptions] = None,
        oversample_factor: int = 1,
        oversample_region: Optional[Tuple[int, int, int, int]] = None,
        max_chunk_pixels: Optional[int] = None,
        integration_multiplier: Optional[float] = None,
    ):
        self.functions = list(functions)
        self.zeropoint = float(config.ZEROPOINT if zeropoint is None else zeropoint)
        self.quad_options = QuadOptions() if quad_options is None else quad_options
        self.oversample_factor = oversample_factor
        self.oversample_region = None if oversample_region is None else tuple(oversample_region)
        self.max_chunk_pixels = config.MAX_CHUNK_PIXELS if max_chunk_pixels is None else max_chunk_pixels
        if int(self.max_chunk_pixels) != self.max_chunk_pixels or self.max_chunk_pixels < 1:
            raise SpecificationConflict(
                f"max_chunk_pixels must be a positive integer, not {self.max_chunk_pixels}"
            )
        self.max_chunk_pixels = int(self.max_chunk_pixels)
        self.integration_multiplier = integration_multiplier

    def add_function(self, name: str, parameters, x0=None, y0=None, label=None) -> FunctionSpec:
        spec = FunctionSpec(name, parameters, x0=x0, y0=y0, label=label)
        self.functions.append(spec)
        return spec

    @classmethod
    def from_dict(cls, options: Mapping) -> "ModelOptions":
        options = dict(options)
        functions = [FunctionSpec.from_dict(f) for f in options.pop("functions", [])]
        integration = options.pop("integration", None)
        quad_options = None if integration is None else QuadOptions(**integration)
        oversample = options.pop("oversample", None) or {}
        kwargs = {
            "zeropoint": options.pop("zeropoint", None),
            "quad_options": quad_options,
            "oversample_factor": oversample.get("factor", 1),
            "oversample_region": oversample.get("region", None),
            "max_chunk_pixels": options.pop("max_chunk_pixels", None),
            "integration_multiplier": options.pop("integration_multiplier", None),
        }
        if len(options) > 0:
            raise ConfigurationError(f"Unrecognized model options: {', '.join(options)}")
        return cls(functions, **kwargs)

    @classmethod
    def from_yaml(cls, source) -> "ModelOptions":
        """Build options from a YAML string or an open file."""
        options = yaml.safe_load(source)
        if not isinstance(options, Mapping):
            raise ConfigurationError("Model options must be a YAML mapping")
        return cls.from_dict(options)

    def initial_parameters(self, labels_for) -> List[float]:
        """Concatenated initial parameter vector; `labels_for(spec)` gives the
        parameter labels of each function."""
        params = []
        for spec in self.functions:
            params.extend(spec.parameter_values(labels_for(spec)))
        return params

    def __str__(self):
        lines = [f"ModelOptions(zeropoint={self.zeropoint}, {self.quad_options!r})"]
        if self.oversample_region is not None:
            lines.append(f"  oversample x{self.oversample_factor} in {self.oversample_region}")
        lines.extend(f"  {spec!r}" for spec in self.functions)
        return "\n".join(lines)
