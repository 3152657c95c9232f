from . import config, errors, utils, image, models
from .image import Image, TargetImage, PSFImage, Window, OversampleRegion
from .models import (
    FunctionObject,
    ModelObject,
    ModelObject1D,
    setup_model_object,
    setup_model_object_1d,
)
from .options import FunctionSpec, ModelOptions
from .utils.integration import QuadOptions, QuadResult, adaptive_quad

try:
    from ._version import version as VERSION  # noqa
except ModuleNotFoundError:
    VERSION = "0.0.0"
    config.logger.warning("photomodel version number not found")

__version__ = VERSION
