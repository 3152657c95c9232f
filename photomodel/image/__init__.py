from .base import Image, pixel_grid
from .target_image import TargetImage
from .psf_image import PSFImage
from .window import Window, OversampleRegion
from . import func

__all__ = (
    "Image",
    "pixel_grid",
    "TargetImage",
    "PSFImage",
    "Window",
    "OversampleRegion",
    "func",
)
