from .image import (
    window_center_meshgrid,
    subpixel_offsets,
    oversampled_meshgrid,
    reduce,
)

__all__ = (
    "window_center_meshgrid",
    "subpixel_offsets",
    "oversampled_meshgrid",
    "reduce",
)
