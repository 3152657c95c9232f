import torch
from torch import Tensor

from .base import FunctionObject

__all__ = ("FlatSky",)


class FlatSky(FunctionObject):
    """Constant sky background. The centre is ignored.

    **Parameters:**
    -    `I_sky`: Sky level in counts per pixel.
    """

    _short_name = "FlatSky"
    _function_name = "Flat sky"
    _parameter_labels = ("I_sky",)
    ndim = 1
    uses_center = False
    usable = True

    def _setup(self, I_sky: float):
        self.I_sky = I_sky

    def _brightness(self, x: Tensor, y: Tensor) -> Tensor:
        return torch.full(torch.broadcast_shapes(x.shape, y.shape), self.I_sky, dtype=x.dtype, device=x.device)

    def _brightness_1d(self, x: Tensor) -> Tensor:
        return torch.full_like(x, self.I_sky)
