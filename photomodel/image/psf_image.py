import torch

from .base import Image
from ..errors import InvalidData

__all__ = ["PSFImage"]


class PSFImage(Image):
    """Image of a point spread function.

    The kernel is centred on pixel `(rows // 2, columns // 2)`, so odd
    dimensions are the natural choice, though they are not enforced. By
    default the kernel is normalized to unit sum so that convolution
    conserves flux.
    """

    def __init__(self, *args, normalize: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        if self.data.numel() == 0:
            raise InvalidData("PSF image contains no pixels")
        if not torch.all(torch.isfinite(self.data)).item():
            raise InvalidData("PSF image contains non-finite pixels")
        if normalize:
            self.normalize()

    def normalize(self):
        """Normalizes the PSF image to have a sum of 1."""
        norm = torch.sum(self.data)
        if norm.item() <= 0:
            raise InvalidData(f"PSF image must have a positive sum to normalize, not {norm.item()}")
        self._data = self.data / norm

    @property
    def psf_pad(self) -> int:
        return max(self.data.shape) // 2

    def copy(self):
        return self.__class__(data=torch.clone(self.data), name=self.name, normalize=False)
