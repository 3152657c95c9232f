from typing import Optional, Sequence

import torch

from .base import Image, pixel_grid
from .psf_image import PSFImage
from .. import config
from ..errors import InvalidData
from ..utils.decorators import combine_docstrings

__all__ = ["TargetImage"]


@combine_docstrings
class TargetImage(Image):
    """Image object which represents the data to be fit by a model. It can
    include a per-pixel error (uncertainty) image, a mask, and a PSF as
    ancillary data.

    The mask follows the usual convention: nonzero means the pixel is
    excluded from any comparison with a model. Masked pixels are still
    modelled, the mask only matters to whoever compares model and data.
    Pixels whose data is not finite are added to the mask automatically.

    **Args:**
    -  `data`: pixel values, two dimensional or flat with `ncols_nrows`.
    -  `mask`: nonzero for pixels to ignore, same shape as `data`.
    -  `error`: one sigma uncertainty per pixel, same shape as `data`.
    -  `psf`: a `PSFImage` or a 2D array, no larger than `data`.

    """

    def __init__(
        self,
        *args,
        mask=None,
        error=None,
        psf=None,
        ncols_nrows: Optional[Sequence[int]] = None,
        **kwargs,
    ):
        super().__init__(*args, ncols_nrows=ncols_nrows, **kwargs)
        if ncols_nrows is None:
            ncols_nrows = (self.n_columns, self.n_rows)
        self.mask = self._companion(mask, ncols_nrows, "mask")
        self.error = self._companion(error, ncols_nrows, "error")
        self.psf = psf

        bad = ~torch.isfinite(self.data)
        if torch.any(bad).item():
            config.logger.info(
                f"Masking {int(bad.sum().item())} non-finite pixels in {self.name or 'target image'}"
            )
            self.mask = self.fit_mask() | bad

        if self.has_error:
            usable = ~self.fit_mask()
            err = self.error[usable]
            if not torch.all(torch.isfinite(err) & (err > 0)).item():
                raise InvalidData("Error image must be positive and finite on all unmasked pixels")

    def _companion(self, values, ncols_nrows, name):
        if values is None:
            return None
        return pixel_grid(values, ncols_nrows, name=name)

    @property
    def has_mask(self) -> bool:
        return self.mask is not None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def has_psf(self) -> bool:
        return self.psf is not None

    @property
    def psf(self) -> Optional[PSFImage]:
        """The PSF for the `TargetImage`, used to convolve the model before
        comparing it with the data. None when the image has no PSF."""
        return self._psf

    @psf.setter
    def psf(self, psf):
        if psf is None:
            self._psf = None
            return
        if not isinstance(psf, PSFImage):
            psf = PSFImage(data=psf, name="psf")
        if psf.n_rows > self.n_rows or psf.n_columns > self.n_columns:
            raise InvalidData(
                f"PSF ({psf.n_columns} x {psf.n_rows}) is larger than the image ({self.n_columns} x {self.n_rows})"
            )
        self._psf = psf

    def fit_mask(self) -> torch.Tensor:
        """Boolean tensor, True where a pixel is excluded from comparison."""
        if self.mask is None:
            return torch.zeros(self.shape, dtype=torch.bool, device=self.data.device)
        return self.mask != 0

    def weight(self) -> torch.Tensor:
        """Per pixel weight, $1/\\sigma^2$ from the error image (ones when
        there is no error image) and zero for masked pixels."""
        if self.has_error:
            weight = 1 / self.error**2
        else:
            weight = torch.ones_like(self.data)
        return torch.where(self.fit_mask(), torch.zeros_like(weight), weight)

    def copy(self):
        return self.__class__(
            data=torch.clone(self.data),
            mask=None if self.mask is None else torch.clone(self.mask),
            error=None if self.error is None else torch.clone(self.error),
            psf=None if self.psf is None else self.psf.copy(),
            name=self.name,
        )
