from typing import Optional, Sequence, Tuple

import torch

from .. import config
from ..errors import InvalidData
from .window import Window
from . import func

__all__ = ("Image", "pixel_grid")


def pixel_grid(
    values, ncols_nrows: Optional[Sequence[int]] = None, name: str = "data"
) -> torch.Tensor:
    """Convert pixel values into a `(rows, columns)` tensor.

    `values` may already be two dimensional, or it may be a flat row-major
    buffer in which case `ncols_nrows` gives its (columns, rows). Float64
    numpy arrays on the CPU are wrapped without copying, so the returned
    tensor is a view on the caller's buffer.
    """
    grid = torch.as_tensor(values, dtype=config.DTYPE, device=config.DEVICE)
    if ncols_nrows is not None:
        ncols, nrows = (int(n) for n in ncols_nrows)
        if grid.dim() == 1:
            if grid.numel() != ncols * nrows:
                raise InvalidData(
                    f"{name} has {grid.numel()} pixels, expected {ncols} x {nrows} = {ncols * nrows}"
                )
            grid = grid.reshape(nrows, ncols)
        elif tuple(grid.shape) != (nrows, ncols):
            raise InvalidData(
                f"{name} has shape {tuple(grid.shape)}, expected (rows, columns) = {(nrows, ncols)}"
            )
    if grid.dim() != 2:
        raise InvalidData(f"{name} must be a two dimensional pixel grid, got {grid.dim()} dimensions")
    return grid


class Image:
    """A rectangular grid of pixel values.

    Data is stored as a `(rows, columns)` tensor. The pixel in row `j` and
    column `i` has its centre at sky coordinate `(x, y) = (i, j)`, so the
    first pixel in memory is the lower-left pixel of the image.
    """

    def __init__(
        self,
        *,
        data=None,
        ncols_nrows: Optional[Sequence[int]] = None,
        name: Optional[str] = None,
    ) -> None:
        self.name = name
        self._set_data(data, ncols_nrows)

    def _set_data(self, data, ncols_nrows=None):
        if data is None:
            self._data = torch.empty((0, 0), dtype=config.DTYPE, device=config.DEVICE)
        else:
            self._data = pixel_grid(data, ncols_nrows, name=self.name or "data")

    @property
    def data(self) -> torch.Tensor:
        """The image data, which is a tensor of pixel values."""
        return self._data

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, columns)"""
        return tuple(self.data.shape)

    @property
    def n_columns(self) -> int:
        return self.data.shape[1]

    @property
    def n_rows(self) -> int:
        return self.data.shape[0]

    @property
    def window(self) -> Window:
        return Window((0, self.n_columns, 0, self.n_rows))

    def pixel_center_meshgrid(self, window: Optional[Window] = None):
        """Get the (x, y) coordinates of the pixel centres in the image, or
        in a window of the image."""
        if window is None:
            window = self.window
        return func.window_center_meshgrid(window, config.DTYPE, config.DEVICE)

    def copy(self):
        """Produce a copy of this image which owns its own data."""
        return self.__class__(data=torch.clone(self.data), name=self.name)

    def __getitem__(self, window: Window) -> torch.Tensor:
        return self.data[window.slices]

    def __str__(self):
        return f"{self.__class__.__name__}({self.name}, {self.n_columns} x {self.n_rows})"
