from typing import Union, Tuple, List

import numpy as np

from ..errors import InvalidWindow, SpecificationConflict

__all__ = ("Window", "OversampleRegion")


class Window:
    """Half-open rectangle of pixel indices on an image.

    `i` runs along the columns (the x axis) and `j` along the rows (the y
    axis), so the window covers pixels `i_low <= i < i_high` and
    `j_low <= j < j_high`. Pixel grids are stored row-major, use `slices` to
    index them.
    """

    def __init__(
        self,
        window: Union[Tuple[int, int, int, int], Tuple[Tuple[int, int], Tuple[int, int]]],
    ):
        self.extent = window

    @property
    def shape(self):
        """Shape of the array covered by the window, (rows, columns)."""
        return (self.j_high - self.j_low, self.i_high - self.i_low)

    @property
    def extent(self):
        return (self.i_low, self.i_high, self.j_low, self.j_high)

    @extent.setter
    def extent(
        self, value: Union[Tuple[int, int, int, int], Tuple[Tuple[int, int], Tuple[int, int]]]
    ):
        if len(value) == 4:
            extent = value
        elif len(value) == 2:
            extent = (value[0][0], value[1][0], value[0][1], value[1][1])
        else:
            raise InvalidWindow(
                "Extent must be formatted as (i_low, i_high, j_low, j_high) or ((i_low, j_low), (i_high, j_high))"
            )
        for e in extent:
            if int(e) != e:
                raise InvalidWindow(f"Window extent must be integer pixel indices, not {extent}")
        self.i_low, self.i_high, self.j_low, self.j_high = (int(e) for e in extent)
        if self.i_high < self.i_low or self.j_high < self.j_low:
            raise InvalidWindow(f"Window has negative size: {self}")

    @property
    def slices(self) -> Tuple[slice, slice]:
        return slice(self.j_low, self.j_high), slice(self.i_low, self.i_high)

    @property
    def n_pixels(self) -> int:
        return int(np.prod(self.shape))

    def is_empty(self) -> bool:
        return self.n_pixels == 0

    def within(self, shape: Tuple[int, int]) -> bool:
        """True when the window lies inside an array of the given (rows, columns) shape."""
        return (
            0 <= self.i_low
            and self.i_high <= shape[1]
            and 0 <= self.j_low
            and self.j_high <= shape[0]
        )

    def chunk(self, chunk_size: int) -> List["Window"]:
        """Tile the window into sub-windows of about `chunk_size`
        pixels each. The tiles cover the window exactly once."""
        if self.is_empty():
            return []
        # number of pixels on each axis
        px = self.i_high - self.i_low
        py = self.j_high - self.j_low
        # total number of chunks desired
        chunk_tot = int(np.ceil((px * py) / chunk_size))
        # number of chunks on each axis
        cx = int(np.ceil(np.sqrt(chunk_tot * px / py)))
        cy = int(np.ceil(chunk_tot / cx))
        # number of pixels on each axis per chunk
        stepx = int(np.ceil(px / cx))
        stepy = int(np.ceil(py / cy))
        windows = []
        for j in range(self.j_low, self.j_high, stepy):
            for i in range(self.i_low, self.i_high, stepx):
                i_high = min(i + stepx, self.i_high)
                j_high = min(j + stepy, self.j_high)
                windows.append(Window((i, i_high, j, j_high)))
        return windows

    def pad(self, pad: int):
        self.i_low -= pad
        self.i_high += pad
        self.j_low -= pad
        self.j_high += pad

    def copy(self):
        return Window(self.extent)

    def __or__(self, other: "Window"):
        if not isinstance(other, Window):
            raise TypeError(f"Cannot combine Window with {type(other)}")
        return Window(
            (
                min(self.i_low, other.i_low),
                max(self.i_high, other.i_high),
                min(self.j_low, other.j_low),
                max(self.j_high, other.j_high),
            )
        )

    def __and__(self, other: "Window"):
        if not isinstance(other, Window):
            raise TypeError(f"Cannot intersect Window with {type(other)}")
        if (
            self.i_high <= other.i_low
            or self.i_low >= other.i_high
            or self.j_high <= other.j_low
            or self.j_low >= other.j_high
        ):
            return Window((0, 0, 0, 0))
        return Window(
            (
                max(self.i_low, other.i_low),
                min(self.i_high, other.i_high),
                max(self.j_low, other.j_low),
                min(self.j_high, other.j_high),
            )
        )

    def __eq__(self, other):
        return isinstance(other, Window) and self.extent == other.extent

    def __str__(self):
        return f"Window({self.i_low}, {self.i_high}, {self.j_low}, {self.j_high})"

    __repr__ = __str__


class OversampleRegion:
    """Part of an image evaluated on a finer grid.

    Every pixel in `window` is split into `factor x factor` sub-pixels; the
    model is evaluated at the sub-pixel centres and averaged back down.

    **Args:**
    -  `window`: a `Window` or an extent tuple accepted by `Window`.
    -  `factor`: integer oversampling factor, at least 1.
    """

    def __init__(self, window, factor: int):
        self.window = window if isinstance(window, Window) else Window(window)
        if isinstance(factor, bool) or int(factor) != factor or factor < 1:
            raise SpecificationConflict(
                f"Oversampling factor must be an integer of at least 1, not {factor}"
            )
        self.factor = int(factor)

    def check_within(self, shape: Tuple[int, int]):
        if self.window.is_empty():
            raise InvalidWindow(f"Oversample region {self.window} contains no pixels")
        if not self.window.within(shape):
            raise InvalidWindow(
                f"Oversample region {self.window} extends outside the {shape[1]}x{shape[0]} (columns x rows) image"
            )

    def __str__(self):
        return f"OversampleRegion({self.window}, factor={self.factor})"
