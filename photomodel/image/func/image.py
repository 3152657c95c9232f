import torch

from ..window import Window


def window_center_meshgrid(
    window: Window, dtype: torch.dtype, device: torch.device
) -> tuple[torch.Tensor, torch.Tensor]:
    """Coordinates of the pixel centres in `window`, each of shape
    `window.shape` (rows, columns). Pixel centres sit on integer coordinates."""
    i = torch.arange(window.i_low, window.i_high, dtype=dtype, device=device)
    j = torch.arange(window.j_low, window.j_high, dtype=dtype, device=device)
    y, x = torch.meshgrid(j, i, indexing="ij")
    return x, y


def subpixel_offsets(factor: int, dtype: torch.dtype, device: torch.device) -> torch.Tensor:
    """Offsets of the sub-pixel centres from the pixel centre along one axis."""
    return (torch.arange(factor, dtype=dtype, device=device) + 0.5) / factor - 0.5


def oversampled_meshgrid(
    window: Window, factor: int, dtype: torch.dtype, device: torch.device
) -> tuple[torch.Tensor, torch.Tensor]:
    """Coordinates of every sub-pixel centre in `window` laid out as an image
    of shape `(rows * factor, columns * factor)`."""
    d = subpixel_offsets(factor, dtype, device)
    i = torch.arange(window.i_low, window.i_high, dtype=dtype, device=device)
    j = torch.arange(window.j_low, window.j_high, dtype=dtype, device=device)
    i = (i[:, None] + d).flatten()
    j = (j[:, None] + d).flatten()
    y, x = torch.meshgrid(j, i, indexing="ij")
    return x, y


def reduce(Z: torch.Tensor, factor: int) -> torch.Tensor:
    """Box average an oversampled image by `factor` along both axes."""
    if factor == 1:
        return Z
    rows, cols = Z.shape[0] // factor, Z.shape[1] // factor
    return Z.reshape(rows, factor, cols, factor).mean(dim=(1, 3))
