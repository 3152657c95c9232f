import torch


def gaussian(R: torch.Tensor, sigma: float, I0: float) -> torch.Tensor:
    """Gaussian 1d profile function, specifically designed for pytorch
    operations.

    **Args:**
    -  `R`: Radii tensor at which to evaluate the gaussian function
    -  `sigma`: Standard deviation of the gaussian in the same units as R
    -  `I0`: Central intensity
    """
    return I0 * torch.exp(-0.5 * (R / sigma) ** 2)
