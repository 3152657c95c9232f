import torch


def exponential(R: torch.Tensor, h: float, I0: float) -> torch.Tensor:
    """Exponential 1d profile, $I(R) = I_0 e^{-R/h}$.

    **Args:**
    -  `R`: Radius tensor at which to evaluate the exponential function
    -  `h`: Scale length in the same units as R
    -  `I0`: Central intensity
    """
    return I0 * torch.exp(-R / h)
