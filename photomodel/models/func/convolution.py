import torch


def convolve(image: torch.Tensor, psf: torch.Tensor) -> torch.Tensor:
    """FFT convolution of `image` with a `psf` centred on pixel
    `(rows // 2, columns // 2)`.

    The convolution is circular, so the outermost `psf.shape // 2` pixels on
    each side of the result mix with the opposite edge. Pad the image by at
    least that much and crop afterwards to get a linear convolution.
    """
    image_fft = torch.fft.rfft2(image, s=image.shape)
    psf_fft = torch.fft.rfft2(psf, s=image.shape)

    convolved = torch.fft.irfft2(image_fft * psf_fft, s=image.shape)
    return torch.roll(
        convolved,
        shifts=(-(psf.shape[0] // 2), -(psf.shape[1] // 2)),
        dims=(0, 1),
    )
