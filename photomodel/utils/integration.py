from typing import Callable, NamedTuple, Optional, Sequence

import numpy as np
from scipy.integrate import quad

from .. import config
from ..errors import SpecificationConflict

__all__ = ("QuadResult", "QuadOptions", "adaptive_quad")


class QuadResult(NamedTuple):
    """Outcome of one adaptive integration.

    `converged` is False whenever QUADPACK stopped without meeting the
    requested tolerance (usually because the subdivision budget ran out). In
    that case `value` is still the best available estimate and `abserr` its
    error bound.
    """

    value: float
    abserr: float
    converged: bool
    n_intervals: int
    message: str = ""


class QuadOptions:
    """Fixed tolerances for adaptive quadrature.

    **Args:**
    -  `epsabs`: absolute error tolerance passed to the integrator.
    -  `epsrel`: relative error tolerance passed to the integrator.
    -  `limit`: maximum number of subintervals (the subdivision budget).
    -  `accept_abserr`: a non-converged result is still accepted when its
       error estimate is at most this value.

    Any argument left as None takes the default from `photomodel.config`.
    """

    def __init__(
        self,
        epsabs: Optional[float] = None,
        epsrel: Optional[float] = None,
        limit: Optional[int] = None,
        accept_abserr: Optional[float] = None,
    ):
        self.epsabs = float(config.QUAD_EPSABS if epsabs is None else epsabs)
        self.epsrel = float(config.QUAD_EPSREL if epsrel is None else epsrel)
        self.limit = config.QUAD_LIMIT if limit is None else limit
        self.accept_abserr = float(
            config.QUAD_ACCEPT_ABSERR if accept_abserr is None else accept_abserr
        )

        if int(self.limit) != self.limit or self.limit < 1:
            raise SpecificationConflict(
                f"Integration subdivision limit must be a positive integer, not {self.limit}"
            )
        self.limit = int(self.limit)
        if self.epsabs < 0 or self.epsrel < 0 or self.accept_abserr < 0:
            raise SpecificationConflict("Integration tolerances must be non-negative")
        # QUADPACK refuses to run when it could never meet the tolerance
        if self.epsabs <= 0 and self.epsrel < max(50 * np.finfo(float).eps, 5e-29):
            raise SpecificationConflict(
                "Either epsabs must be positive or epsrel must be at least 50 machine epsilon"
            )

    def accepts(self, result: QuadResult) -> bool:
        return result.converged or result.abserr <= self.accept_abserr

    def to_dict(self) -> dict:
        return {
            "epsabs": self.epsabs,
            "epsrel": self.epsrel,
            "limit": self.limit,
            "accept_abserr": self.accept_abserr,
        }

    def __repr__(self):
        return (
            f"QuadOptions(epsabs={self.epsabs}, epsrel={self.epsrel}, "
            f"limit={self.limit}, accept_abserr={self.accept_abserr})"
        )


def adaptive_quad(
    integrand: Callable,
    a: float,
    b: float,
    args: tuple = (),
    epsabs: float = 1e-6,
    epsrel: float = 1e-6,
    limit: int = 1000,
    points: Optional[Sequence[float]] = None,
) -> QuadResult:
    """Adaptive Gauss-Kronrod integration of `integrand(s, *args)` over
    `[a, b]`, either bound may be infinite.

    `points` lists locations of cusps or peaks inside the interval; those
    outside the open interval are dropped. They are only usable on finite
    intervals.

    Returns a `QuadResult`. A failure to converge is reported through the
    `converged` flag and never raised here, the caller decides what to do
    with the degraded estimate.
    """
    if points is not None:
        points = [p for p in points if a < p < b]
        # QUADPACK needs room for at least one subinterval per break point
        if len(points) == 0 or limit < len(points) + 2:
            points = None
    result = quad(
        integrand,
        a,
        b,
        args=args,
        full_output=1,
        epsabs=epsabs,
        epsrel=epsrel,
        limit=limit,
        points=points,
    )
    # with full_output a 4th element (the QUADPACK message) is only returned on trouble
    value, abserr, info = result[:3]
    converged = len(result) == 3
    message = "" if converged else str(result[3])
    return QuadResult(float(value), float(abserr), converged, int(info.get("last", 0)), message)
