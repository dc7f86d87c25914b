"""
Probability that a read in a mixed tumour/host sample came from each source.

Expected proportion of tumour reads at a site, with Nt the tumour copy
number, Nh the host copy number and p the purity:

    P(read = tumour) = p * Nt / (p * Nt + (1 - p) * Nh)            (1)

The tumour copy number follows from the observed depth ratio R = 2^logR
and the tumour and host ploidies ψt, ψh:

    Nt = (R * Nh * (p*ψt + (1-p)*ψh) - ψh * (1-p) * Nh) / (p * ψh)   (2)

so that

    p * Nt               = (R * Nh * (p*ψt + (1-p)*ψh) - ψh*(1-p)*Nh) / ψh
    p * Nt + (1 - p) * Nh = R * Nh * (p*ψt + (1-p)*ψh) / ψh

and substituting into (1), Nh cancels:

    P(read = tumour) = (D - ψh * (1-p)) / D,  D = R * (p*ψt + (1-p)*ψh)
"""

import numpy as np

from .params import SampleParams, _DEFAULT_HOST_PLOIDY
from .utils import clamp_unit


def prob_read_came_from_tumour(
    logr,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> np.ndarray:
    """
    Probability that a read at each site originated from tumour cells.

    Parameters
    ----------
    logr : array-like
        Tumour sample logR (log2 depth ratio) per site.
    purity : float
        Tumour purity, in [0, 1].
    ploidy : float
        Tumour ploidy (> 0).
    host_ploidy : float
        Host ploidy (> 0), almost always 2.

    Returns
    -------
    np.ndarray
        Probabilities clamped to [0, 1]. A zero denominator gives a bound
        or NaN, never an exception.

    Raises
    ------
    ValueError
        If purity or either ploidy is out of range.
    """
    params = SampleParams(purity, ploidy, host_ploidy)
    logr = np.asarray(logr, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        denom = np.exp2(logr) * (
            params.purity * params.ploidy
            + params.host_fraction * params.host_ploidy
        )
        p = (denom - params.host_ploidy * params.host_fraction) / denom
    return clamp_unit(p)


def prob_read_came_from_host(
    logr,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> np.ndarray:
    """Probability that a read came from host cells. See `prob_read_came_from_tumour`."""
    return 1.0 - prob_read_came_from_tumour(logr, purity, ploidy, host_ploidy)
