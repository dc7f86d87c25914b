"""
Closed-form deconvolution of the mixed-sample read-count contingency table.

Only two cells of the 2x2 (source x allele) table are free once the observed
margins T and A are fixed:

    K : reads that came from the host
    L : host reads that carry the alt allele

The unconstrained estimate is K = T * P(host), L = K * P(alt | host), with
P(alt | host) taken as the host sample's VAF. Where that estimate leaves a
negative cell, it is replaced by the least-squares solution of

    f(K, L) = (K - T*P(host))^2 + (L - K*P(alt | host))^2

on the violated boundary, obtained with Lagrange multipliers:

    g1: A - L - a^2 = 0                  (host alt reads cannot exceed A)
    g2: (T - K) - (A - L) - b^2 = 0      (tumour ref reads cannot be negative)
"""

import logging
import numpy as np

from .params import SampleParams, _DEFAULT_HOST_PLOIDY
from .probability import prob_read_came_from_host
from .utils import (
    safe_divide,
    as_site_vectors,
    check_read_depths,
    ContingencyTable,
)

logger = logging.getLogger(__name__)


def host_vaf(host_total_readdepth, host_alt_readdepth) -> np.ndarray:
    """Host sample VAF, 0 at sites without host coverage."""
    return safe_divide(host_alt_readdepth, host_total_readdepth)


def _solve_host_alt_bound(total, alt, p_host, p_alt_given_host):
    # Minimiser of f with L = A
    K = (alt * p_alt_given_host + total * p_host) / (p_alt_given_host**2 + 1)
    return K, alt.copy()


def _solve_tumour_vaf_bound(total, alt, p_host, p_alt_given_host):
    # Minimiser of f with (T - K) = (A - L); denom >= 1 on [0, 1]
    h = p_alt_given_host
    denom = h**2 - 2 * h + 2
    K = (alt * (h - 1) + total * (p_host - h + 1)) / denom
    L = (alt * (h**2 - h + 1) + total * (p_host - h**2 + h - 1)) / denom
    return K, L


def estimate_contingency_table(
    total_readdepth,
    alt_readdepth,
    logr,
    host_total_readdepth,
    host_alt_readdepth,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> ContingencyTable:
    """
    Estimate host reads (K) and host alt reads (L) at every site.

    Parameters
    ----------
    total_readdepth : array-like
        Mixed (tumour) sample total read depth.
    alt_readdepth : array-like
        Mixed sample alt read depth.
    logr : array-like
        Mixed sample logR.
    host_total_readdepth : array-like
        Host sample total read depth.
    host_alt_readdepth : array-like
        Host sample alt read depth.
    purity : float
        Estimated purity of the mixed sample, in [0, 1].
    ploidy : float
        Estimated tumour ploidy (> 0).
    host_ploidy : float
        Host ploidy (> 0).

    Returns
    -------
    ContingencyTable
        Estimated K and L with the observed margins. Unpacks as (K, L).

    Raises
    ------
    ValueError
        If the sample parameters are out of range or the site vectors
        differ in length.
    """
    params = SampleParams(purity, ploidy, host_ploidy)
    T, A, logr, host_T, host_A = as_site_vectors(
        total_readdepth=total_readdepth,
        alt_readdepth=alt_readdepth,
        logr=logr,
        host_total_readdepth=host_total_readdepth,
        host_alt_readdepth=host_alt_readdepth,
    )
    check_read_depths(T, A, "mixed sample")
    check_read_depths(host_T, host_A, "host sample")

    p_host = prob_read_came_from_host(
        logr, params.purity, params.ploidy, params.host_ploidy
    )
    p_host = np.broadcast_to(p_host, T.shape)
    p_alt_given_host = host_vaf(host_T, host_A)

    # Unconstrained estimate
    K = T * p_host
    L = K * p_alt_given_host
    branch = np.full(T.shape, ContingencyTable.UNCONSTRAINED, dtype=int)

    # Too many alt reads attributed to the host
    ix = L > A
    K[ix], L[ix] = _solve_host_alt_bound(
        T[ix], A[ix], p_host[ix], p_alt_given_host[ix]
    )
    branch[ix] = ContingencyTable.HOST_ALT_BOUND

    # Tumour VAF outside [0, 1]; only 0/0 counts as undefined
    with np.errstate(divide="ignore", invalid="ignore"):
        tumour_vaf = (A - L) / (T - K)
    iy = (T > 0) & (
        (tumour_vaf > 1) | (tumour_vaf < 0) | np.isnan(tumour_vaf)
    )
    K[iy], L[iy] = _solve_tumour_vaf_bound(
        T[iy], A[iy], p_host[iy], p_alt_given_host[iy]
    )
    branch[iy] = ContingencyTable.TUMOUR_VAF_BOUND

    logger.debug(
        "Contingency table for %d sites: %d host-alt bound, %d tumour-VAF bound",
        T.size,
        int(ix.sum()),
        int(iy.sum()),
    )

    return ContingencyTable(K=K, L=L, total=T, alt=A, branch=branch)
