"""
Purity-corrected variant allele fractions.

`fast_estimate_tumour_vaf` returns an estimate of the VAF in a pure tumour
sample from read counts observed in a host-contaminated sample.
"""

import logging
import numpy as np

from .params import SampleParams, ZERO_TOLERANCE, _DEFAULT_HOST_PLOIDY
from .contingency import estimate_contingency_table
from .utils import safe_divide, snap_to_zero, clamp_unit, TumourVAFResult

logger = logging.getLogger(__name__)


def estimate_tumour_vaf(
    total_readdepth,
    alt_readdepth,
    logr,
    host_total_readdepth,
    host_alt_readdepth,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> TumourVAFResult:
    """
    Corrected VAF together with the tumour read counts and the table behind it.

    Parameters are as for `fast_estimate_tumour_vaf`.

    Returns
    -------
    TumourVAFResult
    """
    params = SampleParams(purity, ploidy, host_ploidy)
    table = estimate_contingency_table(
        total_readdepth,
        alt_readdepth,
        logr,
        host_total_readdepth,
        host_alt_readdepth,
        params.purity,
        params.ploidy,
        params.host_ploidy,
    )

    alt_reads = snap_to_zero(table.tumour_alt, ZERO_TOLERANCE)
    total_reads = snap_to_zero(table.tumour_total, ZERO_TOLERANCE)
    vaf = clamp_unit(safe_divide(alt_reads, total_reads))

    logger.debug(
        "Corrected %d sites (purity=%s, ploidy=%s, host_ploidy=%s)",
        vaf.size,
        params.purity,
        params.ploidy,
        params.host_ploidy,
    )

    return TumourVAFResult(
        vaf=vaf,
        alt_reads=alt_reads,
        total_reads=total_reads,
        table=table,
        params=params,
    )


def estimate_tumour_read_counts(
    total_readdepth,
    alt_readdepth,
    logr,
    host_total_readdepth,
    host_alt_readdepth,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Alt and total read counts attributed to the tumour.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (alt_reads, total_reads), with values within machine tolerance of
        zero set to exactly 0.
    """
    result = estimate_tumour_vaf(
        total_readdepth,
        alt_readdepth,
        logr,
        host_total_readdepth,
        host_alt_readdepth,
        purity,
        ploidy,
        host_ploidy,
    )
    return result.alt_reads, result.total_reads


def fast_estimate_tumour_vaf(
    total_readdepth,
    alt_readdepth,
    logr,
    host_total_readdepth,
    host_alt_readdepth,
    purity: float,
    ploidy: float,
    host_ploidy: float = _DEFAULT_HOST_PLOIDY,
) -> np.ndarray:
    """
    Fast closed-form estimate of the pure-tumour VAF from a mixed sample.

    Parameters
    ----------
    total_readdepth : array-like
        Tumour sample total read depth.
    alt_readdepth : array-like
        Tumour sample alt read depth.
    logr : array-like
        Tumour sample logR.
    host_total_readdepth : array-like
        Host sample total read depth.
    host_alt_readdepth : array-like
        Host sample alt read depth.
    purity : float
        Estimated purity of the tumour sample.
    ploidy : float
        Estimated ploidy of the tumour sample.
    host_ploidy : float
        Estimated ploidy of the host sample (default 2).

    Returns
    -------
    np.ndarray
        VAF per site in [0, 1]; 0 where no tumour reads remain.
    """
    return estimate_tumour_vaf(
        total_readdepth,
        alt_readdepth,
        logr,
        host_total_readdepth,
        host_alt_readdepth,
        purity,
        ploidy,
        host_ploidy,
    ).vaf
