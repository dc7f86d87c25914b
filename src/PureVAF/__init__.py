"""
Purity-corrected variant allele fractions for host-contaminated tumour samples.

Estimates, per variant site, the allele fraction a pure tumour sample would
show, by deconvolving the mixed-sample read counts into host-derived and
tumour-derived reads with a closed-form constrained least-squares solution.
"""

from .params import (
    SampleParams,
    ZERO_TOLERANCE,
)

from .utils import (
    # Total numeric helpers
    safe_divide,
    snap_to_zero,
    clamp_unit,
    # Data classes
    ContingencyTable,
    TumourVAFResult,
)

from .probability import (
    prob_read_came_from_tumour,
    prob_read_came_from_host,
)

from .contingency import (
    host_vaf,
    estimate_contingency_table,
)

from .correction import (
    fast_estimate_tumour_vaf,
    estimate_tumour_vaf,
    estimate_tumour_read_counts,
)

__all__ = [
    # Main entry points
    "fast_estimate_tumour_vaf",
    "estimate_tumour_vaf",
    "estimate_tumour_read_counts",
    # Building blocks
    "estimate_contingency_table",
    "prob_read_came_from_tumour",
    "prob_read_came_from_host",
    "host_vaf",
    # Data classes
    "SampleParams",
    "ContingencyTable",
    "TumourVAFResult",
    # Utilities
    "safe_divide",
    "snap_to_zero",
    "clamp_unit",
    "ZERO_TOLERANCE",
]

__version__ = "0.1.0"
