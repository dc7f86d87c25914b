from dataclasses import dataclass, field
import logging
import numpy as np

from .params import SampleParams, ZERO_TOLERANCE

logger = logging.getLogger(__name__)


def safe_divide(numerator, denominator) -> np.ndarray:
    """
    Elementwise division that is total over the reals.

    Returns 0 wherever the denominator is zero or the quotient is NaN
    (0/0, NaN inputs). Infinite quotients are not produced by a zero
    denominator and are left for the caller to clamp.

    Parameters
    ----------
    numerator : array-like
    denominator : array-like

    Returns
    -------
    np.ndarray
        Quotient broadcast to the common shape of the inputs.
    """
    numerator = np.asarray(numerator, dtype=float)
    denominator = np.asarray(denominator, dtype=float)
    shape = np.broadcast_shapes(numerator.shape, denominator.shape)
    out = np.zeros(shape, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        np.divide(numerator, denominator, out=out, where=denominator != 0)
    out[np.isnan(out)] = 0.0
    return out


def snap_to_zero(values, tol: float = ZERO_TOLERANCE) -> np.ndarray:
    """Replace values with magnitude below `tol` by exactly 0."""
    values = np.asarray(values, dtype=float)
    return np.where(np.abs(values) < tol, 0.0, values)


def clamp_unit(values) -> np.ndarray:
    """Clamp to [0, 1]; NaN passes through unchanged."""
    return np.clip(np.asarray(values, dtype=float), 0.0, 1.0)


def as_site_vectors(**vectors) -> list[np.ndarray]:
    """
    Coerce per-site inputs to float64 arrays of one common shape.

    Scalars broadcast against the site vectors. Vectors of different
    lengths are a caller error.
    """
    arrays = [np.atleast_1d(np.asarray(v, dtype=float)) for v in vectors.values()]
    try:
        shape = np.broadcast_shapes(*(a.shape for a in arrays))
    except ValueError:
        lengths = ", ".join(
            f"{name}={a.shape}" for name, a in zip(vectors, arrays)
        )
        raise ValueError(f"site vectors must have equal length ({lengths})")
    return [np.broadcast_to(a, shape).astype(float) for a in arrays]


def check_read_depths(total: np.ndarray, alt: np.ndarray, label: str) -> None:
    """Log a warning when read counts are negative or alt exceeds total."""
    n_negative = int(np.sum((total < 0) | (alt < 0)))
    n_excess = int(np.sum(alt > total))
    if n_negative:
        logger.warning("%s: %d sites with negative read depth", label, n_negative)
    if n_excess:
        logger.warning(
            "%s: %d sites with alt depth greater than total depth",
            label,
            n_excess,
        )


@dataclass
class ContingencyTable:
    """
    Deconvolved read-count contingency table, one column per site.

    Layout (T, A observed; K, L estimated):

                |  Ref          |  Alt  |
        --------|---------------|-------|-----
         Host   |  K - L        |  L    |  K
         Tumour |  T-K - (A-L)  |  A-L  |  T-K
        --------|---------------|-------|-----
                |  T - A        |  A    |  T
    """

    # Estimated host reads and host alt reads
    K: np.ndarray
    L: np.ndarray

    # Observed margins
    total: np.ndarray = field(repr=False)
    alt: np.ndarray = field(repr=False)

    # Which estimate each site ended on
    branch: np.ndarray = field(repr=False)

    UNCONSTRAINED: int = 0
    HOST_ALT_BOUND: int = 1
    TUMOUR_VAF_BOUND: int = 2
    BRANCH_NAMES: tuple = ("unconstrained", "host_alt_bound", "tumour_vaf_bound")

    def __iter__(self):
        return iter((self.K, self.L))

    @property
    def n_sites(self) -> int:
        return int(self.K.size)

    @property
    def host_total(self) -> np.ndarray:
        return self.K

    @property
    def host_alt(self) -> np.ndarray:
        return self.L

    @property
    def host_ref(self) -> np.ndarray:
        return self.K - self.L

    @property
    def tumour_total(self) -> np.ndarray:
        return self.total - self.K

    @property
    def tumour_alt(self) -> np.ndarray:
        return self.alt - self.L

    @property
    def tumour_ref(self) -> np.ndarray:
        return (self.total - self.K) - (self.alt - self.L)

    @property
    def ref(self) -> np.ndarray:
        return self.total - self.alt

    def satisfies_constraints(self, tol: float = ZERO_TOLERANCE) -> np.ndarray:
        """
        Per-site mask of whether every cell is non-negative, up to `tol`.

        Checks 0 <= L <= A, 0 <= K <= T, K >= L and (T-K) >= (A-L).
        """
        return (
            (self.L >= -tol)
            & (self.tumour_alt >= -tol)
            & (self.K >= -tol)
            & (self.tumour_total >= -tol)
            & (self.host_ref >= -tol)
            & (self.tumour_ref >= -tol)
        )

    def branch_counts(self) -> dict:
        """Number of sites that ended on each estimate."""
        return {
            name: int(np.sum(self.branch == code))
            for code, name in enumerate(self.BRANCH_NAMES)
        }


@dataclass
class TumourVAFResult:
    """
    Purity-corrected allele fractions with the intermediate read counts.
    """

    # Corrected VAF in [0, 1]
    vaf: np.ndarray

    # Tumour-derived reads after removing the host share
    alt_reads: np.ndarray
    total_reads: np.ndarray

    table: ContingencyTable = field(repr=False)
    params: SampleParams = field(repr=False)

    @property
    def n_sites(self) -> int:
        return int(self.vaf.size)

    def branch_counts(self) -> dict:
        return self.table.branch_counts()
