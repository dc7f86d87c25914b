from dataclasses import dataclass
from typing import Mapping
import numpy as np


_DEFAULT_HOST_PLOIDY = 2.0

# Magnitude below which corrected read counts are treated as exactly zero.
ZERO_TOLERANCE = float(np.sqrt(np.finfo(np.float64).eps))


@dataclass
class SampleParams:
    """
    Sample-level context shared by every site in one call.
    Owns validation of purity and ploidy estimates.
    """

    purity: float
    ploidy: float
    host_ploidy: float = _DEFAULT_HOST_PLOIDY

    def __post_init__(self):
        self.purity = np.asarray(self.purity, dtype=float)
        self.ploidy = np.asarray(self.ploidy, dtype=float)
        self.host_ploidy = np.asarray(self.host_ploidy, dtype=float)
        if self.purity.ndim == 0:
            self.purity = float(self.purity)
        if self.ploidy.ndim == 0:
            self.ploidy = float(self.ploidy)
        if self.host_ploidy.ndim == 0:
            self.host_ploidy = float(self.host_ploidy)

        if not np.all((self.purity >= 0) & (self.purity <= 1)):
            raise ValueError(f"purity must be in [0, 1], got {self.purity}")
        if not np.all(self.ploidy > 0):
            raise ValueError(f"ploidy must be positive, got {self.ploidy}")
        if not np.all(self.host_ploidy > 0):
            raise ValueError(
                f"host_ploidy must be positive, got {self.host_ploidy}"
            )

    @classmethod
    def from_mapping(cls, values: Mapping) -> "SampleParams":
        """Build from a dict-like, e.g. a parsed purity/ploidy estimate."""
        missing = [k for k in ("purity", "ploidy") if k not in values]
        if missing:
            raise ValueError(f"missing sample parameters: {', '.join(missing)}")
        return cls(
            purity=values["purity"],
            ploidy=values["ploidy"],
            host_ploidy=values.get("host_ploidy", _DEFAULT_HOST_PLOIDY),
        )

    @property
    def host_fraction(self) -> float:
        """Fraction of cells in the sample that are host cells."""
        return 1.0 - self.purity
