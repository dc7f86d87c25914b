import numpy as np
import pytest

from PureVAF.correction import (
    fast_estimate_tumour_vaf,
    estimate_tumour_vaf,
    estimate_tumour_read_counts,
)
from PureVAF.utils import snap_to_zero, clamp_unit, TumourVAFResult


@pytest.fixture
def mixed_sites():
    """Random but valid sites with host coverage gaps."""
    rng = np.random.default_rng(42)
    n = 1000
    total = rng.integers(0, 300, n)
    alt = rng.binomial(total, rng.uniform(0, 1, n))
    host_total = rng.integers(0, 100, n)
    host_total[::10] = 0
    host_alt = rng.binomial(host_total, rng.uniform(0, 1, n))
    logr = rng.normal(0, 0.8, n)
    return total, alt, logr, host_total, host_alt


class TestFastEstimateTumourVaf:
    """Tests for fast_estimate_tumour_vaf function."""

    def test_basic_scenario(self):
        """Test 30/100 reads at purity 0.6 with a hom-ref host."""
        vaf = fast_estimate_tumour_vaf(
            [100], [30], [0.0], [100], [0], purity=0.6, ploidy=2.0, host_ploidy=2.0
        )
        np.testing.assert_allclose(vaf, [0.5])

    def test_host_alt_bound_scenario(self):
        """Test a het host absorbing all alt reads leaves tumour VAF 0."""
        result = estimate_tumour_vaf(
            [100], [5], [0.0], [100], [50], purity=0.2, ploidy=2.0
        )

        assert result.table.L[0] == 5.0
        assert result.alt_reads[0] == 0.0
        np.testing.assert_allclose(result.total_reads, [34.0])
        assert result.vaf[0] == 0.0

    def test_tumour_vaf_bound_scenario(self):
        """Test an over-full tumour VAF is repaired into [0, 1]."""
        vaf = fast_estimate_tumour_vaf(
            [100], [90], [0.0], [100], [0], purity=0.6, ploidy=2.0
        )
        np.testing.assert_allclose(vaf, [1.0])

    def test_bounded(self, mixed_sites):
        """Test every VAF lies in [0, 1] across purities and ploidies."""
        for purity in (0.0, 0.05, 0.3, 0.7, 1.0):
            for ploidy in (1.8, 2.0, 3.5):
                vaf = fast_estimate_tumour_vaf(*mixed_sites, purity, ploidy)
                assert vaf.shape == (1000,)
                assert np.all(np.isfinite(vaf))
                assert np.all((vaf >= 0) & (vaf <= 1))

    def test_zero_depth(self):
        """Test sites without reads give VAF exactly 0."""
        vaf = fast_estimate_tumour_vaf(
            [0, 0, 50], [0, 0, 10], [0.0, 1.5, 0.0], [30, 0, 30], [15, 0, 0],
            purity=0.5, ploidy=2.0,
        )
        assert vaf[0] == 0.0
        assert vaf[1] == 0.0

    def test_zero_host_depth(self):
        """Test missing host coverage treats the host as hom-ref."""
        no_host = fast_estimate_tumour_vaf(
            [100], [30], [0.0], [0], [0], purity=0.6, ploidy=2.0
        )
        hom_ref_host = fast_estimate_tumour_vaf(
            [100], [30], [0.0], [100], [0], purity=0.6, ploidy=2.0
        )
        np.testing.assert_allclose(no_host, hom_ref_host)

    def test_pure_tumour_gives_raw_vaf(self, mixed_sites):
        """Test purity 1 leaves the observed VAF unchanged."""
        total, alt, logr, host_total, host_alt = mixed_sites
        vaf = fast_estimate_tumour_vaf(
            total, alt, logr, host_total, host_alt, purity=1.0, ploidy=2.6
        )

        covered = total > 0
        np.testing.assert_allclose(vaf[covered], alt[covered] / total[covered])
        np.testing.assert_array_equal(vaf[~covered], 0.0)

    def test_pure_host_gives_zero(self):
        """Test all reads attributed to a host matching the observed VAF."""
        vaf = fast_estimate_tumour_vaf(
            [100, 80], [30, 40], [0.0, -0.5], [100, 60], [30, 30],
            purity=0.0, ploidy=2.0,
        )
        np.testing.assert_array_equal(vaf, [0.0, 0.0])

    def test_snap_and_clamp_idempotent(self, mixed_sites):
        """Test re-applying the zero snap and clamp changes nothing."""
        result = estimate_tumour_vaf(*mixed_sites, purity=0.4, ploidy=2.2)
        np.testing.assert_array_equal(snap_to_zero(result.alt_reads), result.alt_reads)
        np.testing.assert_array_equal(
            snap_to_zero(result.total_reads), result.total_reads
        )
        np.testing.assert_array_equal(clamp_unit(result.vaf), result.vaf)

    def test_deterministic(self, mixed_sites):
        """Test identical inputs give identical outputs."""
        vaf1 = fast_estimate_tumour_vaf(*mixed_sites, purity=0.4, ploidy=2.2)
        vaf2 = fast_estimate_tumour_vaf(*mixed_sites, purity=0.4, ploidy=2.2)
        np.testing.assert_array_equal(vaf1, vaf2)

    def test_host_ploidy_is_used(self):
        """Test a non-default host ploidy reaches the deconvolution."""
        # p_tumour = (2.8 - 1.6) / 2.8; VAF = 30 / (100 * p_tumour)
        vaf = fast_estimate_tumour_vaf(
            [100], [30], [0.0], [100], [0], purity=0.6, ploidy=2.0, host_ploidy=4.0
        )
        np.testing.assert_allclose(vaf, [0.7])

    def test_nan_logr_gives_zero(self):
        """Test an undefined copy-number signal still yields a bounded VAF."""
        vaf = fast_estimate_tumour_vaf(
            [100, 100], [30, 30], [np.nan, 0.0], [100, 100], [0, 0],
            purity=0.6, ploidy=2.0,
        )
        assert vaf[0] == 0.0
        np.testing.assert_allclose(vaf[1], 0.5)

    def test_accepts_lists_and_scalar_logr(self):
        """Test plain lists and a scalar logR are accepted."""
        vaf = fast_estimate_tumour_vaf(
            [100, 100], [30, 60], 0.0, [100, 100], [0, 0], purity=0.6, ploidy=2.0
        )
        assert isinstance(vaf, np.ndarray)
        np.testing.assert_allclose(vaf, [0.5, 1.0])

    @pytest.mark.parametrize(
        "purity, ploidy, host_ploidy",
        [(1.2, 2.0, 2.0), (-0.2, 2.0, 2.0), (0.5, -1.0, 2.0), (0.5, 2.0, 0.0)],
    )
    def test_invalid_parameters(self, purity, ploidy, host_ploidy):
        """Test invalid sample parameters are rejected."""
        with pytest.raises(ValueError):
            fast_estimate_tumour_vaf(
                [100], [30], [0.0], [100], [0], purity, ploidy, host_ploidy
            )


class TestEstimateTumourVaf:
    """Tests for estimate_tumour_vaf and estimate_tumour_read_counts."""

    def test_result_fields(self):
        """Test the full result carries counts, table and parameters."""
        result = estimate_tumour_vaf(
            [100, 100, 100], [30, 5, 90], [0.0, 0.0, 0.0], [100, 100, 100],
            [0, 80, 0], purity=0.6, ploidy=2.0,
        )

        assert isinstance(result, TumourVAFResult)
        assert result.n_sites == 3
        assert result.params.purity == 0.6
        np.testing.assert_allclose(result.alt_reads[0], 30.0)
        np.testing.assert_allclose(result.total_reads[0], 60.0)
        np.testing.assert_allclose(
            result.vaf, fast_estimate_tumour_vaf(
                [100, 100, 100], [30, 5, 90], [0.0, 0.0, 0.0], [100, 100, 100],
                [0, 80, 0], purity=0.6, ploidy=2.0,
            )
        )

    def test_branch_counts(self):
        """Test branch usage is summarised per estimate."""
        result = estimate_tumour_vaf(
            [100, 100, 100], [30, 5, 90], [0.0, 0.0, 0.0], [100, 100, 100],
            [0, 80, 0], purity=0.6, ploidy=2.0,
        )
        assert result.branch_counts() == {
            "unconstrained": 1,
            "host_alt_bound": 1,
            "tumour_vaf_bound": 1,
        }

    def test_read_counts(self):
        """Test corrected tumour read counts for the basic scenario."""
        alt_reads, total_reads = estimate_tumour_read_counts(
            [100], [30], [0.0], [100], [0], purity=0.6, ploidy=2.0
        )
        np.testing.assert_allclose(alt_reads, [30.0])
        np.testing.assert_allclose(total_reads, [60.0])

    def test_read_counts_snapped(self):
        """Test counts within tolerance of zero are exactly zero."""
        alt_reads, total_reads = estimate_tumour_read_counts(
            [100, 0], [30, 0], [0.0, 0.0], [100, 100], [30, 0],
            purity=0.0, ploidy=2.0,
        )
        np.testing.assert_array_equal(alt_reads, [0.0, 0.0])
        np.testing.assert_array_equal(total_reads, [0.0, 0.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
