"""
Tests for miller: backward recurrence for I(fnu, z), Re z >= 0.

Tolerances:
    normalized recurrence :  rtol=1e-12
"""
import numpy as np
from scipy.special import iv, ive

from amosairy.libamos.miller import zmlri
from amosairy.libamos.status import NZ_NOT_CONVERGED, Ierr

RTOL = 1e-12


class TestZmlri:
    def test_unscaled_sequence(self):
        z = 5.0 + 3.0j
        res = zmlri(z, 0.7, kode=1, n=4)
        assert res.nz == 0
        assert res.ierr == Ierr.NONE
        np.testing.assert_allclose(res.values, iv(0.7 + np.arange(4), z), rtol=RTOL)

    def test_scaled_sequence(self):
        z = 5.0 + 3.0j
        res = zmlri(z, 0.7, kode=2, n=4)
        np.testing.assert_allclose(res.values, ive(0.7 + np.arange(4), z), rtol=RTOL)

    def test_integer_order_real_argument(self):
        res = zmlri(12.0 + 0j, 0.0, n=1)
        np.testing.assert_allclose(res.values[0], iv(0.0, 12.0 + 0j), rtol=RTOL)

    def test_order_above_argument(self):
        z = 3.0 - 4.0j
        res = zmlri(z, 6.25, n=3)
        np.testing.assert_allclose(res.values, iv(6.25 + np.arange(3), z), rtol=RTOL)

    def test_imaginary_axis(self):
        z = 0.0 + 8.0j
        res = zmlri(z, 1.0 / 3.0, kode=2, n=2)
        np.testing.assert_allclose(res.values, ive(1.0 / 3.0 + np.arange(2), z), rtol=RTOL)

    def test_single_order_matches_sequence_head(self):
        z = 4.0 + 2.0j
        one = zmlri(z, 0.5, n=1)
        many = zmlri(z, 0.5, n=4)
        np.testing.assert_allclose(one.values[0], many.values[0], rtol=1e-12)

    def test_no_start_index_for_large_argument(self):
        # the ratio test needs far more than the step cap when |z| = 1000
        res = zmlri(1000.0 + 0j, 0.0)
        assert res.nz == NZ_NOT_CONVERGED
        assert res.ierr == Ierr.CONVERGENCE

    def test_rejects_zero_argument(self):
        assert zmlri(0j, 0.5).ierr == Ierr.INPUT

    def test_rejects_bad_order(self):
        assert zmlri(1.0 + 0j, np.inf).ierr == Ierr.INPUT
