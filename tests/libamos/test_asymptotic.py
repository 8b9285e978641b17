"""
Tests for asymptotic: large-|z| expansion of I(fnu, z).

Tolerances:
    expansion :  rtol=1e-11  (truncated at tol relative to the leading term)
"""
import numpy as np
from scipy.special import iv, ive

from amosairy.libamos.asymptotic import zasyi
from amosairy.libamos.constants import RL
from amosairy.libamos.status import NZ_NOT_CONVERGED, NZ_OVERFLOW, Ierr

RTOL = 1e-11


class TestZasyi:
    def test_unscaled_pair(self):
        z = 30.0 + 10.0j
        res = zasyi(z, 0.5, kode=1, n=2)
        assert res.nz == 0
        np.testing.assert_allclose(res.values, iv([0.5, 1.5], z), rtol=RTOL)

    def test_scaled_pair(self):
        z = 30.0 + 10.0j
        res = zasyi(z, 0.5, kode=2, n=2)
        np.testing.assert_allclose(res.values, ive([0.5, 1.5], z), rtol=RTOL)

    def test_backward_recurrence(self):
        z = 25.0 - 5.0j
        res = zasyi(z, 1.2, kode=1, n=4)
        np.testing.assert_allclose(res.values, iv(1.2 + np.arange(4), z), rtol=RTOL)

    def test_deferred_exponential(self):
        # |Re z| > alim with n > 2 multiplies exp(z) in after the recurrence
        z = 680.0 + 3.0j
        res = zasyi(z, 0.0, kode=1, n=3)
        assert res.nz == 0
        np.testing.assert_allclose(res.values, iv(np.arange(3.0), z), rtol=1e-10)

    def test_nearly_imaginary_argument(self):
        z = 0.5 + 40.0j
        res = zasyi(z, 1.0 / 3.0, kode=1, n=1)
        np.testing.assert_allclose(res.values[0], iv(1.0 / 3.0, z), rtol=RTOL)

    def test_scaled_avoids_overflow(self):
        z = 800.0 + 0j
        res = zasyi(z, 0.0, kode=2, n=1)
        assert res.nz == 0
        np.testing.assert_allclose(res.values[0], ive(0.0, z), rtol=RTOL)

    def test_threshold_is_positive(self):
        assert 20.0 < RL < 25.0


class TestZasyiFailures:
    def test_overflow_sentinel(self):
        res = zasyi(800.0 + 0j, 0.0, kode=1, n=1)
        assert res.nz == NZ_OVERFLOW
        assert res.ierr == Ierr.OVERFLOW

    def test_not_converged_for_large_order(self):
        # |z| just past rl but order 50: the term bound never drops below tol
        res = zasyi(22.0 + 1.0j, 50.0, kode=2, n=1)
        assert res.nz == NZ_NOT_CONVERGED
        assert res.ierr == Ierr.CONVERGENCE

    def test_rejects_zero_argument(self):
        res = zasyi(0j, 0.0)
        assert res.ierr == Ierr.INPUT
        assert res.values == ()
