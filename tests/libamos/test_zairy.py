"""
Tests for zairy: Airy dispatcher against scipy.special.airy/airye.

Points are chosen to reach every branch: the |z| <= 1 power series (and its
|z| < tol polynomial), the K kernel in the right half plane, and analytic
continuation in the left half plane and on the negative real axis.

Tolerances:
    Ai, Ai' :  rtol=1e-10, atol=1e-14
"""
import numpy as np
import pytest
from scipy.special import airy, airye

from amosairy.libamos import zairy as zairy_module
from amosairy.libamos.status import AiryResult, Ierr
from amosairy.libamos.zairy import zairy

RTOL = 1e-10
ATOL = 1e-14

SERIES_POINTS = [0.5 + 0.5j, -0.3j, 0.9 + 0j, -0.7 + 0.1j, 1.0 + 0j, 1e-20 + 0j]
RIGHT_POINTS = [2.0 + 1.0j, 5.0 - 3.0j, 10.0 + 0j, 20.0 + 20.0j, 0.0 + 3.0j]
LEFT_POINTS = [-2.0 + 1.0j, -4.0 - 2.0j, -6.0 + 0j, -1.5 - 0.2j, -30.0 + 0.5j]
ALL_POINTS = SERIES_POINTS + RIGHT_POINTS + LEFT_POINTS


def _scipy_value(z, id, kode):
    vals = airy(np.complex128(z)) if kode == 1 else airye(np.complex128(z))
    return vals[id]


class TestZairyAgainstReference:
    @pytest.mark.parametrize("z", ALL_POINTS)
    @pytest.mark.parametrize("id", [0, 1])
    def test_unscaled(self, z, id):
        res = zairy(z, id, 1)
        assert res.ierr == Ierr.NONE
        assert res.nz == 0
        np.testing.assert_allclose(res.value, _scipy_value(z, id, 1), rtol=RTOL, atol=ATOL)

    @pytest.mark.parametrize("z", ALL_POINTS)
    @pytest.mark.parametrize("id", [0, 1])
    def test_scaled(self, z, id):
        res = zairy(z, id, 2)
        assert res.ierr == Ierr.NONE
        np.testing.assert_allclose(res.value, _scipy_value(z, id, 2), rtol=RTOL, atol=ATOL)


class TestZairyBranches:
    def test_origin(self):
        assert zairy(0j, 0, 1).value == pytest.approx(0.355028053887817239, abs=1e-16)
        assert zairy(0j, 1, 1).value == pytest.approx(-0.258819403792806798, abs=1e-16)

    def test_result_type(self):
        res = zairy(1.0, 0, 1)
        assert isinstance(res, AiryResult)
        assert isinstance(res.value, complex)

    def test_scale_parameters_derived_per_call(self, monkeypatch):
        calls = []
        derive = zairy_module.scale_parameters

        def recording(*args, **kwargs):
            calls.append((args, kwargs))
            return derive(*args, **kwargs)

        monkeypatch.setattr(zairy_module, "scale_parameters", recording)
        res = zairy(2.0 + 1.0j, 0, 1)
        assert calls == [((), {})]
        np.testing.assert_allclose(res.value, _scipy_value(2.0 + 1.0j, 0, 1), rtol=RTOL)

    def test_conjugate_symmetry(self):
        z = -3.0 + 2.0j
        a = zairy(z, 0, 1).value
        b = zairy(z.conjugate(), 0, 1).value
        np.testing.assert_allclose(b, a.conjugate(), rtol=1e-13)

    def test_unscaled_underflow(self):
        # Re zeta far past elim: exact zero, one underflowed value
        res = zairy(200.0 + 0j, 0, 1)
        assert res.value == 0
        assert res.nz == 1
        assert res.ierr == Ierr.NONE

    def test_large_argument_rescaled(self):
        # Re zeta between alim and elim goes through the 1/tol rescaling
        z = 101.3 + 0j
        res = zairy(z, 0, 1)
        assert res.nz == 0
        np.testing.assert_allclose(res.value, _scipy_value(z, 0, 1), rtol=RTOL)

    def test_left_half_plane_rescaled(self):
        # Re zeta below -alim in unscaled mode scales by tol before continuing
        z = 100.0 * np.exp(2j * np.pi / 3)
        res = zairy(z, 0, 1)
        assert res.ierr == Ierr.NONE
        assert np.isfinite(res.value.real)
        np.testing.assert_allclose(res.value, _scipy_value(z, 0, 1), rtol=1e-9)


class TestZairyErrors:
    def test_overflow(self):
        z = 110.0 * np.exp(2j * np.pi / 3)
        res = zairy(z, 0, 1)
        assert res.ierr == Ierr.OVERFLOW
        assert res.nz == 0

    def test_overflow_avoided_when_scaled(self):
        z = 110.0 * np.exp(2j * np.pi / 3)
        res = zairy(z, 0, 2)
        assert res.ierr == Ierr.NONE
        assert abs(res.value) < 1.0
        np.testing.assert_allclose(res.value, _scipy_value(z, 0, 2), rtol=1e-9)

    def test_precision_loss(self):
        z = 2000.0 + 0j
        res = zairy(z, 0, 2)
        assert res.ierr == Ierr.PRECISION
        # exp(zeta)*Ai(z) ~ z**(-1/4) / (2 sqrt(pi))
        np.testing.assert_allclose(res.value, z ** -0.25 / (2.0 * np.sqrt(np.pi)), rtol=1e-4)

    def test_precision_loss_with_underflow(self):
        res = zairy(2000.0 + 0j, 1, 1)
        assert res.ierr == Ierr.PRECISION
        assert res.nz == 1

    def test_range(self):
        res = zairy(2.0e6 + 0j, 0, 2)
        assert res.ierr == Ierr.RANGE
        assert res.value == 0

    @pytest.mark.parametrize("id, kode", [(2, 1), (-1, 1), (0, 0), (1, 3)])
    def test_rejects_bad_options(self, id, kode):
        res = zairy(1.0 + 1.0j, id, kode)
        assert res.ierr == Ierr.INPUT

    def test_rejects_non_finite(self):
        assert zairy(complex(np.inf, 0.0), 0, 1).ierr == Ierr.INPUT
