"""
Tests for constants: machine characteristics and derived scale parameters.

The derived limits are checked against the values AMOS
produces for IEEE double precision.
"""
import dataclasses

import numpy as np
import pytest
from scipy.special import airy

from amosairy.libamos.constants import (AIRY_C1, AIRY_C2, AIRY_COEF, ALIM, ARM,
                                        ASCLE, DIGITS, ELIM, EPS, HPI, HUGE,
                                        I32MAX, KNU_GAMMA_SERIES, PI, R1M5, RL,
                                        RTHPI, RTPI, TINY, TOL, MachineConstants,
                                        ScaleParameters, scale_parameters)

# ---------------------------------------------------------------------------
# Machine constants
# ---------------------------------------------------------------------------

def test_machine_constants_ieee_double():
    assert MachineConstants.tiny == np.finfo(np.float64).tiny
    assert MachineConstants.huge == np.finfo(np.float64).max
    assert MachineConstants.eps == np.finfo(np.float64).eps
    assert MachineConstants.digits == 53
    assert MachineConstants.emin == -1021
    assert MachineConstants.emax == 1024
    assert MachineConstants.int_max == 2147483647


def test_module_level_aliases():
    assert TINY == MachineConstants.tiny
    assert HUGE == MachineConstants.huge
    assert EPS == MachineConstants.eps
    assert I32MAX == MachineConstants.int_max
    assert DIGITS == MachineConstants.digits
    assert np.isclose(R1M5, np.log10(2.0), atol=1e-15)


def test_emin_emax_fix_elim():
    k = min(abs(MachineConstants.emin), abs(MachineConstants.emax))
    assert np.isclose(ELIM, 2.303 * (k * R1M5 - 3.0), rtol=1e-15)


# ---------------------------------------------------------------------------
# Mathematical constants
# ---------------------------------------------------------------------------

def test_pi_family():
    assert np.isclose(PI, np.pi, atol=1e-15)
    assert np.isclose(HPI, np.pi / 2, atol=1e-15)
    assert np.isclose(RTHPI, np.sqrt(np.pi / 2), atol=1e-15)
    assert np.isclose(RTPI, 1.0 / (2.0 * np.pi), atol=1e-15)


def test_airy_constants():
    ai0, aip0, _, _ = airy(0.0)
    assert np.isclose(AIRY_C1, ai0, rtol=1e-14)
    assert np.isclose(AIRY_C2, -aip0, rtol=1e-14)
    assert np.isclose(AIRY_COEF, 1.0 / (np.pi * np.sqrt(3.0)), rtol=1e-15)


def test_gamma_series_leading_term_is_euler_gamma():
    assert len(KNU_GAMMA_SERIES) == 8
    assert np.isclose(KNU_GAMMA_SERIES[0], np.euler_gamma, atol=1e-15)


# ---------------------------------------------------------------------------
# Derived scale parameters
# ---------------------------------------------------------------------------

def test_tol_is_machine_epsilon():
    assert TOL == EPS


def test_elim_alim_rl():
    assert np.isclose(ELIM, 700.92179369444591, rtol=1e-12)
    assert np.isclose(ALIM, ELIM - 2.303 * 52 * R1M5, rtol=1e-12)
    assert np.isclose(RL, 1.2 * 52 * R1M5 + 3.0, rtol=1e-12)
    assert ALIM < ELIM
    # exp(-elim) is still a normal number
    assert np.exp(-ELIM) > TINY


def test_underflow_floor():
    assert ARM == 1.0e3 * TINY
    assert ASCLE == ARM / TOL


class TestScaleParameters:
    def test_defaults(self):
        p = scale_parameters()
        assert p == ScaleParameters(TOL, ELIM, ALIM, RL, ASCLE)

    def test_coarser_tolerance(self):
        p = scale_parameters(1e-10)
        assert p.tol == 1e-10
        assert p.ascle == ARM / 1e-10
        assert p.elim == ELIM

    def test_tolerance_floored_at_epsilon(self):
        assert scale_parameters(1e-30).tol == EPS

    def test_explicit_overrides(self):
        p = scale_parameters(elim=600.0, alim=550.0, rl=18.0, ascle=1e-200)
        assert (p.elim, p.alim, p.rl, p.ascle) == (600.0, 550.0, 18.0, 1e-200)
        assert p.tol == TOL

    def test_frozen(self):
        p = scale_parameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.tol = 1.0
