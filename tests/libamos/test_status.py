"""Tests for status: error flags, sentinels and input validators."""
import math

import pytest

from amosairy.libamos.status import (NZ_NOT_CONVERGED, NZ_OVERFLOW, Ierr,
                                     KernelResult, Scaling, check_argument,
                                     check_order, check_rotation,
                                     check_scaling, ierr_from_nz, rejected)


class TestIerrFromNz:
    @pytest.mark.parametrize("nz", [0, 1, 5])
    def test_success(self, nz):
        assert ierr_from_nz(nz) == Ierr.NONE

    def test_overflow(self):
        assert ierr_from_nz(NZ_OVERFLOW) == Ierr.OVERFLOW

    def test_not_converged(self):
        assert ierr_from_nz(NZ_NOT_CONVERGED) == Ierr.CONVERGENCE


def test_codes():
    assert [int(e) for e in Ierr] == [0, 1, 2, 3, 4, 5]
    assert Scaling.UNSCALED == 1
    assert Scaling.SCALED == 2


def test_rejected_is_empty_input_error():
    res = rejected("test %s", "value")
    assert res == KernelResult((), 0, Ierr.INPUT)


class TestValidators:
    def test_argument(self):
        assert check_argument(0j)
        assert not check_argument(0j, nonzero=True)
        assert check_argument(1e-300 + 0j, nonzero=True)
        assert not check_argument(complex(math.nan, 0.0))
        assert not check_argument(complex(0.0, math.inf))

    def test_order(self):
        assert check_order(0.0, 1)
        assert not check_order(-1e-300, 1)
        assert not check_order(math.nan, 1)
        assert not check_order(1.0, 0)

    def test_scaling(self):
        assert check_scaling(1) and check_scaling(2)
        assert not check_scaling(0)

    def test_rotation(self):
        assert check_rotation(1) and check_rotation(-1)
        assert not check_rotation(0)
