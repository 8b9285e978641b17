"""
Power series for the modified Bessel function I(fnu, z).

Valid for small |z| relative to the order.  The two highest orders are
summed directly; the rest come from backward recurrence, which is stable for
I.  Orders whose leading coefficient underflows are zeroed from the top.
"""
import cmath
import math
from typing import Optional

import numpy as np
from numba import jit

from .constants import ARM, scale_parameters
from .logger import get_logger
from .scaling import _zuchk_jit
from .status import (KernelResult, check_argument, check_order, check_scaling,
                     ierr_from_nz, rejected)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _backward_jit(y, k, ak, fnu, rz, ib, nn):
    """Unscaled backward recurrence filling y[k-1], y[k-2], ... (k 1-based)."""
    for _ in range(ib, nn + 1):
        y[k - 1] = (ak + fnu) * (rz * y[k]) + y[k + 1]
        ak -= 1.0
        k -= 1


@jit(nopython=True, cache=True)
def _zseri_jit(z, fnu, kode, n, tol, elim, alim):
    """JIT-compiled I power series; returns (y, nz)."""
    y = np.zeros(n, dtype=np.complex128)
    nz = 0
    az = abs(z)
    if az == 0.0 or az < ARM:
        if az != 0.0:
            nz = n - 1 if fnu == 0.0 else n
        if fnu == 0.0:
            y[0] = 1.0 + 0j
        return y, nz

    rtr1 = math.sqrt(ARM)
    crscr = 1.0
    iflag = 0
    ss = 0.0
    ascle = 0.0
    hz = 0.5 * z
    cz = 0j
    if az > rtr1:
        cz = hz * hz
    acz = abs(cz)
    nn = n
    ck = cmath.log(hz)
    w = np.zeros(2, dtype=np.complex128)

    while True:
        dfnu = fnu + (nn - 1)
        fnup = dfnu + 1.0
        # underflow test on the leading coefficient
        ak1 = ck * dfnu
        ak1r = ak1.real - math.lgamma(fnup)
        if kode == 2:
            ak1r -= z.real
        underflow = ak1r <= -elim
        if not underflow:
            if ak1r <= -alim:
                iflag = 1
                ss = 1.0 / tol
                crscr = tol
                ascle = ARM * ss
            aa = math.exp(ak1r)
            if iflag == 1:
                aa *= ss
            coef = complex(aa * math.cos(ak1.imag), aa * math.sin(ak1.imag))
            atol = tol * acz / fnup
            il = min(2, nn)
            for i in range(1, il + 1):
                dfnu = fnu + (nn - i)
                fnup = dfnu + 1.0
                s1 = 1.0 + 0j
                if acz >= tol * fnup:
                    term = 1.0 + 0j
                    ak = fnup + 2.0
                    s = fnup
                    aa = 2.0
                    while True:
                        rs = 1.0 / s
                        term = (term * cz) * rs
                        s1 += term
                        s += ak
                        ak += 2.0
                        aa = aa * acz * rs
                        if aa <= atol:
                            break
                s2 = s1 * coef
                w[i - 1] = s2
                if iflag == 1 and _zuchk_jit(s2, ascle, tol) != 0:
                    underflow = True
                    break
                y[nn - i] = s2 * crscr
                if i != il:
                    coef = coef / hz * dfnu
            if not underflow:
                break
        nz += 1
        y[nn - 1] = 0j
        if acz > dfnu:
            # z*z/4 exceeds the remaining orders; finish with another method
            return y, -nz
        nn -= 1
        if nn == 0:
            return y, nz

    if nn <= 2:
        return y, nz
    k = nn - 2
    ak = float(k)
    raz = 1.0 / az
    rz = complex(2.0 * z.real * raz * raz, -2.0 * z.imag * raz * raz)
    if iflag == 0:
        _backward_jit(y, k, ak, fnu, rz, 3, nn)
        return y, nz

    # recur backward on scaled values until they are back above ascle
    s1 = w[0]
    s2 = w[1]
    for l in range(3, nn + 1):
        prev = s2
        s2 = s1 + (ak + fnu) * (rz * prev)
        s1 = prev
        cur = s2 * crscr
        y[k - 1] = cur
        ak -= 1.0
        k -= 1
        if abs(cur) > ascle:
            if l + 1 <= nn:
                _backward_jit(y, k, ak, fnu, rz, l + 1, nn)
            return y, nz
    return y, nz


def zseri(z: complex, fnu: float, kode: int = 1, n: int = 1,
          tol: Optional[float] = None, elim: Optional[float] = None,
          alim: Optional[float] = None) -> KernelResult:
    """
    I(fnu+k, z), k = 0..n-1, by the power series.

    Parameters
    ----------
    z : complex
        Argument; the series is meant for |z/2|**2 <= fnu + 1 or |z| <= 2.
    fnu : float
        First order, ``fnu >= 0``.
    kode : int
        1 for I, 2 for exp(-|Re z|)*I.
    n : int
        Number of consecutive orders.
    tol, elim, alim : float, optional
        Scale parameters; omitted ones come from ``scale_parameters``.

    Returns
    -------
    KernelResult
        ``nz >= 0`` entries zeroed by underflow, or ``nz < 0`` when the top
        ``-nz`` orders underflowed and |z/2|**2 exceeds the next order; the
        lower orders must then be computed by another method.
    """
    z, fnu, kode, n = complex(z), float(fnu), int(kode), int(n)
    if not (check_argument(z) and check_order(fnu, n) and check_scaling(kode)):
        return rejected("zseri z=%r fnu=%r kode=%r n=%r", z, fnu, kode, n)
    p = scale_parameters(tol, elim=elim, alim=alim)
    y, nz = _zseri_jit(z, fnu, kode, n, p.tol, p.elim, p.alim)
    if nz < 0:
        log.debug("zseri: %d orders underflowed at |z|=%g", -nz, abs(z))
    return KernelResult(tuple(complex(v) for v in y), int(nz), ierr_from_nz(max(nz, 0)))
