"""
Miller backward recurrence for I(fnu, z), Re z >= 0.

The start index is the larger of two estimates: one from the relative
truncation error of the normalizing series, one from the truncation error of
the ratios I(fnu+k+1)/I(fnu+k).  The unnormalized sequence is scaled by the
Neumann-type sum

    sum_k  Gamma(k + 2 fnf + 1) / (k! Gamma(2 fnf + 1)) (k + fnf) I(k+fnf, z)
        = (z/2)**fnf e**z / Gamma(1 + fnf),

with fnf the fractional part of the order.
"""
import cmath
import math
from typing import Optional

import numpy as np
from numba import jit

from .constants import MILLER_INDEX_LIMIT, TINY, scale_parameters
from .logger import get_logger
from .status import (NZ_NOT_CONVERGED, KernelResult, check_argument,
                     check_order, check_scaling, ierr_from_nz, rejected)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _step_jit(p1, p2, total, bk, fkk, fnf, tfnf, rz):
    """One backward step of the recurrence and the normalizing sum."""
    pt = p2
    p2 = p1 + (fkk + fnf) * (rz * pt)
    p1 = pt
    ak = 1.0 - tfnf / (fkk + tfnf)
    ack = bk * ak
    total += (ack + bk) * p1
    return p1, p2, total, ack, fkk - 1.0


@jit(nopython=True, cache=True)
def _zmlri_jit(z, fnu, kode, n, tol):
    """JIT-compiled Miller algorithm; returns (y, nz)."""
    y = np.zeros(n, dtype=np.complex128)
    scle = TINY / tol
    az = abs(z)
    iaz = int(az)
    ifnu = int(fnu)
    inu = ifnu + n - 1
    at = iaz + 1.0
    raz = 1.0 / az
    st = complex(z.real * raz, -z.imag * raz)
    ck = st * at * raz
    rz = (st + st) * raz
    p1 = 0j
    p2 = 1.0 + 0j
    ack = (at + 1.0) * raz
    rho = ack + math.sqrt(ack * ack - 1.0)
    rho2 = rho * rho
    tst = (rho2 + rho2) / ((rho2 - 1.0) * (rho - 1.0))
    tst = tst / tol

    # relative truncation error index for the series
    ak = at
    i = 0
    converged = False
    while i < MILLER_INDEX_LIMIT:
        i += 1
        pt = p2
        p2 = p1 - ck * pt
        p1 = pt
        ck += rz
        if abs(p2) > tst * ak * ak:
            converged = True
            break
        ak += 1.0
    if not converged:
        return y, NZ_NOT_CONVERGED
    i += 1

    k = 0
    if inu >= iaz:
        # relative truncation error for the ratios
        p1 = 0j
        p2 = 1.0 + 0j
        at = inu + 1.0
        ck = st * at * raz
        ack = at * raz
        tst = math.sqrt(ack / tol)
        itime = 1
        converged = False
        while k < MILLER_INDEX_LIMIT:
            k += 1
            pt = p2
            p2 = p1 - ck * pt
            p1 = pt
            ck += rz
            ap = abs(p2)
            if ap < tst:
                continue
            if itime == 2:
                converged = True
                break
            ack = abs(ck)
            flam = ack + math.sqrt(ack * ack - 1.0)
            fkap = ap / abs(p1)
            rho = min(flam, fkap)
            tst = tst * math.sqrt(rho / (rho * rho - 1.0))
            itime = 2
        if not converged:
            return y, NZ_NOT_CONVERGED

    # backward recurrence and normalizing sum, p2 and the sum scaled by scle
    k += 1
    kk = max(i + iaz, k + inu)
    fkk = float(kk)
    p1 = 0j
    p2 = complex(scle, 0.0)
    fnf = fnu - ifnu
    tfnf = fnf + fnf
    bk = math.exp(math.lgamma(fkk + tfnf + 1.0) - math.lgamma(fkk + 1.0)
                  - math.lgamma(tfnf + 1.0))
    total = 0j
    for _ in range(kk - inu):
        p1, p2, total, bk, fkk = _step_jit(p1, p2, total, bk, fkk, fnf, tfnf, rz)
    y[n - 1] = p2
    for m in range(n - 2, -1, -1):
        p1, p2, total, bk, fkk = _step_jit(p1, p2, total, bk, fkk, fnf, tfnf, rz)
        y[m] = p2
    for _ in range(ifnu):
        p1, p2, total, bk, fkk = _step_jit(p1, p2, total, bk, fkk, fnf, tfnf, rz)

    pt = z
    if kode == 2:
        pt = complex(0.0, z.imag)
    p1 = -fnf * cmath.log(rz) + pt
    pt = complex(p1.real - math.lgamma(1.0 + fnf), p1.imag)
    # exp(pt)/(sum+p2) computed without squaring large quantities
    p2 = p2 + total
    rap = 1.0 / abs(p2)
    ck = cmath.exp(pt) * rap
    pt = complex(p2.real * rap, -p2.imag * rap)
    cnorm = ck * pt
    for m in range(n):
        y[m] = y[m] * cnorm
    return y, 0


def zmlri(z: complex, fnu: float, kode: int = 1, n: int = 1,
          tol: Optional[float] = None) -> KernelResult:
    """
    I(fnu+k, z), k = 0..n-1, by the Miller algorithm normalized by a
    Neumann series.

    Parameters
    ----------
    z : complex
        Argument, ``Re z >= 0``.
    fnu : float
        First order, ``fnu >= 0``.
    kode : int
        1 for I, 2 for exp(-|Re z|)*I.
    n : int
        Number of consecutive orders.
    tol : float, optional
        Relative accuracy, resolved by ``scale_parameters``.

    Returns
    -------
    KernelResult
        ``nz = -2`` when a start index could not be found within the
        iteration cap.
    """
    z, fnu, kode, n = complex(z), float(fnu), int(kode), int(n)
    if not (check_argument(z, nonzero=True) and check_order(fnu, n) and check_scaling(kode)):
        return rejected("zmlri z=%r fnu=%r kode=%r n=%r", z, fnu, kode, n)
    y, nz = _zmlri_jit(z, fnu, kode, n, scale_parameters(tol).tol)
    if nz < 0:
        log.debug("zmlri: no start index within %d steps at z=%r", MILLER_INDEX_LIMIT, z)
    return KernelResult(tuple(complex(v) for v in y), int(nz), ierr_from_nz(nz))
