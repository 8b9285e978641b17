"""
Underflow and rescaling bookkeeping shared by the Bessel kernels.

* ``zuchk``  - underflow tester for one complex value.
* ``zs1s2``  - connection-formula combiner for the two halves of an analytic
  continuation, with an explicitly threaded dropped-term accumulator.
* ``zkscl``  - rescaling manager: unscales a K sequence computed on a shifted
  exponent, zeroes what underflows and carries the recurrence forward until
  two consecutive values are back on scale.

Each routine has a ``_jit`` kernel used by the other kernels and a Python
dispatcher for direct use.
"""
import cmath
import math
from typing import NamedTuple, Optional, Sequence

import numpy as np
from numba import jit

from .constants import scale_parameters
from .logger import get_logger
from .status import Ierr, KernelResult, check_argument, check_order, rejected

log = get_logger(__name__)


class CombinerResult(NamedTuple):
    """Output of the connection-formula combiner."""
    s1: complex
    s2: complex
    nz: int
    iuf: int


@jit(nopython=True, cache=True)
def _safe_log_jit(x):
    """Natural log with log(0) = -inf."""
    if x == 0.0:
        return -np.inf
    return math.log(x)


@jit(nopython=True, cache=True)
def _rescaled_exp_jit(cs, tol):
    """JIT-compiled exp(cs)/tol."""
    mag = math.exp(cs.real) / tol
    return complex(mag * math.cos(cs.imag), mag * math.sin(cs.imag))


@jit(nopython=True, cache=True)
def _zuchk_jit(y, ascle, tol):
    """JIT-compiled underflow test; 1 when *y* is below the scale floor."""
    wr = abs(y.real)
    wi = abs(y.imag)
    st = min(wr, wi)
    if st > ascle:
        return 0
    ss = max(wr, wi)
    st = st / tol
    if ss < st:
        return 1
    return 0


@jit(nopython=True, cache=True)
def _zs1s2_jit(zr, s1, s2, ascle, alim, iuf):
    """JIT-compiled connection-formula combiner."""
    nz = 0
    as1 = abs(s1)
    as2 = abs(s2)
    if (s1.real != 0.0 or s1.imag != 0.0) and as1 != 0.0:
        aln = -zr.real - zr.real + math.log(as1)
        s1d = s1
        s1 = 0j
        as1 = 0.0
        if aln >= -alim:
            c1 = cmath.log(s1d) - zr - zr
            s1 = cmath.exp(c1)
            as1 = abs(s1)
            iuf += 1
    aa = max(as1, as2)
    if aa > ascle:
        return s1, s2, nz, iuf
    return 0j, 0j, 1, 0


@jit(nopython=True, cache=True)
def _zkscl_jit(zr, fnu, y_in, rz, ascle, tol, elim):
    """JIT-compiled rescaling manager; returns a new sequence and nz."""
    y = y_in.copy()
    n = y.shape[0]
    nz = 0
    ic = 0
    cy = np.zeros(2, dtype=np.complex128)
    for i in range(min(2, n)):
        s1 = y[i]
        cy[i] = s1
        acs = -zr.real + _safe_log_jit(abs(s1))
        nz += 1
        y[i] = 0j
        if acs < -elim:
            continue
        cs = _rescaled_exp_jit(cmath.log(s1) - zr, tol)
        if _zuchk_jit(cs, ascle, tol) != 0:
            continue
        y[i] = cs
        ic = i + 1
        nz -= 1
    if n == 1:
        return y, nz
    if ic <= 1:
        y[0] = 0j
        nz = 2
    if n == 2 or nz == 0:
        return y, nz

    # find two consecutive on-scale values; scale the recurrence down by
    # exp(-elim) whenever s2 grows past exp(elim/2)
    ck = (fnu + 1.0) * rz
    s1 = cy[0]
    s2 = cy[1]
    helim = 0.5 * elim
    celm = math.exp(-elim)
    zd = zr
    kk = 0
    found = False
    for i in range(3, n + 1):
        kk = i
        cs = s2
        s2 = ck * cs + s1
        s1 = cs
        ck += rz
        alas = _safe_log_jit(abs(s2))
        acs = -zd.real + alas
        nz += 1
        y[i - 1] = 0j
        if acs >= -elim:
            cs = _rescaled_exp_jit(cmath.log(s2) - zd, tol)
            if _zuchk_jit(cs, ascle, tol) == 0:
                y[i - 1] = cs
                nz -= 1
                if ic == kk - 1:
                    found = True
                    break
                ic = kk
                continue
        if alas >= helim:
            zd = complex(zd.real - elim, zd.imag)
            s1 = s1 * celm
            s2 = s2 * celm
    if found:
        nz = kk - 2
    else:
        nz = n
        if ic == n:
            nz = n - 1
    for k in range(nz):
        y[k] = 0j
    return y, nz


def zuchk(y: complex, ascle: Optional[float] = None,
          tol: Optional[float] = None) -> bool:
    """
    Test one complex value for underflow.

    A value underflows when its smaller component is at or below *ascle* and
    the larger component is too small to carry it: max(|Re|,|Im|) <
    min(|Re|,|Im|)/tol.  The value itself is never modified.

    Parameters
    ----------
    y : complex
        Value to test.
    ascle, tol : float, optional
        Underflow magnitude floor and relative accuracy; omitted ones come
        from ``scale_parameters``.

    Returns
    -------
    bool
        True when *y* should be replaced by zero.
    """
    p = scale_parameters(tol, ascle=ascle)
    return _zuchk_jit(complex(y), p.ascle, p.tol) != 0


def zs1s2(zr: complex, s1: complex, s2: complex, ascle: Optional[float] = None,
          alim: Optional[float] = None, iuf: int = 0) -> CombinerResult:
    """
    Combine the two scaled halves of an analytic continuation.

    *s1* carries the factor exp(zr) relative to *s2*; it is brought to the
    scale of *s2* by exp(-2 zr) when that is representable, otherwise dropped.
    When both halves are below *ascle* they are zeroed and ``nz = 1``.

    Parameters
    ----------
    zr : complex
        Argument of the continuation.
    s1, s2 : complex
        Scaled contributions.
    ascle, alim : float, optional
        Underflow floor and scaling limit, resolved by ``scale_parameters``.
    iuf : int
        Dropped-term accumulator carried by the caller's order loop.

    Returns
    -------
    CombinerResult
        ``(s1, s2, nz, iuf)`` with the updated accumulator.
    """
    p = scale_parameters(alim=alim, ascle=ascle)
    s1, s2, nz, iuf = _zs1s2_jit(complex(zr), complex(s1), complex(s2),
                                 p.ascle, p.alim, int(iuf))
    return CombinerResult(s1, s2, nz, iuf)


def zkscl(zr: complex, fnu: float, y: Sequence[complex], rz: complex,
          ascle: Optional[float] = None, tol: Optional[float] = None,
          elim: Optional[float] = None) -> KernelResult:
    """
    Rescale a K sequence computed with exp(-zr) scaling.

    Entries that underflow after unscaling become exact zeros.  Past the
    first two entries the forward recurrence is continued from the scaled
    values until two consecutive entries are on scale; every entry before
    them is zeroed.

    Parameters
    ----------
    zr : complex
        Argument with the scaling shift already applied.
    fnu : float
        Order of the first entry.
    y : sequence of complex
        Scaled values K(fnu+k, z), k = 0..n-1.
    rz : complex
        2/z for the original argument.
    ascle, tol, elim : float, optional
        Scale parameters; omitted ones come from ``scale_parameters``.

    Returns
    -------
    KernelResult
    """
    zr, rz, fnu = complex(zr), complex(rz), float(fnu)
    arr = np.array(y, dtype=np.complex128).ravel()
    if not check_order(fnu, arr.size) or not check_argument(zr):
        return rejected("zkscl fnu=%r n=%d zr=%r", fnu, arr.size, zr)
    p = scale_parameters(tol, elim=elim, ascle=ascle)
    out, nz = _zkscl_jit(zr, fnu, arr, rz, p.ascle, p.tol, p.elim)
    log.debug2("zkscl n=%d nz=%d", arr.size, nz)
    return KernelResult(tuple(complex(v) for v in out), int(nz), Ierr.NONE)
