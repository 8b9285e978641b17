"""
Airy function Ai(z) and its derivative for complex z.

With zeta = (2/3) z**(3/2),

    Ai(z)  =  c * sqrt(z) * K(1/3, zeta)
    Ai'(z) = -c * z * K(2/3, zeta)
    c      =  1 / (pi * sqrt(3))

For |z| <= 1 the two fundamental power series in z**3 are summed instead.
In the right half plane K comes straight from the K kernel; elsewhere zeta is
reflected into the left half plane and the rotated K is obtained by analytic
continuation.  Scaled mode returns exp(zeta)*Ai(z) and exp(zeta)*Ai'(z).
"""
import cmath
import math

from numba import jit

from .besselk import _zbknu_jit
from .constants import (AIRY_C1, AIRY_C2, AIRY_COEF, AIRY_SERIES_RADIUS,
                        AIRY_SERIES_TERMS, ARM, I32MAX, TTH,
                        scale_parameters)
from .continuation import _zacai_jit
from .logger import get_logger
from .status import (NZ_OVERFLOW, AiryResult, Ierr, check_argument,
                     check_scaling)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _series_jit(z, id, kode, tol):
    """Ai or Ai' from the power series, |z| <= 1."""
    az = abs(z)
    fid = float(id)
    if az < tol:
        # two-term Taylor polynomial
        aa = ARM
        if id == 0:
            if az <= aa:
                return complex(AIRY_C1, 0.0)
            return AIRY_C1 - AIRY_C2 * z
        s1 = 0j
        if az > math.sqrt(aa):
            s1 = 0.5 * (z * z)
        return -AIRY_C2 + AIRY_C1 * s1

    s1 = 1.0 + 0j
    s2 = 1.0 + 0j
    aa = az * az
    if aa >= tol / az:
        trm1 = 1.0 + 0j
        trm2 = 1.0 + 0j
        atrm = 1.0
        z3 = (z * z) * z
        az3 = az * aa
        ak = 2.0 + fid
        bk = 3.0 - fid - fid
        ck = 4.0 - fid
        dk = 3.0 + fid + fid
        d1 = ak * dk
        d2 = bk * ck
        ad = min(d1, d2)
        ak = 24.0 + 9.0 * fid
        bk = 30.0 - 9.0 * fid
        for _ in range(AIRY_SERIES_TERMS):
            trm1 = trm1 * z3 / d1
            s1 += trm1
            trm2 = trm2 * z3 / d2
            s2 += trm2
            atrm = atrm * az3 / ad
            d1 += ak
            d2 += bk
            ad = min(d1, d2)
            if atrm < tol * ad:
                break
            ak += 18.0
            bk += 18.0

    if id == 0:
        ai = s1 * AIRY_C1 - AIRY_C2 * (z * s2)
    else:
        ai = -s2 * AIRY_C2
        if az > tol:
            cc = AIRY_C1 / (1.0 + fid)
            ai += cc * ((z * s1) * z)
    if kode == 2:
        csq = cmath.sqrt(z)
        ai = ai * cmath.exp(TTH * (z * csq))
    return ai


@jit(nopython=True, cache=True)
def _zairy_jit(z, id, kode, tol, elim, alim, rl):
    """JIT-compiled Airy dispatcher; returns (ai, nz, ierr)."""
    az = abs(z)
    if az <= AIRY_SERIES_RADIUS:
        return _series_jit(z, id, kode, tol), 0, 0

    ierr = 0
    nz = 0
    fnu = (1.0 + id) / 3.0
    alaz = math.log(az)
    aa = min(0.5 / tol, I32MAX * 0.5) ** TTH
    if az > aa:
        return 0j, 0, 4
    if az > math.sqrt(aa):
        ierr = 3

    csq = cmath.sqrt(z)
    zta = TTH * (z * csq)
    # pick the branch of zeta continuous across the negative real axis
    if z.real < 0.0:
        zta = complex(-abs(zta.real), zta.imag)
    if z.imag == 0.0 and z.real <= 0.0:
        zta = complex(0.0, zta.imag)

    iflag = 0
    sfac = 1.0
    aa = zta.real
    if aa >= 0.0 and z.real > 0.0:
        if kode == 1 and aa >= alim:
            aa = -aa - 0.25 * alaz
            iflag = 2
            sfac = 1.0 / tol
            if aa < -elim:
                return 0j, 1, ierr
        cy, nn = _zbknu_jit(zta, fnu, kode, 1, tol, elim, alim)
        if nn < 0:
            return 0j, 0, 5
        nz = nn
    else:
        if kode == 1 and aa <= -alim:
            aa = -aa + 0.25 * alaz
            iflag = 1
            sfac = tol
            if aa > elim:
                return 0j, 0, 2
        mr = 1
        if z.imag < 0.0:
            mr = -1
        cy, nn = _zacai_jit(zta, fnu, kode, mr, 1, rl, tol, elim, alim)
        if nn < 0:
            return 0j, 0, 2 if nn == NZ_OVERFLOW else 5
        nz += nn

    s1 = cy[0] * AIRY_COEF
    if iflag == 0:
        if id == 0:
            return csq * s1, nz, ierr
        return -(z * s1), nz, ierr
    # s1 was computed on a shifted scale; sfac brings it back
    s1 = s1 * sfac
    if id == 0:
        return (s1 * csq) / sfac, nz, ierr
    return -(s1 * z) / sfac, nz, ierr


def zairy(z: complex, id: int = 0, kode: int = 1) -> AiryResult:
    """
    Ai(z) or Ai'(z) for complex z.

    Parameters
    ----------
    z : complex
        Argument.
    id : int
        0 for Ai, 1 for Ai'.
    kode : int
        1 for the unscaled function, 2 for exp(zeta) times it, with
        zeta = (2/3) z**(3/2).

    Returns
    -------
    AiryResult
        ``value``, underflow count ``nz`` (0 or 1) and ``ierr``:

        * 0 - normal return
        * 1 - input error, no computation
        * 2 - overflow, ``Re zeta`` too large in unscaled mode
        * 3 - |z| large, fewer than half the digits are reliable
        * 4 - |z| too large for any significant digit, no value
        * 5 - an evaluator did not converge, no value
    """
    z, id, kode = complex(z), int(id), int(kode)
    if id not in (0, 1) or not check_scaling(kode) or not check_argument(z):
        log.warning("zairy rejected input z=%r id=%r kode=%r", z, id, kode)
        return AiryResult(0j, 0, Ierr.INPUT)
    p = scale_parameters()
    ai, nz, ierr = _zairy_jit(z, id, kode, p.tol, p.elim, p.alim, p.rl)
    ierr = Ierr(ierr)
    if ierr == Ierr.PRECISION:
        log.debug("zairy: |z|=%g loses half the digits", abs(z))
    elif ierr != Ierr.NONE:
        log.warning("zairy failed with ierr=%d at z=%r", int(ierr), z)
    return AiryResult(complex(ai), int(nz), ierr)
