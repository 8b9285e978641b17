"""
Modified Bessel function K(fnu, z) for complex z and a run of orders.

The order is split as fnu = inu + dnu with |dnu| <= 1/2.  K(dnu) and
K(dnu+1) come from

* the Temme series when |z| <= 2, or
* a Miller backward recurrence on the confluent hypergeometric ratio when
  |z| > 2 (the half-odd-integer case has a closed form),

and the remaining orders from the forward recurrence
K(nu+1) = (2 nu / z) K(nu) + K(nu-1), which is the stable direction for K.

The recurrence runs in three scale bands (values multiplied by 1/tol, 1 or
tol) so intermediate values stay representable; unscaled evaluation with
Re z > alim is carried out on exp(-z)-scaled values and unscaled at the end
by the rescaling manager.
"""
import cmath
import math
from typing import Optional

import numpy as np
from numba import jit

from .constants import (ARM, DIGITS, FPI, HPI, HUGE, KNU_FORWARD_LIMIT,
                        KNU_GAMMA_SERIES, KNU_INDEX_A, KNU_INDEX_B, KNU_INDEX_C,
                        KNU_INDEX_D, KNU_INDEX_OFFSET, KNU_INDEX_SLOPE, KNU_LOG2_10,
                        KNU_R2_EXPONENT_MAX, KNU_R2_EXPONENT_MIN, KNU_R2_OFFSET,
                        KNU_SERIES_RADIUS, KNU_SMALL_DNU, PI, R1M5, RTHPI, SPI, TTH,
                        scale_parameters)
from .logger import get_logger
from .scaling import _rescaled_exp_jit, _safe_log_jit, _zkscl_jit, _zuchk_jit
from .status import (NZ_NOT_CONVERGED, KernelResult, check_argument,
                     check_order, check_scaling, ierr_from_nz, rejected)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _advance_jit(s1, s2, ck, rz, kflag, count, bry, css, csr):
    """Advance the recurrence *count* orders without storing, moving up a
    scale band whenever the scaled value leaves the current one."""
    p1r = csr[kflag - 1]
    ascle = bry[kflag - 1]
    for _ in range(count):
        st = s2
        s2 = ck * st + s1
        s1 = st
        ck += rz
        if kflag >= 3:
            continue
        p2 = s2 * p1r
        if max(abs(p2.real), abs(p2.imag)) <= ascle:
            continue
        kflag += 1
        ascle = bry[kflag - 1]
        s1 = s1 * p1r * css[kflag - 1]
        s2 = p2 * css[kflag - 1]
        p1r = csr[kflag - 1]
    return s1, s2, ck, kflag


@jit(nopython=True, cache=True)
def _fill_jit(y, start, s1, s2, ck, rz, kflag, bry, css, csr):
    """Fill y[start:] by forward recurrence from the scaled pair (s1, s2)."""
    p1r = csr[kflag - 1]
    ascle = bry[kflag - 1]
    for i in range(start, y.shape[0]):
        pt = s2
        s2 = ck * pt + s1
        s1 = pt
        ck += rz
        p2 = s2 * p1r
        y[i] = p2
        if kflag >= 3:
            continue
        if max(abs(p2.real), abs(p2.imag)) <= ascle:
            continue
        kflag += 1
        ascle = bry[kflag - 1]
        s1 = s1 * p1r * css[kflag - 1]
        s2 = p2 * css[kflag - 1]
        p1r = csr[kflag - 1]


@jit(nopython=True, cache=True)
def _temme_jit(z, dnu, dnu2, caz, rz, tol, both):
    """Temme series for K(dnu, z) and, when *both*, the auxiliary sum for
    K(dnu+1, z).  Returns (s1, s2, smu)."""
    fc = 1.0
    smu = cmath.log(rz)
    fmu = smu * dnu
    csh = cmath.sinh(fmu)
    cch = cmath.cosh(fmu)
    if dnu != 0.0:
        fc = dnu * PI
        fc = fc / math.sin(fc)
        smu = csh / dnu
    # gam(1-z)*gam(1+z) = pi*z/sin(pi*z); t1 = 1/gam(1-dnu), t2 = 1/gam(1+dnu)
    t2 = math.exp(-math.lgamma(1.0 + dnu))
    t1 = 1.0 / (t2 * fc)
    if abs(dnu) > KNU_SMALL_DNU:
        g1 = (t1 - t2) / (dnu + dnu)
    else:
        # series for f0 resolves the indeterminacy for small |dnu|
        ak = 1.0
        s = KNU_GAMMA_SERIES[0]
        for k in range(1, len(KNU_GAMMA_SERIES)):
            ak *= dnu2
            tm = KNU_GAMMA_SERIES[k] * ak
            s += tm
            if abs(tm) < tol:
                break
        g1 = -s
    g2 = (t1 + t2) * 0.5
    f = fc * (cch * g1 + smu * g2)
    e = cmath.exp(fmu)
    p = 0.5 * e / t2
    q = (0.5 / e) / t1
    s1 = f
    s2 = p
    if caz < tol:
        return s1, s2, smu
    ak = 1.0
    a1 = 1.0
    ck = 1.0 + 0j
    bk = 1.0 - dnu2
    cz = 0.25 * (z * z)
    t1 = 0.25 * caz * caz
    while True:
        f = (f * ak + p + q) / bk
        p = p * (1.0 / (ak - dnu))
        q = q * (1.0 / (ak + dnu))
        rak = 1.0 / ak
        ck = (ck * cz) * rak
        s1 = ck * f + s1
        if both:
            s2 = ck * (p - f * ak) + s2
        a1 = a1 * t1 * rak
        bk = bk + ak + ak + 1.0
        ak += 1.0
        if a1 <= tol:
            break
    return s1, s2, smu


@jit(nopython=True, cache=True)
def _backward_index_jit(z, caz, ak, fhs, dnu2, tol):
    """Start index for the Miller recurrence; returns (fk, fhs, ok)."""
    t1 = (DIGITS - 1) * R1M5 * KNU_LOG2_10
    t1 = max(t1, KNU_R2_EXPONENT_MIN)
    t1 = min(t1, KNU_R2_EXPONENT_MAX)
    t2 = TTH * t1 - KNU_R2_OFFSET
    if z.real == 0.0:
        t1 = HPI
    else:
        t1 = abs(math.atan(z.imag / z.real))
    if t2 > caz:
        # empirical index below r2
        a2 = math.sqrt(caz)
        ak = FPI * ak / (tol * math.sqrt(a2))
        aa = KNU_INDEX_A * t1 / (1.0 + caz)
        bb = KNU_INDEX_B * t1 / (KNU_INDEX_C + caz)
        ak = (math.log(ak) + caz * math.cos(aa) / (1.0 + KNU_INDEX_D * caz)) / math.cos(bb)
        return KNU_INDEX_SLOPE * ak * ak / caz + KNU_INDEX_OFFSET, fhs, True

    # forward recurrence finds the index when |z| >= r2
    etest = ak / (PI * caz * tol)
    fk = 1.0
    if etest < 1.0:
        return fk, fhs, True
    fks = 2.0
    ckr = caz + caz + 2.0
    p1r = 0.0
    p2r = 1.0
    for _ in range(KNU_FORWARD_LIMIT):
        ak = fhs / fks
        cbr = ckr / (fk + 1.0)
        ptr = p2r
        p2r = cbr * p2r - p1r * ak
        p1r = ptr
        ckr += 2.0
        fks = fks + fk + fk + 2.0
        fhs = fhs + fk + fk
        fk += 1.0
        if etest < abs(p2r) * fk:
            fk = fk + SPI * t1 * math.sqrt(t2 / caz)
            return fk, abs(0.25 - dnu2), True
    return fk, fhs, False


@jit(nopython=True, cache=True)
def _zbknu_jit(z, fnu, kode, n, tol, elim, alim):
    """JIT-compiled K kernel; returns (y, nz)."""
    y = np.zeros(n, dtype=np.complex128)
    nz = 0
    caz = abs(z)
    cscl = 1.0 / tol
    crsc = tol
    css = (cscl, 1.0, crsc)
    csr = (crsc, 1.0, cscl)
    bry1 = ARM / tol
    bry = (bry1, 1.0 / bry1, HUGE)
    iflag = 0
    koded = kode
    rcaz = 1.0 / caz
    st = complex(z.real * rcaz, -z.imag * rcaz)
    rz = (st + st) * rcaz
    inu = int(fnu + 0.5)
    dnu = fnu - inu
    half_odd = abs(dnu) == 0.5
    dnu2 = 0.0
    if not half_odd and abs(dnu) > tol:
        dnu2 = dnu * dnu

    s1 = 0j
    s2 = 0j
    ck = 0j
    zd = z
    kflag = 2
    recur = True
    if not half_odd and caz <= KNU_SERIES_RADIUS:
        single = inu == 0 and n == 1
        s1, s2, smu = _temme_jit(z, dnu, dnu2, caz, rz, tol, not single)
        if single:
            y[0] = s1
            if koded == 2:
                y[0] = s1 * cmath.exp(z)
            return y, nz
        if (fnu + 1.0) * abs(smu.real) > alim:
            kflag = 3
        scale = css[kflag - 1]
        s2 = (s2 * scale) * rz
        s1 = s1 * scale
        if koded == 2:
            fz = cmath.exp(z)
            s1 = s1 * fz
            s2 = s2 * fz
    else:
        coef = RTHPI / cmath.sqrt(z)
        if koded == 1:
            if z.real > alim:
                # unscaled result would underflow; scale by exp(z) and rescale
                koded = 2
                iflag = 1
            else:
                mag = math.exp(-z.real) * css[kflag - 1]
                coef = coef * complex(mag * math.cos(z.imag), -mag * math.sin(z.imag))
        ak = abs(math.cos(PI * dnu))
        fhs = abs(0.25 - dnu2)
        if half_odd or ak == 0.0 or fhs == 0.0:
            s1 = coef
            s2 = coef
        else:
            fk, fhs, ok = _backward_index_jit(z, caz, ak, fhs, dnu2, tol)
            if not ok:
                return y, NZ_NOT_CONVERGED
            # backward recurrence for the Miller algorithm
            k = int(fk)
            fk = float(k)
            fks = fk * fk
            p1 = 0j
            p2 = complex(tol, 0.0)
            cs = p2
            for _ in range(k):
                a1 = fks - fk
                ak = (fks + fk) / (a1 + fhs)
                rak = 2.0 / (fk + 1.0)
                cb = complex((fk + z.real) * rak, z.imag * rak)
                pt = p2
                p2 = (pt * cb - p1) * ak
                p1 = pt
                cs += p2
                fks = a1 - fk + 1.0
                fk -= 1.0
            # (p2/cs) = (p2/|cs|)*(conj(cs)/|cs|) for better scaling
            rtm = 1.0 / abs(cs)
            s1 = p2 * rtm
            cs = complex(cs.real * rtm, -cs.imag * rtm)
            s1 = (coef * s1) * cs
            if inu == 0 and n == 1:
                recur = False
            else:
                # p1/p2 = (p1/|p2|)*(conj(p2)/|p2|)
                rtm = 1.0 / abs(p2)
                p1 = p1 * rtm
                p2 = complex(p2.real * rtm, -p2.imag * rtm)
                pt = p1 * p2
                ratio = complex(dnu + 0.5 - pt.real, -pt.imag) / z + 1.0
                s2 = ratio * s1

    rescale = False
    if not recur:
        rescale = iflag == 1
    else:
        # forward recursion on the three-term relation, changing scale band
        # near the exponent extremes
        ck = (dnu + 1.0) * rz
        if n == 1:
            inu -= 1
        if inu <= 0:
            if n <= 1:
                s1 = s2
            rescale = iflag == 1
        elif iflag == 0:
            s1, s2, ck, kflag = _advance_jit(s1, s2, ck, rz, kflag, inu, bry, css, csr)
            if n == 1:
                s1 = s2
        else:
            # exp(-z)-scaled values: search for two consecutive on-scale
            # members, scaling the recurrence down on the way
            helim = 0.5 * elim
            celm = math.exp(-elim)
            ascle = bry[0]
            ic = -1
            j = 1
            cy = np.zeros(2, dtype=np.complex128)
            found = False
            i = 0
            while i < inu:
                i += 1
                st = s2
                s2 = st * ck + s1
                s1 = st
                ck += rz
                alas = _safe_log_jit(abs(s2))
                if -zd.real + alas >= -elim:
                    cv = _rescaled_exp_jit(cmath.log(s2) - zd, tol)
                    if _zuchk_jit(cv, ascle, tol) == 0:
                        j = 1 - j
                        cy[j] = cv
                        if ic == i - 1:
                            found = True
                            break
                        ic = i
                        continue
                if alas >= helim:
                    zd = complex(zd.real - elim, zd.imag)
                    s1 = s1 * celm
                    s2 = s2 * celm
            if found:
                kflag = 1
                s2 = cy[j]
                s1 = cy[1 - j]
                if i < inu:
                    s1, s2, ck, kflag = _advance_jit(s1, s2, ck, rz, kflag, inu - i, bry, css, csr)
                if n == 1:
                    s1 = s2
            else:
                if n == 1:
                    s1 = s2
                rescale = True

    if rescale:
        y[0] = s1
        if n > 1:
            y[1] = s2
        y, nz = _zkscl_jit(zd, fnu, y, rz, bry[0], tol, elim)
        left = n - nz
        if left <= 0:
            return y, nz
        s1 = y[nz]
        y[nz] = s1 * csr[0]
        if left == 1:
            return y, nz
        s2 = y[nz + 1]
        y[nz + 1] = s2 * csr[0]
        if left == 2:
            return y, nz
        ck = (fnu + (nz + 1)) * rz
        _fill_jit(y, nz + 2, s1, s2, ck, rz, 1, bry, css, csr)
        return y, nz

    scale = csr[kflag - 1]
    y[0] = s1 * scale
    if n == 1:
        return y, nz
    y[1] = s2 * scale
    if n == 2:
        return y, nz
    _fill_jit(y, 2, s1, s2, ck, rz, kflag, bry, css, csr)
    return y, nz


def zbknu(z: complex, fnu: float, kode: int = 1, n: int = 1,
          tol: Optional[float] = None, elim: Optional[float] = None,
          alim: Optional[float] = None) -> KernelResult:
    """
    K(fnu+k, z), k = 0..n-1, in the right half plane.

    Parameters
    ----------
    z : complex
        Argument, ``z != 0``; results are meaningful for ``Re z >= 0``.
    fnu : float
        First order, ``fnu >= 0``.
    kode : int
        1 for K, 2 for exp(z)*K.
    n : int
        Number of consecutive orders.
    tol, elim, alim : float, optional
        Scale parameters; omitted ones come from ``scale_parameters``.

    Returns
    -------
    KernelResult
        ``nz`` entries (from the low orders) underflowed to zero, or
        ``nz = -2`` when the Miller start index could not be found.
    """
    z, fnu, kode, n = complex(z), float(fnu), int(kode), int(n)
    if not (check_argument(z, nonzero=True) and check_order(fnu, n) and check_scaling(kode)):
        return rejected("zbknu z=%r fnu=%r kode=%r n=%r", z, fnu, kode, n)
    p = scale_parameters(tol, elim=elim, alim=alim)
    y, nz = _zbknu_jit(z, fnu, kode, n, p.tol, p.elim, p.alim)
    log.debug2("zbknu z=%r fnu=%g n=%d nz=%d", z, fnu, n, nz)
    if nz < 0:
        log.debug("zbknu: Miller start index not found at z=%r", z)
    return KernelResult(tuple(complex(v) for v in y), int(nz), ierr_from_nz(nz))
