"""
Asymptotic expansion of I(fnu, z) for large |z|.

The expansion in 1/(8z) is truncated once the term bound drops below tol
relative to the leading reciprocal power, which is what carries the
imaginary part when z is nearly imaginary.  The reflected exp(-2z) series
is added whenever it is representable.
"""
import cmath
import math
from typing import Optional

import numpy as np
from numba import jit

from .constants import ARM, PI, RTPI, scale_parameters
from .logger import get_logger
from .status import (NZ_NOT_CONVERGED, NZ_OVERFLOW, KernelResult,
                     check_argument, check_order, check_scaling, ierr_from_nz,
                     rejected)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _zasyi_jit(z, fnu, kode, n, rl, tol, elim, alim):
    """JIT-compiled large-|z| expansion of I; returns (y, nz)."""
    y = np.zeros(n, dtype=np.complex128)
    az = abs(z)
    rtr1 = math.sqrt(ARM)
    il = min(2, n)
    dfnu = fnu + (n - il)

    raz = 1.0 / az
    st = complex(z.real * raz, -z.imag * raz)
    ak1 = cmath.sqrt(complex(RTPI * st.real * raz, RTPI * st.imag * raz))
    cz = z
    if kode == 2:
        cz = complex(0.0, z.imag)
    if abs(cz.real) > elim:
        return y, NZ_OVERFLOW
    dnu2 = dfnu + dfnu
    koded = 1
    if not (abs(cz.real) > alim and n > 2):
        koded = 0
        ak1 = ak1 * cmath.exp(cz)
    fdn = 0.0
    if dnu2 > rtr1:
        fdn = dnu2 * dnu2
    ez = z * 8.0
    aez = 8.0 * az
    s = tol / aez
    jl = int(rl + rl) + 2

    # exp(pi*(0.5+fnu+n-il)*i), reduced to keep significance for large fnu
    p1 = 0j
    if z.imag != 0.0:
        inu = int(fnu)
        arg = (fnu - inu) * PI
        inu = inu + n - il
        bk = math.cos(arg)
        if z.imag < 0.0:
            bk = -bk
        p1 = complex(-math.sin(arg), bk)
        if inu % 2 != 0:
            p1 = -p1

    for k in range(1, il + 1):
        sqk = fdn - 1.0
        atol = s * abs(sqk)
        sgn = 1.0
        cs1 = 1.0 + 0j
        cs2 = 1.0 + 0j
        ck = 1.0 + 0j
        ak = 0.0
        aa = 1.0
        bb = aez
        dk = ez
        converged = False
        for _ in range(jl):
            ck = ck / dk * sqk
            cs2 += ck
            sgn = -sgn
            cs1 += ck * sgn
            dk += ez
            aa = aa * abs(sqk) / bb
            bb += aez
            ak += 8.0
            sqk -= ak
            if aa <= atol:
                converged = True
                break
        if not converged:
            return y, NZ_NOT_CONVERGED
        s2 = cs1
        if z.real + z.real < elim:
            s2 += cmath.exp(-(z + z)) * p1 * cs2
        fdn = fdn + 8.0 * dfnu + 4.0
        p1 = -p1
        y[n - il + k - 1] = s2 * ak1

    if n <= 2:
        return y, 0
    k = n - 2
    ak = float(k)
    rz = complex(2.0 * st.real * raz, 2.0 * st.imag * raz)
    for _ in range(3, n + 1):
        y[k - 1] = (ak + fnu) * (rz * y[k]) + y[k + 1]
        ak -= 1.0
        k -= 1
    if koded == 0:
        return y, 0
    ck = cmath.exp(cz)
    for i in range(n):
        y[i] = y[i] * ck
    return y, 0


def zasyi(z: complex, fnu: float, kode: int = 1, n: int = 1,
          rl: Optional[float] = None, tol: Optional[float] = None,
          elim: Optional[float] = None, alim: Optional[float] = None) -> KernelResult:
    """
    I(fnu+k, z), k = 0..n-1, by the asymptotic expansion for large |z|.

    Parameters
    ----------
    z : complex
        Argument, ``Re z >= 0`` and |z| >= rl for full accuracy.
    fnu : float
        First order, ``fnu >= 0``.
    kode : int
        1 for I, 2 for exp(-|Re z|)*I.
    n : int
        Number of consecutive orders.
    rl : float, optional
        Large-|z| threshold; bounds the number of terms at 2*rl + 2.
    tol, elim, alim : float, optional
        Scale parameters; omitted ones come from ``scale_parameters``.

    Returns
    -------
    KernelResult
        ``nz = -1`` when |Re z| > elim (overflow), ``nz = -2`` when the
        expansion did not converge.
    """
    z, fnu, kode, n = complex(z), float(fnu), int(kode), int(n)
    if not (check_argument(z, nonzero=True) and check_order(fnu, n) and check_scaling(kode)):
        return rejected("zasyi z=%r fnu=%r kode=%r n=%r", z, fnu, kode, n)
    p = scale_parameters(tol, elim=elim, alim=alim, rl=rl)
    y, nz = _zasyi_jit(z, fnu, kode, n, p.rl, p.tol, p.elim, p.alim)
    if nz < 0:
        log.debug("zasyi failed with nz=%d at z=%r", nz, z)
    return KernelResult(tuple(complex(v) for v in y), int(nz), ierr_from_nz(nz))
