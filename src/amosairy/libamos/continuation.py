"""
Analytic continuation of K(fnu, z) into the left half plane.

    K(fnu, zn*exp(mp)) = K(fnu, zn)*exp(-mp*fnu) - mp*I(fnu, zn),
    mp = i*pi*mr,  zn = -z,

so the rotated K needs I and K at the reflected argument, which lies in the
right half plane.  I(fnu, zn) comes from the power series, the asymptotic
expansion or the Miller algorithm depending on |z| against the order, and
K(fnu, zn) from the K kernel.
"""
import math
from typing import Optional

import numpy as np
from numba import jit

from .asymptotic import _zasyi_jit
from .besselk import _zbknu_jit
from .constants import (ARM, CONTINUATION_SERIES_RADIUS, PI,
                        scale_parameters)
from .logger import get_logger
from .miller import _zmlri_jit
from .scaling import _zs1s2_jit
from .series import _zseri_jit
from .status import (NZ_NOT_CONVERGED, NZ_OVERFLOW, KernelResult,
                     check_argument, check_order, check_rotation,
                     check_scaling, ierr_from_nz, rejected)

log = get_logger(__name__)


@jit(nopython=True, cache=True)
def _i_function_jit(zn, fnu, kode, n, rl, tol, elim, alim):
    """I(fnu+k, zn) by the first applicable evaluator; returns (y, nw)."""
    az = abs(zn)
    dfnu = fnu + (n - 1)
    if az <= CONTINUATION_SERIES_RADIUS or az * az * 0.25 <= dfnu + 1.0:
        # nw < 0 only flags I orders lost to underflow; beside the K term
        # they are below tol, so no other evaluator is tried
        y, nw = _zseri_jit(zn, fnu, kode, n, tol, elim, alim)
        return y, 0
    if az >= rl:
        y, nw = _zasyi_jit(zn, fnu, kode, n, rl, tol, elim, alim)
        if nw != NZ_NOT_CONVERGED:
            return y, nw
    return _zmlri_jit(zn, fnu, kode, n, tol)


@jit(nopython=True, cache=True)
def _zacai_jit(z, fnu, kode, mr, n, rl, tol, elim, alim):
    """JIT-compiled continuation; returns (y, nz) with y[0] the rotated K."""
    nz = 0
    zn = -z
    y, nw = _i_function_jit(zn, fnu, kode, n, rl, tol, elim, alim)
    if nw < 0:
        return y, NZ_NOT_CONVERGED if nw == NZ_NOT_CONVERGED else NZ_OVERFLOW

    cy, nw = _zbknu_jit(zn, fnu, kode, 1, tol, elim, alim)
    if nw != 0:
        return y, NZ_NOT_CONVERGED if nw == NZ_NOT_CONVERGED else NZ_OVERFLOW

    sgn = -math.copysign(PI, float(mr))
    csgn = complex(0.0, sgn)
    if kode == 2:
        yy = -zn.imag
        csgn = complex(-csgn.imag * math.sin(yy), csgn.imag * math.cos(yy))

    # exp(-i*pi*mr*fnu) reduced to keep significance for large fnu
    inu = int(fnu)
    arg = (fnu - inu) * sgn
    cspn = complex(math.cos(arg), math.sin(arg))
    if inu % 2 != 0:
        cspn = -cspn

    c1 = cy[0]
    c2 = y[0]
    if kode == 2:
        c1, c2, nw, _ = _zs1s2_jit(zn, c1, c2, ARM / tol, alim, 0)
        nz += nw
    y[0] = cspn * c1 + csgn * c2
    return y, nz


def zacai(z: complex, fnu: float, kode: int = 1, mr: int = 1, n: int = 1,
          rl: Optional[float] = None, tol: Optional[float] = None,
          elim: Optional[float] = None, alim: Optional[float] = None) -> KernelResult:
    """
    K(fnu, z*exp(i*pi*mr)) for z in the right half plane, i.e. K at -z.

    Parameters
    ----------
    z : complex
        Argument to rotate, ``z != 0``.
    fnu : float
        Order, ``fnu >= 0``.
    kode : int
        1 for K, 2 for exp(zn)*K with ``zn = -z``.
    mr : int
        Rotation direction, +1 or -1.
    n : int
        Number of I orders evaluated at the reflected argument; only the
        first entry of the result is the continued K.
    rl, tol, elim, alim : float, optional
        Scale parameters; omitted ones come from ``scale_parameters``.

    Returns
    -------
    KernelResult
        ``nz = -1`` on overflow and ``nz = -2`` when no evaluator converged.
    """
    z, fnu, kode, mr, n = complex(z), float(fnu), int(kode), int(mr), int(n)
    if not (check_argument(z, nonzero=True) and check_order(fnu, n)
            and check_scaling(kode) and check_rotation(mr)):
        return rejected("zacai z=%r fnu=%r kode=%r mr=%r n=%r", z, fnu, kode, mr, n)
    p = scale_parameters(tol, elim=elim, alim=alim, rl=rl)
    y, nz = _zacai_jit(z, fnu, kode, mr, n, p.rl, p.tol, p.elim, p.alim)
    if nz < 0:
        log.debug("zacai failed with nz=%d at z=%r", nz, z)
    return KernelResult(tuple(complex(v) for v in np.asarray(y)), int(nz), ierr_from_nz(nz))
