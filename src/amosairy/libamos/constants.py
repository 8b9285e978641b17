"""
Machine characteristics and algorithm-selection constants for the complex
Airy/Bessel kernels, matching the D1MACH/I1MACH conventions of the AMOS
library.

Every threshold the kernels branch on is named here.  The values are the
published AMOS constants and are copied, not re-derived; changing any of
them changes which algorithm handles a given argument.

All module-level names are plain Python floats/ints so the numba kernels can
freeze them as compile-time constants.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

_F64 = np.finfo(np.float64)


class MachineConstants:
    """
    Floating-point model of the host in AMOS terms.

    Attributes
    ----------
    tiny : float
        Smallest positive normalized double (D1MACH(1)).
    huge : float
        Largest finite double (D1MACH(2)).
    eps : float
        Relative spacing ``2**(1-digits)`` (D1MACH(4)).
    log10_radix : float
        ``log10(2)`` (D1MACH(5)).
    int_max : int
        Largest 32-bit signed integer (I1MACH(9)).
    digits : int
        Mantissa digits in base 2 (I1MACH(14)).
    emin, emax : int
        Exponent range for a mantissa in [0.5, 1) (I1MACH(15), I1MACH(16)).
    """
    tiny = float(_F64.tiny)
    huge = float(_F64.max)
    eps = float(_F64.eps)
    log10_radix = float(np.log10(2.0))
    int_max = int(np.iinfo(np.int32).max)
    digits = int(_F64.nmant) + 1
    emin = int(_F64.minexp) + 1
    emax = int(_F64.maxexp)


TINY = MachineConstants.tiny
HUGE = MachineConstants.huge
EPS = MachineConstants.eps
R1M5 = MachineConstants.log10_radix
I32MAX = MachineConstants.int_max
DIGITS = MachineConstants.digits

# ---------------------------------------------------------------------------
# Mathematical constants (AMOS literals)
# ---------------------------------------------------------------------------
PI = 3.14159265358979324
HPI = 1.57079632679489662  # pi/2
RTHPI = 1.25331413731550025  # sqrt(pi/2)
RTPI = 0.159154943091895336  # 1/(2 pi)
SPI = 1.90985931710274403  # 6/pi
FPI = 1.89769999331517738  # backward-index scale
TTH = 6.66666666666666667e-01  # 2/3

# ---------------------------------------------------------------------------
# Exponent-range parameters
# ---------------------------------------------------------------------------
LN10_APPROX = 2.303
ALIM_MARGIN_CAP = 41.45
DIGITS_CAP = 18.0
RL_SLOPE = 1.2
RL_OFFSET = 3.0
UNDERFLOW_GUARD = 1.0e3  # 1e3*tiny is the smallest magnitude kept on scale

# ---------------------------------------------------------------------------
# Airy dispatcher
# ---------------------------------------------------------------------------
AIRY_SERIES_RADIUS = 1.0
AIRY_SERIES_TERMS = 25
AIRY_C1 = 3.55028053887817239e-01  # Ai(0)
AIRY_C2 = 2.58819403792806798e-01  # -Ai'(0)
AIRY_COEF = 1.83776298473930683e-01  # 1/(pi*sqrt(3))

# ---------------------------------------------------------------------------
# Analytic continuation / I-function selection
# ---------------------------------------------------------------------------
CONTINUATION_SERIES_RADIUS = 2.0

# ---------------------------------------------------------------------------
# K-function kernel
# ---------------------------------------------------------------------------
KNU_SERIES_RADIUS = 2.0  # R1
KNU_FORWARD_LIMIT = 30  # KMAX
KNU_SMALL_DNU = 0.1
KNU_GAMMA_SERIES = (
    5.77215664901532861e-01,
    -4.20026350340952355e-02,
    -4.21977345555443367e-02,
    7.21894324666309954e-03,
    -2.15241674114950973e-04,
    -2.01348547807882387e-05,
    1.13302723198169588e-06,
    6.11609510448141582e-09,
)
KNU_LOG2_10 = 3.321928094
KNU_R2_EXPONENT_MIN = 12.0
KNU_R2_EXPONENT_MAX = 60.0
KNU_R2_OFFSET = 6.0
KNU_INDEX_A = 3.0
KNU_INDEX_B = 14.7
KNU_INDEX_C = 28.0
KNU_INDEX_D = 0.008
KNU_INDEX_SLOPE = 0.12125
KNU_INDEX_OFFSET = 1.5

# ---------------------------------------------------------------------------
# Miller recurrence for I
# ---------------------------------------------------------------------------
MILLER_INDEX_LIMIT = 80


def _elim() -> float:
    k = min(abs(MachineConstants.emin), abs(MachineConstants.emax))
    return LN10_APPROX * (k * R1M5 - 3.0)


def _digits10() -> float:
    return R1M5 * (DIGITS - 1)


TOL = max(EPS, 1.0e-18)
ELIM = _elim()
ALIM = ELIM + max(-_digits10() * LN10_APPROX, -ALIM_MARGIN_CAP)
RL = RL_SLOPE * min(_digits10(), DIGITS_CAP) + RL_OFFSET
ARM = UNDERFLOW_GUARD * TINY
ASCLE = ARM / TOL


@dataclass(frozen=True)
class ScaleParameters:
    """
    Scale parameters shared by every kernel in one evaluation.

    Attributes
    ----------
    tol : float
        Relative accuracy requested, never below machine epsilon.
    elim : float
        Exponent limit: ``exp(-elim)`` is on the edge of underflow.
    alim : float
        ``elim`` less the decimal precision, where scaling must start.
    rl : float
        Lower |z| bound for the large-argument expansion of I.
    ascle : float
        Underflow magnitude floor ``1e3*tiny/tol``.
    """
    tol: float
    elim: float
    alim: float
    rl: float
    ascle: float


def scale_parameters(tol: Optional[float] = None, elim: Optional[float] = None,
                     alim: Optional[float] = None, rl: Optional[float] = None,
                     ascle: Optional[float] = None) -> ScaleParameters:
    """
    Derive the scale parameters for a call.

    Every kernel dispatcher resolves its omitted parameters here, so a call
    that overrides only ``tol`` still gets a consistent ``ascle``.

    Parameters
    ----------
    tol : float, optional
        Requested relative accuracy.  Values finer than machine epsilon are
        raised to it; ``None`` uses the library default.
    elim, alim, rl, ascle : float, optional
        Explicit overrides; ``None`` keeps the machine-derived value
        (``ascle`` follows ``tol``).

    Returns
    -------
    ScaleParameters
    """
    tol = TOL if tol is None else max(float(tol), EPS)
    return ScaleParameters(
        tol=tol,
        elim=ELIM if elim is None else float(elim),
        alim=ALIM if alim is None else float(alim),
        rl=RL if rl is None else float(rl),
        ascle=ARM / tol if ascle is None else float(ascle),
    )
