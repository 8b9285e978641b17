"""
Public Airy surface.

``airy`` returns the full result (value, underflow count, error flag);
``ai``, ``ai_deriv``, ``aie`` and ``aie_deriv`` return the value alone and
give NaN when no value could be computed.

Example
-------
>>> from amosairy import airy
>>> round(airy.ai(1.0).real, 10)
0.1352924163
"""
import cmath
from typing import Union

from .libamos.status import AiryResult, Ierr, Scaling
from .libamos.zairy import zairy

Number = Union[complex, float, int]

# no value is produced for these flags
_NO_VALUE = (Ierr.INPUT, Ierr.OVERFLOW, Ierr.RANGE, Ierr.CONVERGENCE)


def airy(z: Number, deriv: int = 0, scaling: Scaling = Scaling.UNSCALED) -> AiryResult:
    """
    Ai(z) or Ai'(z) with status.

    Parameters
    ----------
    z : complex
        Argument.
    deriv : int
        0 for Ai, 1 for Ai'.
    scaling : Scaling
        ``Scaling.SCALED`` multiplies the result by exp((2/3) z**(3/2)).

    Returns
    -------
    AiryResult
    """
    return zairy(z, deriv, int(scaling))


def _value(result: AiryResult) -> complex:
    if result.ierr in _NO_VALUE:
        return complex(cmath.nan, cmath.nan)
    return result.value


def ai(z: Number) -> complex:
    """Ai(z)."""
    return _value(zairy(z, 0, Scaling.UNSCALED))


def ai_deriv(z: Number) -> complex:
    """Ai'(z)."""
    return _value(zairy(z, 1, Scaling.UNSCALED))


def aie(z: Number) -> complex:
    """exp(zeta)*Ai(z), zeta = (2/3) z**(3/2)."""
    return _value(zairy(z, 0, Scaling.SCALED))


def aie_deriv(z: Number) -> complex:
    """exp(zeta)*Ai'(z), zeta = (2/3) z**(3/2)."""
    return _value(zairy(z, 1, Scaling.SCALED))
