"""
Status values, result containers and input checks shared by the kernels.

The numerical path never raises: kernels report through an underflow count
``nz`` (negative values are failure sentinels) and the Python dispatchers
translate those into an :class:`Ierr` flag.
"""
import math
from enum import IntEnum
from typing import NamedTuple, Tuple

from .logger import get_logger

log = get_logger(__name__)

# Negative nz sentinels returned by the kernels.
NZ_OVERFLOW = -1
NZ_NOT_CONVERGED = -2


class Scaling(IntEnum):
    """Exponential scaling option (``kode``)."""
    UNSCALED = 1
    SCALED = 2


class Ierr(IntEnum):
    """Error flag of a top-level evaluation."""
    NONE = 0
    INPUT = 1  # rejected before any computation
    OVERFLOW = 2  # |result| would overflow; no value
    PRECISION = 3  # value computed, fewer than half the digits are reliable
    RANGE = 4  # |z| too large for any significant digit; no value
    CONVERGENCE = 5  # an evaluator exhausted its iteration cap


class KernelResult(NamedTuple):
    """Value sequence, underflow count and error flag of a kernel call."""
    values: Tuple[complex, ...]
    nz: int
    ierr: Ierr


class AiryResult(NamedTuple):
    """Airy value, underflow count and error flag."""
    value: complex
    nz: int
    ierr: Ierr


def ierr_from_nz(nz: int) -> Ierr:
    """Map a kernel nz to the error flag reported to callers."""
    if nz == NZ_NOT_CONVERGED:
        return Ierr.CONVERGENCE
    if nz < 0:
        return Ierr.OVERFLOW
    return Ierr.NONE


def rejected(reason: str, *args) -> KernelResult:
    """Result for an input rejected before computation."""
    log.warning("rejected input: " + reason, *args)
    return KernelResult((), 0, Ierr.INPUT)


def check_argument(z: complex, nonzero: bool = False) -> bool:
    """True when *z* is finite (and non-zero when *nonzero*)."""
    if not (math.isfinite(z.real) and math.isfinite(z.imag)):
        return False
    return not (nonzero and z == 0)


def check_order(fnu: float, n: int) -> bool:
    """True for a finite order ``fnu >= 0`` and a sequence length ``n >= 1``."""
    return math.isfinite(fnu) and fnu >= 0.0 and n >= 1


def check_scaling(kode: int) -> bool:
    return kode in (Scaling.UNSCALED, Scaling.SCALED)


def check_rotation(mr: int) -> bool:
    return mr in (-1, 1)
