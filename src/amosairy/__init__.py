"""
amosairy: complex Airy functions by way of modified Bessel functions.

The ``libamos`` sub-package holds the numerical kernels (power series,
asymptotic expansion, Miller recurrence, K kernel, analytic continuation and
the scaling bookkeeping they share); ``airy`` exposes Ai and Ai'.
"""

# Import main sub-packages
from . import libamos
from . import airy

__all__ = [
    "libamos",
    "airy",
]
