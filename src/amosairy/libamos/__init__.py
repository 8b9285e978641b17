"""libamos sub-package: Bessel I/K kernels and the Airy dispatcher."""

# Import modules themselves (allows: from amosairy.libamos import besselk)
from . import asymptotic
from . import besselk
from . import constants
from . import continuation
from . import logger
from . import miller
from . import scaling
from . import series
from . import status
from . import zairy

__all__ = [
    "asymptotic",
    "besselk",
    "constants",
    "continuation",
    "logger",
    "miller",
    "scaling",
    "series",
    "status",
    "zairy",
]
