"""Exceptions raised by the binary HGF."""
from __future__ import annotations

from typing import Optional


class HGFError(Exception):
    """Base class for all exceptions raised by :mod:`binary_hgf`."""


class InvalidParameterRegion(HGFError):
    """Parameters are in a region where the model assumptions are violated.

    Raised when the level-3 posterior precision of a processed trial is not
    strictly positive (or the updated beliefs stop being finite). The whole
    trajectory computation is aborted; callers running a parameter search
    should treat the parameter point as infeasible.
    """

    def __init__(self, trial: int, pi3: float, message: Optional[str] = None) -> None:
        self.trial = trial
        self.pi3 = pi3
        if message is None:
            message = (
                f"non-positive pi3={pi3!r} at trial {trial}: parameters are in a region "
                "where model assumptions are violated"
            )
        super().__init__(message)


class ObservationError(HGFError, ValueError):
    """Observation file or array that cannot be read as binary outcomes."""


__all__ = ["HGFError", "InvalidParameterRegion", "ObservationError"]
