"""Three-level Hierarchical Gaussian Filter for binary outcomes."""

from .errors import HGFError, InvalidParameterRegion, ObservationError
from .filter import compute
from .parameters import ParameterSet, TransformBounds
from .state import TrialPolicy, TrialState
from .trajectory import Trajectory

__all__ = [
    "compute",
    "ParameterSet",
    "TransformBounds",
    "TrialState",
    "TrialPolicy",
    "Trajectory",
    "HGFError",
    "InvalidParameterRegion",
    "ObservationError",
]
