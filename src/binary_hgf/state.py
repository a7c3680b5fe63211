"""Per-trial belief state records and the skip policy."""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, fields
from typing import Iterable, Union

import numpy as np
from scipy.special import expit

from .parameters import ParameterSet

NAN = math.nan


class TrialPolicy(enum.IntEnum):
    PROCESS = 0
    SKIP = 1


@dataclass(frozen=True)
class TrialState:
    """Beliefs after one trial.

    ``mu*``/``pi*`` are posterior means and precisions; ``*hat`` fields are the
    predictions made before the trial's outcome was seen. Level 1 keeps no
    precision of its own. On the synthetic trial 0 every prediction and error
    field is ``nan``.
    """

    mu1: float
    mu2: float
    mu3: float
    pi2: float
    pi3: float
    mu1hat: float = NAN
    pi1hat: float = NAN
    pi2hat: float = NAN
    pi3hat: float = NAN
    w2: float = NAN
    da1: float = NAN
    da2: float = NAN

    @classmethod
    def prior(cls, params: ParameterSet) -> "TrialState":
        return cls(
            mu1=float(expit(params.mu2_0)),
            mu2=params.mu2_0,
            mu3=params.mu3_0,
            pi2=1.0 / params.sa2_0,
            pi3=1.0 / params.sa3_0,
        )

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))


IgnoreLike = Union[Iterable[int], np.ndarray, None]


def policy_mask(n_trials: int, ignore: IgnoreLike = None) -> np.ndarray:
    """Build the per-trial policy array once, before the recursion.

    Args:
        n_trials: Number of observed trials ``T``.
        ignore: 1-based trial indices to skip, or a boolean mask of length ``T``.

    Returns:
        np.ndarray: ``TrialPolicy`` codes of shape ``[T]``.
    """

    mask = np.full(n_trials, TrialPolicy.PROCESS, dtype=np.int8)
    if ignore is None:
        return mask
    arr = np.asarray(ignore if isinstance(ignore, np.ndarray) else list(ignore))
    if arr.dtype == bool:
        if arr.shape != (n_trials,):
            raise ValueError(f"boolean ignore mask must have shape ({n_trials},), got {arr.shape}")
        mask[arr] = TrialPolicy.SKIP
    elif arr.size:
        idx = arr.astype(int)
        if idx.min() < 1 or idx.max() > n_trials:
            raise ValueError(f"ignore indices must lie in [1, {n_trials}], got {sorted(set(idx.tolist()))}")
        mask[idx - 1] = TrialPolicy.SKIP
    return mask


__all__ = ["TrialState", "TrialPolicy", "policy_mask", "IgnoreLike"]
