"""Three-level HGF for binary outcomes.

Background:
    Level 1 is the observed binary outcome, level 2 a continuous quantity whose
    sigmoid is the outcome probability, level 3 the log-volatility of level 2.
    Beliefs are updated trial by trial with precision-weighted prediction errors.

Input/Output Overview:
    - ``compute`` maps (parameters, observations, ignore) to a ``Trajectory``
      and the ``[T, 3, 2]`` inference tensor consumed by response models.
    - Fails with ``InvalidParameterRegion`` on the first trial whose level-3
      posterior precision is not positive.

Math Notes:
    mu1hat = s(mu2')                     pi1hat = 1 / (mu1hat (1 - mu1hat))
    da1    = u - mu1hat
    pi2hat = 1 / (1/pi2' + exp(ka mu3' + om))
    pi2    = pi2hat + 1/pi1hat           mu2 = mu2' + da1 / pi2
    da2    = (1/pi2 + (mu2 - mu2')^2) pi2hat - 1
    pi3hat = 1 / (1/pi3' + th)           w2 = exp(ka mu3' + om) pi2hat
    pi3    = pi3hat + 1/2 ka^2 w2 (w2 + (2 w2 - 1) da2)
    mu3    = mu3' + 1/2 ka w2 da2 / pi3
    (primes denote the previous trial's posterior)
"""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple, Union

import numpy as np
from scipy.special import expit

from .errors import InvalidParameterRegion
from .parameters import ParameterSet, TransformBounds
from .state import IgnoreLike, TrialPolicy, TrialState, policy_mask
from .trajectory import Trajectory

ParamsLike = Union[ParameterSet, Sequence[float], np.ndarray]


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def update(prev: TrialState, u: float, params: ParameterSet, trial: int) -> TrialState:
    """Run one processed trial of the recursion.

    Args:
        prev: Posterior state of trial ``trial - 1``.
        u: Observed outcome (0 or 1).
        params: Native-space parameters.
        trial: 1-based index of the trial, reported on failure.

    Returns:
        TrialState: Posterior and prediction quantities of this trial.

    Raises:
        InvalidParameterRegion: ``pi3`` is not strictly positive, or the
            updated posterior is not finite.
    """

    ka, om, th = params.kappa, params.omega, params.theta

    # 1st level
    mu1hat = float(expit(prev.mu2))
    sa1hat = mu1hat * (1.0 - mu1hat)
    pi1hat = 1.0 / sa1hat if sa1hat > 0.0 else math.inf
    mu1 = float(u)
    da1 = mu1 - mu1hat

    # 2nd level
    vol2 = _exp(ka * prev.mu3 + om)
    pi2hat = 1.0 / (1.0 / prev.pi2 + vol2)
    pi2 = pi2hat + sa1hat
    mu2 = prev.mu2 + da1 / pi2
    da2 = (1.0 / pi2 + (mu2 - prev.mu2) ** 2) * pi2hat - 1.0

    # 3rd level
    pi3hat = 1.0 / (1.0 / prev.pi3 + th)
    w2 = vol2 * pi2hat
    pi3 = pi3hat + 0.5 * ka ** 2 * w2 * (w2 + (2.0 * w2 - 1.0) * da2)
    if not pi3 > 0.0:  # also catches nan
        raise InvalidParameterRegion(trial, pi3)
    mu3 = prev.mu3 + 0.5 * ka * w2 * da2 / pi3

    if not all(math.isfinite(v) for v in (mu2, pi2, mu3, pi3)):
        raise InvalidParameterRegion(
            trial, pi3, f"non-finite posterior at trial {trial} (mu2={mu2}, pi2={pi2}, mu3={mu3}, pi3={pi3})"
        )

    return TrialState(
        mu1=mu1, mu2=mu2, mu3=mu3, pi2=pi2, pi3=pi3,
        mu1hat=mu1hat, pi1hat=pi1hat, pi2hat=pi2hat, pi3hat=pi3hat,
        w2=w2, da1=da1, da2=da2,
    )


def run_recursion(params: ParameterSet, u: np.ndarray, policies: np.ndarray) -> List[TrialState]:
    """Fold the update over all trials; returns states indexed ``0..T``."""

    states = [TrialState.prior(params)]
    for k, (u_k, policy) in enumerate(zip(u, policies), start=1):
        prev = states[-1]
        if policy == TrialPolicy.SKIP:
            states.append(prev)
        else:
            states.append(update(prev, u_k, params, k))
    return states


def resolve_parameters(
    params: ParamsLike, transformed: bool = False, bounds: TransformBounds = TransformBounds()
) -> ParameterSet:
    if isinstance(params, ParameterSet):
        if transformed:
            raise TypeError("transformed=True expects a raw parameter vector, not a ParameterSet")
        return params
    if transformed:
        return ParameterSet.from_transformed(params, bounds)
    return ParameterSet.from_vector(params)


def compute(
    params: ParamsLike,
    observations: Sequence[float],
    ignore: IgnoreLike = None,
    transformed: bool = False,
    bounds: TransformBounds = TransformBounds(),
) -> Tuple[Trajectory, np.ndarray]:
    """Compute belief trajectories for a binary observation sequence.

    Args:
        params: ``ParameterSet`` or a 7-vector in native space, or in
            transformed space when ``transformed`` is set.
        observations: Binary outcomes ``u(1..T)``, ``T >= 1``.
        ignore: 1-based indices of trials treated as missing, or a boolean
            mask of length ``T``. Beliefs are carried forward on those trials.
        transformed: Whether ``params`` is in the unconstrained space.
        bounds: Upper bounds of the bounded transforms.

    Returns:
        (Trajectory, np.ndarray): trial-aligned series and the ``[T, 3, 2]``
        inference tensor.

    Raises:
        InvalidParameterRegion: On the first trial where ``pi3 <= 0``.
    """

    p = resolve_parameters(params, transformed, bounds)
    u = np.asarray(observations, dtype=float).reshape(-1)
    policies = policy_mask(u.size, ignore)

    states = run_recursion(p, u, policies)
    traj = Trajectory.from_states(states)
    return traj, traj.inference_tensor()


__all__ = ["compute", "update", "run_recursion", "resolve_parameters"]
