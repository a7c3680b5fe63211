"""Binary observation sources.

Input/Output Overview:
    - ``load_observations`` reads a text/CSV file with one trial per row. The
      first column holds the outcome (0/1); an optional second column flags
      trials to ignore (non-zero = ignore).
    - ``simulate_binary_inputs`` draws outcomes from a blocked probability
      schedule, e.g. a reversal-learning design.

Tensor Dimensions:
    - observations: [T]
    - ignore mask: [T] (bool)
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from scipy.special import expit

from .errors import ObservationError


def validate_binary(u: np.ndarray) -> np.ndarray:
    u = np.asarray(u, dtype=float).reshape(-1)
    if u.size == 0:
        raise ObservationError("observation sequence is empty")
    bad = ~np.isin(u, (0.0, 1.0))
    if np.any(bad):
        first = int(np.flatnonzero(bad)[0])
        raise ObservationError(f"non-binary observation {u[first]!r} at trial {first + 1}")
    return u


def load_observations(path: Union[str, Path]) -> Tuple[np.ndarray, np.ndarray]:
    """Read outcomes and the ignore mask from ``path``.

    Args:
        path: Text file; ``.csv`` files are comma separated, anything else is
            split on whitespace. Lines starting with ``#`` are skipped.

    Returns:
        (np.ndarray, np.ndarray): outcomes ``[T]`` and boolean ignore mask ``[T]``.

    Raises:
        ObservationError: File has more than two columns or non-binary outcomes.
    """

    path = Path(path)
    delimiter = "," if path.suffix.lower() == ".csv" else None
    raw = np.loadtxt(path, delimiter=delimiter, comments="#", ndmin=2, dtype=float)
    if raw.shape[1] > 2:
        raise ObservationError(f"{path}: expected 1 or 2 columns, got {raw.shape[1]}")
    u = validate_binary(raw[:, 0])
    ignore = raw[:, 1] != 0 if raw.shape[1] == 2 else np.zeros(u.size, dtype=bool)
    return u, ignore


def simulate_binary_inputs(
    n_trials: int,
    probabilities: Sequence[float] = (0.8, 0.2, 0.8, 0.2),
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample outcomes from equally long blocks of fixed outcome probability.

    Returns:
        (np.ndarray, np.ndarray): outcomes ``[T]`` and the generating
        probabilities ``[T]``.
    """

    if n_trials < 1:
        raise ValueError("n_trials must be >= 1")
    rng = np.random.default_rng() if rng is None else rng
    blocks = np.array_split(np.arange(n_trials), len(probabilities))
    p = np.empty(n_trials, dtype=float)
    for idx, prob in zip(blocks, probabilities):
        p[idx] = prob
    u = (rng.random(n_trials) < p).astype(float)
    return u, p


def simulate_random_walk_inputs(
    n_trials: int,
    omega: float = -3.0,
    x0: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample outcomes whose log-odds follow a Gaussian random walk.

    Math Notes:
        x_k = x_{k-1} + sqrt(exp(omega)) * e_k,   e_k ~ N(0, 1)
        u_k ~ Bernoulli(s(x_k))
    """

    if n_trials < 1:
        raise ValueError("n_trials must be >= 1")
    rng = np.random.default_rng() if rng is None else rng
    x = x0 + np.cumsum(np.sqrt(np.exp(omega)) * rng.standard_normal(n_trials))
    p = expit(x)
    u = (rng.random(n_trials) < p).astype(float)
    return u, p


__all__ = [
    "validate_binary",
    "load_observations",
    "simulate_binary_inputs",
    "simulate_random_walk_inputs",
]
