"""Perceptual parameters of the three-level binary HGF.

Background:
    The filter is driven by seven scalars. Parameter searches usually work in an
    unconstrained ("transformed") space and map back to the native space through
    fixed, order-preserving bijections before every evaluation.

Input/Output Overview:
    - ``ParameterSet`` holds the native-space values, in vector order
      ``(mu2_0, sa2_0, mu3_0, sa3_0, kappa, omega, theta)``.
    - ``from_transformed`` / ``to_transformed`` convert between the two spaces.

Math Notes:
    identity : mu2_0, mu3_0, omega
    exp/log  : sa2_0, sa3_0
    bounded  : kappa = ub_k * sigmoid(x),  theta = ub_th * sigmoid(x)
"""
from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from typing import Sequence, Tuple

import numpy as np
from scipy.special import expit, logit


@dataclass(frozen=True)
class TransformBounds:
    kappa_upper: float = 1.0
    theta_upper: float = 1.0


@dataclass(frozen=True)
class ParameterSet:
    """Native-space parameters of one filter run.

    Attributes:
        mu2_0: Prior mean of level 2.
        sa2_0: Prior variance of level 2.
        mu3_0: Prior mean of level 3.
        sa3_0: Prior variance of level 3.
        kappa: Coupling strength between levels 2 and 3.
        omega: Tonic log-volatility of level 2.
        theta: Variance growth rate of level 3.
    """

    mu2_0: float = 0.0
    sa2_0: float = 1.0
    mu3_0: float = 1.0
    sa3_0: float = 1.0
    kappa: float = 1.0
    omega: float = -3.0
    theta: float = 0.1

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_vector(cls, p: Sequence[float]) -> "ParameterSet":
        values = np.asarray(p, dtype=float).reshape(-1)
        if values.size != len(cls.names()):
            raise ValueError(f"expected {len(cls.names())} parameters, got {values.size}")
        return cls(*(float(v) for v in values))

    @classmethod
    def from_transformed(
        cls, ptrans: Sequence[float], bounds: TransformBounds = TransformBounds()
    ) -> "ParameterSet":
        """Map a vector from the unconstrained space back to native space."""

        t = np.asarray(ptrans, dtype=float).reshape(-1)
        if t.size != len(cls.names()):
            raise ValueError(f"expected {len(cls.names())} parameters, got {t.size}")
        return cls(
            mu2_0=float(t[0]),
            sa2_0=float(np.exp(t[1])),
            mu3_0=float(t[2]),
            sa3_0=float(np.exp(t[3])),
            kappa=float(bounds.kappa_upper * expit(t[4])),
            omega=float(t[5]),
            theta=float(bounds.theta_upper * expit(t[6])),
        )

    def to_transformed(self, bounds: TransformBounds = TransformBounds()) -> np.ndarray:
        # the interval ends map to -inf/+inf
        if not 0.0 <= self.kappa <= bounds.kappa_upper:
            raise ValueError(f"kappa={self.kappa} outside [0, {bounds.kappa_upper}]")
        if not 0.0 <= self.theta <= bounds.theta_upper:
            raise ValueError(f"theta={self.theta} outside [0, {bounds.theta_upper}]")
        return np.array(
            [
                self.mu2_0,
                np.log(self.sa2_0),
                self.mu3_0,
                np.log(self.sa3_0),
                logit(self.kappa / bounds.kappa_upper),
                self.omega,
                logit(self.theta / bounds.theta_upper),
            ],
            dtype=float,
        )

    def to_vector(self) -> np.ndarray:
        return np.asarray(astuple(self), dtype=float)


__all__ = ["ParameterSet", "TransformBounds"]
