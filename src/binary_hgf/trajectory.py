"""Alignment and packing of the filtered belief states.

Tensor Dimensions:
    - mu, sa, muhat, sahat: [T, 3]  (columns are levels 1..3)
    - w: [T]
    - da: [T, 2]  (da1, da2)
    - inference tensor: [T, 3, 2]  ([..., 0] = muhat, [..., 1] = sahat)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np
import torch

from .state import TrialState


@dataclass(frozen=True)
class Trajectory:
    mu: np.ndarray
    sa: np.ndarray
    muhat: np.ndarray
    sahat: np.ndarray
    w: np.ndarray
    da: np.ndarray

    @classmethod
    def from_states(cls, states: Sequence[TrialState]) -> "Trajectory":
        """Unpack a fold output indexed ``0..T`` into trial-aligned series.

        The synthetic prior at index 0 is sliced away. The level 2/3 predictions
        are the previous trial's posteriors, so they are read from the full
        posterior series without its last element.
        """

        table = np.array([s.as_tuple() for s in states], dtype=float)
        (mu1, mu2, mu3, pi2, pi3,
         mu1hat, pi1hat, pi2hat, pi3hat, w2, da1, da2) = (table[:, i] for i in range(table.shape[1]))

        post = slice(1, None)
        lagged = slice(None, -1)

        sa1 = mu1hat[post] * (1.0 - mu1hat[post])
        mu = np.column_stack([mu1[post], mu2[post], mu3[post]])
        sa = np.column_stack([sa1, 1.0 / pi2[post], 1.0 / pi3[post]])
        muhat = np.column_stack([mu1hat[post], mu2[lagged], mu3[lagged]])
        sahat = np.column_stack([1.0 / pi1hat[post], 1.0 / pi2hat[post], 1.0 / pi3hat[post]])
        da = np.column_stack([da1[post], da2[post]])
        return cls(mu=mu, sa=sa, muhat=muhat, sahat=sahat, w=w2[post].copy(), da=da)

    def __len__(self) -> int:
        return self.mu.shape[0]

    def inference_tensor(self) -> np.ndarray:
        return np.stack([self.muhat, self.sahat], axis=-1)

    def to_torch(self, device: str = "cpu") -> Dict[str, torch.Tensor]:
        out = {name: getattr(self, name) for name in ("mu", "sa", "muhat", "sahat", "w", "da")}
        out["inf_states"] = self.inference_tensor()
        return {k: torch.from_numpy(np.ascontiguousarray(v)).float().to(device) for k, v in out.items()}

    def summary(self) -> Dict[str, float]:
        return {
            "trials": float(len(self)),
            "final_mu2": float(self.mu[-1, 1]),
            "final_mu3": float(self.mu[-1, 2]),
            "final_sa2": float(self.sa[-1, 1]),
            "final_sa3": float(self.sa[-1, 2]),
            "mean_abs_da1": float(np.nanmean(np.abs(self.da[:, 0]))),
            "mean_da2": float(np.nanmean(self.da[:, 1])),
        }


__all__ = ["Trajectory"]
