"""Plotting utilities for binary HGF trajectories."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from scipy.special import expit

from ..trajectory import Trajectory


def plot_trajectory(
    trajectory: Trajectory,
    observations: Sequence[float],
    save_path: Optional[Path] = None,
    title: str = "Binary HGF trajectories",
):
    """Plot posterior beliefs of all three levels.

    Levels 2 and 3 show the posterior mean with a one-sd band; level 1 shows
    the prediction ``mu1hat``, the implied posterior ``s(mu2)`` and the outcomes.
    """

    u = np.asarray(observations, dtype=float).reshape(-1)
    trials = np.arange(1, len(trajectory) + 1)
    mu, sa = trajectory.mu, trajectory.sa

    fig, axes = plt.subplots(3, 1, figsize=(10, 8), sharex=True)
    for ax, level, color in ((axes[0], 2, "tab:blue"), (axes[1], 1, "tab:red")):
        sd = np.sqrt(sa[:, level])
        ax.fill_between(trials, mu[:, level] - sd, mu[:, level] + sd, color=color, alpha=0.2)
        ax.plot(trials, mu[:, level], color=color, linewidth=1.5)
        ax.set_ylabel(f"$\\mu_{level + 1}$")
    axes[0].set_title(title)

    ax = axes[2]
    ax.plot(trials, trajectory.muhat[:, 0], color="tab:gray", linewidth=1.0, label="$\\hat{\\mu}_1$")
    ax.plot(trials, expit(mu[:, 1]), color="tab:red", linewidth=1.5, label="$s(\\mu_2)$")
    ax.scatter(trials, u, s=8, color="tab:green", label="u")
    ax.set_ylim(-0.1, 1.1)
    ax.set_xlabel("Trial")
    ax.legend(fontsize="small", loc="upper right")

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=200)
    else:
        plt.show()
    return fig


__all__ = ["plot_trajectory"]
