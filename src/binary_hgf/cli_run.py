from __future__ import annotations

import sys
from pathlib import Path
from typing import Tuple

import hydra
import numpy as np
from hydra.utils import to_absolute_path
from omegaconf import DictConfig

from .data import load_observations, simulate_binary_inputs
from .errors import InvalidParameterRegion
from .filter import compute
from .utils.config import RunConfig
from .utils.logging import console, log_parameters, log_table


def load_inputs(cfg: RunConfig) -> Tuple[np.ndarray, np.ndarray]:
    if cfg.data.path:
        u, ignore = load_observations(to_absolute_path(cfg.data.path))
        console.log(f"Loaded {u.size} trials from {cfg.data.path}")
    else:
        rng = np.random.default_rng(cfg.data.seed)
        u, _ = simulate_binary_inputs(cfg.data.simulate_trials, cfg.data.simulate_probabilities, rng=rng)
        ignore = np.zeros(u.size, dtype=bool)
        console.log(f"Simulated {u.size} trials (seed={cfg.data.seed})")
    if cfg.data.ignore:
        ignore[np.asarray(cfg.data.ignore, dtype=int) - 1] = True
    return u, ignore


@hydra.main(version_base=None, config_path="./configs", config_name="default")
def main(cfg: DictConfig) -> None:
    run_cfg = RunConfig.from_omegaconf(cfg)
    params = run_cfg.params.to_parameter_set()
    u, ignore = load_inputs(run_cfg)

    console.log(f"Run {run_cfg.logging.run_name}")
    log_parameters(params, u.size, int(ignore.sum()))
    try:
        traj, inf_states = compute(params, u, ignore)
    except InvalidParameterRegion as exc:
        console.log(f"[red]Infeasible parameters:[/red] {exc}")
        sys.exit(1)

    log_table("Binary HGF", traj.summary())

    if run_cfg.logging.output_path:
        out = Path(to_absolute_path(run_cfg.logging.output_path))
        out.parent.mkdir(parents=True, exist_ok=True)
        np.savez(
            out,
            u=u,
            ignore=ignore,
            mu=traj.mu,
            sa=traj.sa,
            muhat=traj.muhat,
            sahat=traj.sahat,
            w=traj.w,
            da=traj.da,
            inf_states=inf_states,
        )
        console.log(f"Saved trajectory to {out}")

    if run_cfg.plot.enabled:
        from .visual.plots import plot_trajectory

        save_path = Path(to_absolute_path(run_cfg.plot.save_path))
        plot_trajectory(traj, u, save_path=save_path)
        console.log(f"Saved plot to {save_path}")


if __name__ == "__main__":
    main()
