"""Hydra-compatible configuration dataclasses for binary HGF runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from omegaconf import DictConfig, OmegaConf

from ..parameters import ParameterSet, TransformBounds


@dataclass
class ParameterConfig:
    mu2_0: float = 0.0
    sa2_0: float = 1.0
    mu3_0: float = 1.0
    sa3_0: float = 1.0
    kappa: float = 1.0
    omega: float = -3.0
    theta: float = 0.1
    kappa_upper: float = 1.0
    theta_upper: float = 1.0
    transformed: bool = False
    vector: Optional[List[float]] = None

    def bounds(self) -> TransformBounds:
        return TransformBounds(kappa_upper=self.kappa_upper, theta_upper=self.theta_upper)

    def to_parameter_set(self) -> ParameterSet:
        if self.transformed and self.vector is None:
            raise ValueError("params.transformed=true requires params.vector")
        if self.vector is not None:
            if self.transformed:
                return ParameterSet.from_transformed(self.vector, self.bounds())
            return ParameterSet.from_vector(self.vector)
        return ParameterSet(
            mu2_0=self.mu2_0,
            sa2_0=self.sa2_0,
            mu3_0=self.mu3_0,
            sa3_0=self.sa3_0,
            kappa=self.kappa,
            omega=self.omega,
            theta=self.theta,
        )


@dataclass
class DataConfig:
    path: Optional[str] = None
    ignore: List[int] = field(default_factory=list)
    simulate_trials: int = 160
    simulate_probabilities: List[float] = field(default_factory=lambda: [0.8, 0.2, 0.8, 0.2])
    seed: int = 42


@dataclass
class PlotConfig:
    enabled: bool = False
    save_path: str = "hgf_trajectory.png"


@dataclass
class LoggingConfig:
    run_name: str = "binary_hgf"
    output_path: Optional[str] = None


@dataclass
class RunConfig:
    params: ParameterConfig = field(default_factory=ParameterConfig)
    data: DataConfig = field(default_factory=DataConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def from_omegaconf(cfg: DictConfig) -> "RunConfig":
        raw: Dict[str, Any] = OmegaConf.to_container(cfg, resolve=True)  # type: ignore[assignment]
        return RunConfig(
            params=ParameterConfig(**raw.get("params", {})),
            data=DataConfig(**raw.get("data", {})),
            plot=PlotConfig(**raw.get("plot", {})),
            logging=LoggingConfig(**raw.get("logging", {})),
        )


__all__ = [
    "ParameterConfig",
    "DataConfig",
    "PlotConfig",
    "LoggingConfig",
    "RunConfig",
]
