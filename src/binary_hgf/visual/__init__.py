from .plots import plot_trajectory

__all__ = ["plot_trajectory"]
