from .config import RunConfig
from .logging import console, log_parameters, log_table

__all__ = ["RunConfig", "console", "log_table", "log_parameters"]
