"""Shuttle route optimization service."""

from .config import OptimizerConfig, RetryPolicy, SolverCredentials, setup_logging, get_default_config

__version__ = "1.0.0"

__all__ = [
    "OptimizerConfig",
    "RetryPolicy",
    "SolverCredentials",
    "setup_logging",
    "get_default_config",
]
