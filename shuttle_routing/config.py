"""Configuration for the route optimization service.

Everything the business logic needs is carried by an explicit, immutable
``OptimizerConfig`` handed to the adapter, solver and view builders.
Only ``SolverCredentials.from_env`` touches the process environment.
"""

from dataclasses import dataclass, field
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .errors import CredentialsError


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure and return the application logger."""
    logger = logging.getLogger("shuttle_routing")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff applied by the solver client.

    Attributes:
        initial_delay_seconds: Delay before the first retry
        multiplier: Growth factor applied to the delay after each retry
        max_delay_seconds: Ceiling for a single delay
        max_attempts: Total attempts, the first call included
    """
    initial_delay_seconds: float = 0.1
    multiplier: float = 1.3
    max_delay_seconds: float = 60.0
    max_attempts: int = 5


@dataclass(frozen=True)
class OptimizerConfig:
    """Defaults for route construction and the solver call."""

    # Route constraints
    max_route_time_minutes: int = 90
    stop_time_minutes: int = 3
    vehicle_capacity: int = 7

    # Vehicle costs submitted with every model vehicle
    cost_per_hour: float = 40.0
    cost_per_kilometer: float = 10.0

    # Prefix stripped from shipment labels to get the numeric booking id
    booking_token: str = "Booking"

    # Solver call
    api_endpoint: str = "routeoptimization.googleapis.com"
    timeout_seconds: float = 60.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    populate_polylines: bool = True
    populate_transition_polylines: bool = True
    consider_road_traffic: bool = False

    # Time window length used when the caller gives no end time
    horizon_hours: int = 24


@dataclass(frozen=True)
class SolverCredentials:
    """Service account used to authenticate against the solver."""
    project_id: str
    client_email: str
    private_key: str

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "SolverCredentials":
        """Read credentials from the environment (and a ``.env`` file, if any)."""
        load_dotenv(dotenv_path)

        values = {}
        for attr, var in (
            ("project_id", "GOOGLE_PROJECT_ID"),
            ("client_email", "GOOGLE_CLIENT_EMAIL"),
            ("private_key", "GOOGLE_PRIVATE_KEY"),
        ):
            value = os.getenv(var)
            if not value:
                raise CredentialsError(
                    f"{var} environment variable is not set. "
                    "Please set it before running the application."
                )
            values[attr] = value

        # Keys stored on one line in .env files carry literal "\n" sequences
        values["private_key"] = values["private_key"].replace("\\n", "\n")
        return cls(**values)


# Default configuration
def get_default_config() -> OptimizerConfig:
    """Return default configuration."""
    return OptimizerConfig()
