"""Runtime settings read from the environment.

Protean's own configuration (providers, brokers, processing modes) lives in
``domain.toml``; the knobs here belong to the cart expiry job.
"""

import os
from datetime import timedelta

DEFAULT_CART_RETENTION_DAYS = 30
DEFAULT_SWEEP_INTERVAL_HOURS = 24


def cart_retention() -> timedelta:
    """How long a cart may sit untouched in ``Cart`` status before it is removed."""
    return timedelta(days=int(os.getenv("CART_RETENTION_DAYS", DEFAULT_CART_RETENTION_DAYS)))


def sweep_interval() -> timedelta:
    """Pause between the end of one expiry run and the start of the next."""
    return timedelta(hours=float(os.getenv("CART_SWEEP_INTERVAL_HOURS", DEFAULT_SWEEP_INTERVAL_HOURS)))


def sweeper_enabled() -> bool:
    return os.getenv("CART_SWEEPER_ENABLED", "true").lower() not in ("0", "false", "no")
