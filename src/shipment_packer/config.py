"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

PACKAGE_LOGGER = "shipment_packer"


class PackerSettings(BaseModel):
    solver_time_limit_sec: float = Field(default=10.0, gt=0, description="Wall-clock budget for the quantity solver")
    use_solver: bool = Field(default=True, description="False packs every run with the first-fit heuristic")
    unit_rate: float = Field(default=10.0, ge=0, description="Cost per lb for the placeholder cost strategy")
    cost_provider: str = Field(default="PLACEHOLDER", description="Shipping provider used for costing")
    log_level: str = Field(default="WARNING")


def load_settings(env_path: Optional[Path] = None) -> PackerSettings:
    """
    Read PACKER_* variables. Values already in the environment win over the .env file.

    Without env_path, the nearest .env at or above the working directory is used.

    Raises:
        pydantic.ValidationError: a variable holds an invalid value
    """
    load_dotenv(env_path or find_dotenv(usecwd=True))

    return PackerSettings(
        solver_time_limit_sec=os.getenv("PACKER_SOLVER_TIME_LIMIT_SEC", "10"),
        use_solver=(os.getenv("PACKER_USE_SOLVER", "1") == "1"),
        unit_rate=os.getenv("PACKER_UNIT_RATE", "10"),
        cost_provider=os.getenv("PACKER_COST_PROVIDER", "PLACEHOLDER"),
        log_level=os.getenv("PACKER_LOG_LEVEL", "WARNING").upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    """Install a root handler (if none yet) and set the package log level."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric)
