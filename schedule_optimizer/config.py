"""
Optimizer configuration.

Defaults can be overridden through SCHEDULE_* environment variables (a local
.env file is honoured). The resulting OptimizerConfig is immutable and is
passed explicitly into every pipeline stage.
"""

import os

import pytz
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

load_dotenv()

ENV_PREFIX = "SCHEDULE_"


class OptimizerConfig(BaseModel):
    slot_granularity_minutes: int = Field(default=30, gt=0)
    lookahead_days: int = Field(default=7, gt=0)
    time_budget_ms: int = Field(default=5000, ge=0)
    max_iterations: int = Field(default=100, ge=0)
    repair_threshold_ms: int = Field(default=2000, ge=0)
    repair_step_minutes: int = Field(default=30, gt=0)
    fixed_priority_threshold: int = 5
    timezone: str = "UTC"

    model_config = ConfigDict(frozen=True)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"unknown timezone: {value}")
        return value

    @classmethod
    def from_env(cls) -> "OptimizerConfig":
        """Build a config from SCHEDULE_* variables, falling back to defaults."""
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid optimizer configuration: {e}", details={"values": values})


DEFAULT_CONFIG = OptimizerConfig()
