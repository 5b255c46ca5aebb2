"""Configuration management for emi-engine."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field

from emi_engine.exceptions import ConfigurationError

MAX_LOAN_AMOUNT: float = 1_000_000_000.0
MAX_INTEREST_RATE: float = 50.0


@dataclass(frozen=True)
class EngineConfig:
    """Limits and defaults shared by the validation layer and the engine."""

    max_loan_amount: float = MAX_LOAN_AMOUNT
    max_interest_rate: float = MAX_INTEREST_RATE
    # LoanType values whose payment covers interest only
    interest_only_types: frozenset[str] = field(
        default_factory=lambda: frozenset({"gold", "private_lending"})
    )
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls(
            max_loan_amount=_float_env("EMI_MAX_LOAN_AMOUNT", MAX_LOAN_AMOUNT),
            max_interest_rate=_float_env("EMI_MAX_INTEREST_RATE", MAX_INTEREST_RATE),
            log_level=os.getenv("EMI_LOG_LEVEL", "INFO"),
        )


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


_default_config: EngineConfig | None = None


def get_config() -> EngineConfig:
    """Return the process-wide default config, reading the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = EngineConfig.from_env()
    return _default_config
