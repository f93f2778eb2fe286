"""Runtime configuration for the planner service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from planner.constants import BPS_DENOMINATOR, DEFAULT_SLIPPAGE_BPS, NUM_OUTCOMES


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class PlannerConfig:
    """Centralized planner configuration.

    Attributes:
        slippage_bps: Slippage tolerance applied to every swap quote
        num_outcomes: Outcome count passed to split and redeem operations
        snapshot_path: JSON chain-state snapshot served by the API
        default_proposer: Public key used for proposal preflight when the
            request does not name a proposer
        host: Interface the API binds to
        port: Port the API binds to
        debug: Enable autoreload
        log_level: structlog filtering level name
    """

    slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    num_outcomes: int = NUM_OUTCOMES
    snapshot_path: Path | None = None
    default_proposer: str | None = None
    host: str = "0.0.0.0"
    port: int = 9000
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 <= self.slippage_bps <= BPS_DENOMINATOR:
            raise ValueError(
                f"slippage_bps must be within [0, {BPS_DENOMINATOR}], got {self.slippage_bps}"
            )

    @classmethod
    def from_env(cls) -> PlannerConfig:
        """Build a config from PLANNER_* environment variables."""
        snapshot = os.environ.get("PLANNER_SNAPSHOT_PATH")
        return cls(
            slippage_bps=int(os.environ.get("PLANNER_SLIPPAGE_BPS", str(DEFAULT_SLIPPAGE_BPS))),
            snapshot_path=Path(snapshot) if snapshot else None,
            default_proposer=os.environ.get("PLANNER_PROPOSER") or None,
            host=os.environ.get("PLANNER_HOST", "0.0.0.0"),
            port=int(os.environ.get("PLANNER_PORT", "9000")),
            debug=_env_bool("PLANNER_DEBUG"),
            log_level=os.environ.get("PLANNER_LOG_LEVEL", "INFO").upper(),
        )


DEFAULT_CONFIG = PlannerConfig()
