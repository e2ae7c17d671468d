from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

TickerKind = Literal["thread", "asyncio"]


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return int(raw)


@dataclass(frozen=True, slots=True)
class SimulatorRuntimeConfig:
    tick_period_s: float
    steps_per_segment: int
    ticker: TickerKind
    data_path: Path

    @staticmethod
    def from_env() -> "SimulatorRuntimeConfig":
        """Read settings from the environment.

        Env vars:
          - SIM_TICK_PERIOD_MS (default 100)
          - SIM_STEPS_PER_SEGMENT (default 20, i.e. 0.05 progress per tick)
          - SIM_TICKER: 'thread' (default) or 'asyncio'
          - FLEET_DATA_PATH (default data/fleet)
        """

        period_ms = _env_int("SIM_TICK_PERIOD_MS", 100)
        if period_ms <= 0:
            raise ValueError(f"SIM_TICK_PERIOD_MS must be positive: {period_ms}")

        steps = _env_int("SIM_STEPS_PER_SEGMENT", 20)
        if steps < 1:
            raise ValueError(f"SIM_STEPS_PER_SEGMENT must be >= 1: {steps}")

        ticker = (os.getenv("SIM_TICKER") or "thread").strip().lower()
        if ticker not in {"thread", "asyncio"}:
            raise ValueError(f"Unknown SIM_TICKER: {ticker}")

        return SimulatorRuntimeConfig(
            tick_period_s=period_ms / 1000.0,
            steps_per_segment=steps,
            ticker=ticker,  # type: ignore[arg-type]
            data_path=Path(os.getenv("FLEET_DATA_PATH") or "data/fleet"),
        )
