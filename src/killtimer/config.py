"""Runtime configuration for killtimer."""

import logging
import math
import os
from dataclasses import dataclass

DEFAULT_TICK_INTERVAL = 0.1
MIN_TICK_INTERVAL = 0.01
MAX_TICK_INTERVAL = 1.0

ENV_TICK_INTERVAL = "KILLTIMER_TICK_INTERVAL"
ENV_LOG_LEVEL = "KILLTIMER_LOG_LEVEL"
ENV_LOG_FILE = "KILLTIMER_LOG_FILE"


@dataclass(slots=True)
class Settings:
    """Settings that control the loop and diagnostics."""

    tick_interval: float = DEFAULT_TICK_INTERVAL  # Seconds, also the input wait
    log_level: int = logging.WARNING
    log_file: str | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.tick_interval):
            self.tick_interval = DEFAULT_TICK_INTERVAL
        self.tick_interval = min(MAX_TICK_INTERVAL, max(MIN_TICK_INTERVAL, self.tick_interval))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """
        Build settings from ``KILLTIMER_*`` environment variables.

        Unparseable values are ignored in favour of the defaults.
        """
        env = os.environ if environ is None else environ

        tick_interval = DEFAULT_TICK_INTERVAL
        raw_tick = env.get(ENV_TICK_INTERVAL)
        if raw_tick:
            try:
                tick_interval = float(raw_tick)
            except ValueError:
                pass

        log_level = logging.WARNING
        raw_level = env.get(ENV_LOG_LEVEL)
        if raw_level:
            level = logging.getLevelName(raw_level.strip().upper())
            if isinstance(level, int):
                log_level = level

        return cls(
            tick_interval=tick_interval,
            log_level=log_level,
            log_file=env.get(ENV_LOG_FILE) or None,
        )
