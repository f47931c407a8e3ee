"""Engine configuration: endpoint, pacing and retry knobs."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

DEFAULT_BASE_URL = "https://api.jolpi.ca/ergast/f1"

_ENV_PREFIX = "JOLPICA_"


@dataclass(frozen=True)
class EngineConfig:
    """Tunable settings shared by the fetcher, paginator and reconciler.

    Usage:
        config = EngineConfig(base_delay=0.8, page_delay=0.7)

        # Or from JOLPICA_* environment variables:
        config = EngineConfig.from_env()
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    page_size: int = 100
    max_attempts: int = 6
    base_delay: float = 0.6
    page_delay: float = 0.5
    sweep_interval: float = 5.0
    max_sweeps: int = 12
    deadline: float | None = 300.0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_sweeps < 0:
            raise ValueError("max_sweeps must not be negative")
        for name in ("timeout", "base_delay", "page_delay", "sweep_interval"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    def backoff_schedule(self) -> list[float]:
        """Delays slept between consecutive attempts of one request."""
        return [self.base_delay * (n + 1) for n in range(self.max_attempts - 1)]

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineConfig:
        """Build a config, overriding defaults with ``JOLPICA_<FIELD>`` variables."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for field in fields(cls):
            raw = env.get(_ENV_PREFIX + field.name.upper())
            if raw is None or raw == "":
                continue
            overrides[field.name] = _coerce(field.name, field.type, raw)
        return cls(**overrides)  # type: ignore[arg-type]


def _coerce(name: str, annotation: object, raw: str) -> object:
    kind = str(annotation)
    try:
        if kind == "int":
            return int(raw)
        if kind.startswith("float"):
            if kind.endswith("None") and raw.lower() in ("none", "off"):
                return None
            return float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}") from exc
    return raw
