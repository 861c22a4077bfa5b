"""Environment-driven settings shared by the console and HTTP adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "EXPENSE_STORE_"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    environment: str = "prod"
    allowed_origins: Tuple[str, ...] = field(default_factory=tuple)
    currency: str = "GBP"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read ``EXPENSE_STORE_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        def _get(name: str, default: str) -> str:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value and value.strip() else default

        origins = env.get(ENV_PREFIX + "ALLOWED_ORIGINS") or ""
        return cls(
            data_dir=Path(_get("DATA_DIR", "data")).expanduser(),
            environment=_get("ENV", "prod").lower(),
            allowed_origins=tuple(
                origin.strip() for origin in origins.split(",") if origin.strip()
            ),
            currency=_get("CURRENCY", "GBP").upper(),
            log_level=_get("LOG_LEVEL", "INFO").upper(),
        )
