"""Runtime configuration.

Values come from environment variables (``BACKOFFICE_*``) with sensible
defaults; the CLI can override the data directory per invocation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from backoffice.domain.exceptions import ValidationError

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

ENV_PREFIX = "BACKOFFICE_"


def _float_or_none(name: str, raw: str | None, default: float | None) -> float | None:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValidationError(f"{ENV_PREFIX}{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    lock_timeout: float = 5.0  # seconds to wait for the store
    transaction_timeout: float | None = None  # seconds per order, None = no limit
    default_payment_method: str = "cash"
    log_level: str = "WARNING"

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @property
    def audit_log_path(self) -> Path:
        return self.data_dir / "audit.jsonl"

    @property
    def directory_path(self) -> Path:
        return self.data_dir / "directory.json"

    def with_data_dir(self, data_dir: Path | None) -> Settings:
        return self if data_dir is None else replace(self, data_dir=data_dir)

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = Settings()
        data_dir = env.get(f"{ENV_PREFIX}DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else defaults.data_dir,
            lock_timeout=_float_or_none(
                "LOCK_TIMEOUT", env.get(f"{ENV_PREFIX}LOCK_TIMEOUT"), defaults.lock_timeout
            ),
            transaction_timeout=_float_or_none(
                "TRANSACTION_TIMEOUT",
                env.get(f"{ENV_PREFIX}TRANSACTION_TIMEOUT"),
                defaults.transaction_timeout,
            ),
            default_payment_method=(
                env.get(f"{ENV_PREFIX}PAYMENT_METHOD") or defaults.default_payment_method
            ),
            log_level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or defaults.log_level).upper(),
        )
