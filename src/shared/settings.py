import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from src.specs.common.errors import ConfigurationError


ROOT_DIR = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    assets_dir: Path
    font_dir: Path
    fetch_timeout: float
    log_level: str

    @property
    def default_background_path(self) -> Path:
        return self.assets_dir / "original.png"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number", details={"value": raw})
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive", details={"value": raw})
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment once per process."""
    return Settings(
        assets_dir=Path(os.getenv("STATCARD_ASSETS_DIR") or ROOT_DIR / "assets"),
        font_dir=Path(os.getenv("STATCARD_FONT_DIR") or ROOT_DIR / "fonts"),
        fetch_timeout=_float_env("STATCARD_FETCH_TIMEOUT", 10.0),
        log_level=(os.getenv("STATCARD_LOG_LEVEL") or "INFO").upper(),
    )
