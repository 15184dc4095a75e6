import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_API_ENDPOINT = "https://testapi.getlokalapp.com/common/jobs"
STORAGE_BACKENDS = ("json", "sqlite")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    api_endpoint: str = DEFAULT_API_ENDPOINT
    storage: str = "json"
    store_path: Path = Path("data/store.json")
    db_path: Path = Path("data/jobfeed.db")
    # None means the transport default (no timeout)
    timeout: Optional[float] = None
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def _optional_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from JOBFEED_* environment variables."""
    if env is None:
        env = os.environ

    storage = env.get("JOBFEED_STORAGE", "json").strip().lower() or "json"
    if storage not in STORAGE_BACKENDS:
        raise ValueError(
            f"JOBFEED_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}, got {storage!r}"
        )

    log_level = (env.get("JOBFEED_LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"JOBFEED_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return Settings(
        api_endpoint=env.get("JOBFEED_API_ENDPOINT") or DEFAULT_API_ENDPOINT,
        storage=storage,
        store_path=Path(env.get("JOBFEED_STORE_PATH") or "data/store.json"),
        db_path=Path(env.get("JOBFEED_DB_PATH") or "data/jobfeed.db"),
        timeout=_optional_float(env, "JOBFEED_TIMEOUT"),
        log_level=log_level,
        log_dir=Path(env.get("JOBFEED_LOG_DIR") or "logs"),
    )
