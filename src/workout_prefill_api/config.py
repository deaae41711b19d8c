"""Configuration settings for the workout prefill API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Hosted backend
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    PERSISTENCE_MAX_ATTEMPTS: int = 3

    # Tolerance defaults used when a workout carries no export hints
    PACE_TOLERANCE_QUALITY: float = 0.04
    PACE_TOLERANCE_EASY: float = 0.06
    POWER_TOLERANCE_SS_THR: float = 0.05
    POWER_TOLERANCE_VO2: float = 0.10

    # Edit-session recovery snapshots
    SNAPSHOT_DIR: str = os.path.join(os.path.expanduser("~"), ".workout-prefill", "snapshots")

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Hosted backend
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        self.PERSISTENCE_MAX_ATTEMPTS = max(1, _env_int("PERSISTENCE_MAX_ATTEMPTS", 3))

        # Tolerances
        self.PACE_TOLERANCE_QUALITY = _env_float("PACE_TOLERANCE_QUALITY", 0.04)
        self.PACE_TOLERANCE_EASY = _env_float("PACE_TOLERANCE_EASY", 0.06)
        self.POWER_TOLERANCE_SS_THR = _env_float("POWER_TOLERANCE_SS_THR", 0.05)
        self.POWER_TOLERANCE_VO2 = _env_float("POWER_TOLERANCE_VO2", 0.10)

        self.SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR") or Settings.SNAPSHOT_DIR

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        else:
            self.CORS_ORIGINS = list(Settings.CORS_ORIGINS)


settings = Settings()
