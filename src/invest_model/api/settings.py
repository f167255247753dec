"""
Service settings for the calculation API.

Values come from the process environment. A ``.env`` file next to this
module (or the one passed to ``Settings.from_env``) is loaded first for local
development; variables already set in the environment take precedence, so
Docker ``--env-file`` and CI-provided values win over the file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

DEFAULT_ENV_PATH = Path(__file__).parent / ".env"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from e


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 8002
    debug: bool = False
    log_level: str = "INFO"
    default_simulations: int = 1000
    max_simulations: int = 20000
    simulation_workers: int = 1

    def __post_init__(self):
        if self.max_simulations < 1:
            raise ValueError("MAX_SIMULATIONS must be at least 1")
        if not 1 <= self.default_simulations <= self.max_simulations:
            raise ValueError("DEFAULT_SIMULATIONS must be between 1 and MAX_SIMULATIONS")
        if self.simulation_workers < 1:
            raise ValueError("SIMULATION_WORKERS must be at least 1")

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Settings":
        env_path = Path(env_file) if env_file else DEFAULT_ENV_PATH
        if env_path.exists():
            load_dotenv(env_path, override=False)

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8002),
            debug=os.getenv("FLASK_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            default_simulations=_env_int("DEFAULT_SIMULATIONS", 1000),
            max_simulations=_env_int("MAX_SIMULATIONS", 20000),
            simulation_workers=_env_int("SIMULATION_WORKERS", 1),
        )
