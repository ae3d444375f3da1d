"""Configuration management for MedTerm."""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11

DEFAULT_DATA_DIR = "./medterm_data"


def _find_repo_root(start_dir: Path) -> Path:
    """Find repository root by walking upward looking for .git or pyproject.toml."""
    current_dir = start_dir

    while True:
        if (current_dir / ".git").exists() or (current_dir / "pyproject.toml").exists():
            return current_dir

        parent_dir = current_dir.parent

        # Stop if we reach filesystem root
        if parent_dir == current_dir:
            return start_dir

        current_dir = parent_dir


def _load_repo_config_data(repo_root: Path) -> Optional[dict]:
    """Load repo config data from .medterm/config.toml if it exists."""
    config_file = repo_root / ".medterm" / "config.toml"

    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # If config file is malformed, ignore it
        return None


def _get_repo_config_value(data: Optional[dict], keys: list[str]) -> Optional[str]:
    """Safely get a nested repo config value."""
    if not data:
        return None
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    if isinstance(current, (str, int, float)):
        return str(current)
    return None


def resolve_data_dir(cli_data_dir: Optional[str] = None) -> Path:
    """Resolve the data directory with the following precedence:

    1. CLI --data-dir option (if provided)
    2. repo-local .medterm/config.toml ``data_dir`` (walk upward from CWD)
    3. MEDTERM_DATA_DIR environment variable
    4. ./medterm_data
    """
    if cli_data_dir:
        return Path(cli_data_dir).resolve()

    repo_config = _load_repo_config_data(_find_repo_root(Path.cwd()))
    repo_data_dir = _get_repo_config_value(repo_config, ["data_dir"])
    if repo_data_dir:
        return Path(repo_data_dir).resolve()

    env_data_dir = os.environ.get("MEDTERM_DATA_DIR")
    if env_data_dir:
        return Path(env_data_dir).resolve()

    return Path(DEFAULT_DATA_DIR).resolve()


class SuggestConfig(BaseModel):
    """Configuration for the external suggestion provider."""

    provider: Literal["auto", "fake", "gemini", "openai"] = Field(default="auto")
    model: Optional[str] = Field(default=None)
    temperature: float = Field(default=0.3)
    timeout_seconds: int = Field(default=30)
    script: Literal["traditional", "simplified"] = Field(default="traditional")


class MedTermConfig(BaseModel):
    """Configuration for the MedTerm data store and ranking."""

    data_dir: Path = Field(
        default_factory=lambda: Path(os.environ.get("MEDTERM_DATA_DIR", DEFAULT_DATA_DIR))
    )
    activity_limit: int = Field(default=10, ge=1)
    max_candidates: int = Field(default=6, ge=1)
    reject_threshold: int = Field(default=3, ge=0)

    suggest: SuggestConfig = Field(default_factory=SuggestConfig)

    model_config = {"frozen": False}

    @classmethod
    def from_env(cls, cli_data_dir: Optional[str] = None) -> "MedTermConfig":
        """Load configuration from environment variables, repo config or defaults.

        Args:
            cli_data_dir: Data directory from CLI --data-dir option (highest precedence)
        """
        data_dir = resolve_data_dir(cli_data_dir)
        repo_config = _load_repo_config_data(_find_repo_root(Path.cwd()))

        def setting(env_name: str, keys: list[str], default: str) -> str:
            return os.environ.get(env_name) or _get_repo_config_value(repo_config, keys) or default

        model = setting("MEDTERM_MODEL", ["suggest", "model"], "")

        return cls(
            data_dir=data_dir,
            activity_limit=int(setting("MEDTERM_ACTIVITY_LIMIT", ["activity_limit"], "10")),
            suggest=SuggestConfig(
                provider=setting("MEDTERM_PROVIDER", ["suggest", "provider"], "auto"),
                model=model or None,
                temperature=float(setting("MEDTERM_TEMPERATURE", ["suggest", "temperature"], "0.3")),
                timeout_seconds=int(setting("MEDTERM_TIMEOUT_SECONDS", ["suggest", "timeout_seconds"], "30")),
                script=setting("MEDTERM_SCRIPT", ["suggest", "script"], "traditional"),
            ),
        )
