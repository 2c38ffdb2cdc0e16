"""Centralized application configuration."""

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "fm"
DEFAULT_SOCK_PATH = Path("/tmp/fm.sock")  # noqa: S108  # nosec B108
DEFAULT_LOCK_PATH = Path("/tmp/fm.lock")  # noqa: S108  # nosec B108

# Console script name of the daemon, matched by the process-scan guard
DAEMON_EXECUTABLE = "fm-clipd"

GuardMode = Literal["lock", "scan"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for pid, log and config files")
    sock_path: Path = Field(default=DEFAULT_SOCK_PATH, description="Unix domain socket shared by daemon and clients")
    lock_path: Path = Field(default=DEFAULT_LOCK_PATH, description="Advisory lock file held by the running daemon")
    guard: GuardMode = Field(default="lock", description="Singleton guard strategy: advisory lock or process scan")
    log_level: LogLevel = Field(default="INFO", description="Minimum level written to the log file")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Daemon PID file")
    @property
    def daemon_pid_path(self) -> Path:
        """Daemon PID file."""
        return self.data_dir / "daemon.pid"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "clipboard.log"

    @staticmethod
    def build(data_dir: Path | None = None) -> "Config":
        """Build a Config from defaults and optional config.toml."""
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key in ("sock_path", "lock_path"):
                if isinstance(toml_data.get(key), str):
                    kwargs[key] = Path(toml_data[key])
            if toml_data.get("guard") in ("lock", "scan"):
                kwargs["guard"] = toml_data["guard"]
            if isinstance(toml_data.get("log_level"), str) and toml_data["log_level"].upper() in ("DEBUG", "INFO", "WARNING", "ERROR"):
                kwargs["log_level"] = toml_data["log_level"].upper()

        return Config(**kwargs)
