"""File-based configuration loading with profile support.

Loads the ``[tool.webhook_chat]`` table of the nearest ``pyproject.toml``
and the home-level ``~/.config/webhook_chat.toml``. Both support named
profiles under ``profiles.<name>``.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from webhook_chat.core.exceptions import ConfigurationError

TOOL_TABLE = "webhook_chat"


class ConfigFileError(ConfigurationError):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads configuration from TOML files with profile support."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load configuration from pyproject.toml in the project root.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                         searches current directory and parents.
            profile: Optional profile name to load from
                    [tool.webhook_chat.profiles.<name>]

        Returns:
            Dictionary of configuration values from the file.
            Empty dict if file doesn't exist or has no webhook_chat section.

        Raises:
            ConfigFileError: If file exists but cannot be parsed, or the
                requested profile does not exist.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        data = self._read_toml(pyproject_path)
        section = data.get("tool", {}).get(TOOL_TABLE, {})
        if not section:
            return {}
        return self._select_profile(section, profile, pyproject_path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home config file.

        Raises:
            ConfigFileError: If file exists but cannot be parsed.
        """
        home_path = self._get_home_config_path()
        if not home_path.exists():
            return {}

        data = self._read_toml(home_path)
        if not data:
            return {}
        return self._select_profile(data, profile, home_path)

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with Path(path).open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _select_profile(
        self, section: dict[str, Any], profile: str | None, path: Path
    ) -> dict[str, Any]:
        if profile:
            profiles = section.get("profiles", {})
            if profile not in profiles:
                available = list(profiles.keys()) if profiles else []
                raise ConfigFileError(
                    path,
                    f"Profile '{profile}' not found. Available profiles: {available}",
                )
            return dict(profiles[profile])
        config = dict(section)
        config.pop("profiles", None)
        return config

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree."""
        current = Path(start_dir if start_dir is not None else Path.cwd()).resolve()

        while current != current.parent:  # Stop at filesystem root
            pyproject_path = current / "pyproject.toml"
            if pyproject_path.exists():
                return pyproject_path
            current = current.parent

        return None

    def _get_home_config_path(self) -> Path:
        """Path to the home config, overridable via WEBHOOK_CHAT_CONFIG_HOME."""
        override = os.getenv("WEBHOOK_CHAT_CONFIG_HOME")
        if override:
            return Path(override)
        return Path.home() / ".config" / "webhook_chat.toml"
