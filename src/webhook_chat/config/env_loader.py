"""Environment variable configuration loading.

Reads WEBHOOK_CHAT_* variables, optionally after loading a .env file with
python-dotenv, and validates them through the settings schema.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .schema import ChatSettings

ENV_PREFIX = "WEBHOOK_CHAT_"


def env_var_names() -> dict[str, str]:
    """Map of environment variable name -> settings field name."""
    return {f"{ENV_PREFIX}{name.upper()}": name for name in ChatSettings.model_fields}


class EnvironmentConfigLoader:
    """Loads configuration from environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to a .env file. Its values are loaded into
                the environment first; variables already set take precedence.

        Returns:
            Dictionary of configuration values found in environment.
            Only includes fields that are actually set (not defaults).

        Raises:
            FileNotFoundError: If `env_file` is given but does not exist.
            ValueError: If environment variables contain invalid values.
        """
        if env_file:
            env_path = Path(env_file)
            if not env_path.exists():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            load_dotenv(env_path, override=False)

        names = env_var_names()
        env_values = {
            field: os.environ[env_var]
            for env_var, field in names.items()
            if env_var in os.environ
        }
        if not env_values:
            return {}

        try:
            settings = ChatSettings(**env_values)
        except Exception as e:
            env_var_list = [
                f"{env_var}={os.environ[env_var]}"
                for env_var, field in names.items()
                if field in env_values
            ]
            raise ValueError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field: getattr(settings, field) for field in env_values}
