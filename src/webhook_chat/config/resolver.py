"""Configuration resolution with precedence handling.

Merges configuration in this order, later sources winning:
Defaults < Home file < Project file < Environment < Programmatic
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from webhook_chat.core.exceptions import ConfigurationError

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .schema import ChatSettings
from .types import ResolvedConfig

log = logging.getLogger(__name__)


def _schema_defaults() -> dict[str, Any]:
    # Read declared defaults directly; instantiating BaseSettings would
    # pick up the environment.
    return {name: f.default for name, f in ChatSettings.model_fields.items()}


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            profile: Profile name to load from files. Defaults to the
                WEBHOOK_CHAT_PROFILE environment variable.
            use_env_file: Optional .env file to load
            project_root: Directory to search for pyproject.toml

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ConfigurationError: If validation fails or a source is malformed.
            ConfigFileError: If the project configuration file is malformed.
        """
        source_tracker = SourceTracker()
        merged_config: dict[str, Any] = {}

        if profile is None:
            profile = os.getenv("WEBHOOK_CHAT_PROFILE") or None

        for field, value in _schema_defaults().items():
            merged_config[field] = value
            source_tracker.set_origin(field, "default")

        def _apply(values: dict[str, Any], origin: Any) -> None:
            for field, value in values.items():
                if field in merged_config:  # Only override known fields
                    merged_config[field] = value
                    source_tracker.set_origin(field, origin)

        try:
            _apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            # Home config errors are non-fatal
            log.warning("Ignoring home configuration: %s", e)

        try:
            _apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError:
            # A missing profile is tolerated; a broken base file is not
            if profile is None:
                raise
            log.debug("Profile %r not found in project configuration", profile)

        try:
            _apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ConfigurationError(f"Environment configuration error: {e}") from e

        if programmatic:
            _apply(programmatic, "programmatic")

        try:
            final_config = ChatSettings(**merged_config).to_dict()
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(
            **final_config,
            origin=source_tracker.get_source_map(),
        )
