"""Public API for the configuration system."""

import json
from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import ResolvedConfig

# Global resolver instance for efficient reuse
_resolver = ConfigResolver()

# ruff: noqa: T201


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment > Project file > Home file > Defaults

    Args:
        programmatic: Dictionary of programmatic overrides (highest precedence).
                     Only known configuration fields are used.
        profile: Profile name to load from configuration files.
        use_env_file: Optional path to .env file to load before reading
                     environment variables.
        project_root: Directory to search for pyproject.toml. If None,
                     searches current directory and parents.

    Returns:
        ResolvedConfig with merged values and source tracking for audit.

    Example:
        config = resolve_config({"webhook_url": "https://example.com/hook"})
    """
    return _resolver.resolve(
        programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def effective_config(config: ResolvedConfig) -> dict[str, dict[str, Any]]:
    """Field -> {"value", "origin"} view of a resolved configuration."""
    return {
        field: {"value": value, "origin": config.origin.get(field, "default")}
        for field, value in config.to_dict().items()
    }


def print_effective_config(config: ResolvedConfig, *, as_json: bool = False) -> None:
    """Print the effective configuration and where each value came from."""
    view = effective_config(config)
    if as_json:
        print(json.dumps(view, indent=2))
        return
    print("Effective configuration:")
    for field, entry in view.items():
        print(f"  {field:<16} = {entry['value']!r:<50} ({entry['origin']})")
