"""Configuration source tracking."""

from .types import ConfigOrigin, SourceMap


class SourceTracker:
    """Tracks the origin of configuration values during resolution."""

    def __init__(self) -> None:
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        """Record the origin of a configuration field."""
        self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Get the current source map.

        Returns:
            A copy of the field -> origin mapping.
        """
        return dict(self._origins)
