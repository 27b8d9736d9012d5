"""Core configuration data types.

Configuration is resolved once into an immutable `ResolvedConfig` that
also records where each value came from.
"""

from collections.abc import Mapping
from typing import Literal, NamedTuple

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources.

    The validated, merged result of programmatic overrides, environment
    variables, files and defaults, plus the origin of every field.
    """

    webhook_url: str | None
    timeout_seconds: float | None
    message_field: str
    history_field: str
    error_message: str

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def to_dict(self) -> dict[str, object]:
        """Field values without the origin map."""
        data = self._asdict()
        data.pop("origin")
        return data
