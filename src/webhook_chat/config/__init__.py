"""Configuration management for webhook_chat.

Resolve once, then pass the immutable `ResolvedConfig` around:

    from webhook_chat.config import resolve_config

    config = resolve_config({"webhook_url": "https://example.com/chat"})
"""

from .api import effective_config, print_effective_config, resolve_config
from .audit import SourceTracker
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import DEFAULT_ERROR_MESSAGE, ChatSettings
from .types import ConfigOrigin, ResolvedConfig, SourceMap

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "ChatSettings",
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "FileConfigLoader",
    "ResolvedConfig",
    "SourceMap",
    "SourceTracker",
    "effective_config",
    "print_effective_config",
    "resolve_config",
]
