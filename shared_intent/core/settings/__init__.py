"""Modular Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from shared_intent.core.settings import get_rabbit_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables (production)
    4. .env file (development only)
    5. secrets_dir (Kubernetes/Docker secrets)
"""

from __future__ import annotations

from .loader import clear_all_caches, get_logging_settings, get_rabbit_settings
from .logs import LoggingSettings
from .rabbit import RabbitSettings

__all__ = [
    "LoggingSettings",
    "RabbitSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_rabbit_settings",
]
