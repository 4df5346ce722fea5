"""Sink provider lookup and configuration checks."""

import logging
from typing import Any, Dict, List, Type

from reconcile_framework.core.exceptions import SinkConfigError, UnsupportedProviderError
from reconcile_framework.sinks.base import Sink
from reconcile_framework.sinks.jsonl_sink import JsonlSink
from reconcile_framework.sinks.memory_sink import MemorySink
from reconcile_framework.sinks.sqlite_sink import SqliteSink

logger = logging.getLogger(__name__)

# Provider-specific keys a sink configuration must carry
_PROVIDER_OPTIONS = {
    "jsonl": ("path",),
    "sqlite": ("database",),
}


class SinkFactory:
    """
    Create sinks from a provider tag.

    A new instance is returned on every call; the factory keeps no cache.

    Example:
        >>> sink = SinkFactory.create("sqlite")
        >>> sink.test_connection({"provider": "sqlite", "collection": "customers",
        ...                       "database": "out.db"})
        True
    """

    PROVIDERS: Dict[str, Type[Sink]] = {
        "memory": MemorySink,
        "jsonl": JsonlSink,
        "sqlite": SqliteSink,
    }

    @classmethod
    def create(cls, provider: str) -> Sink:
        sink_class = cls.PROVIDERS.get(provider)
        if sink_class is None:
            raise UnsupportedProviderError(str(provider), sorted(cls.PROVIDERS))
        logger.debug(f"Creating {sink_class.__name__} for provider {provider}")
        return sink_class()

    @classmethod
    def supported_providers(cls) -> List[str]:
        return sorted(cls.PROVIDERS)


def validate_sink_config(config: Dict[str, Any]) -> List[str]:
    """
    Check a sink configuration.

    Returns:
        Problems found; empty when the configuration is complete.
    """
    problems: List[str] = []
    provider = config.get("provider")
    if not provider:
        problems.append("Provider is required")
    if not config.get("collection"):
        problems.append("Collection/Table name is required")

    for option in _PROVIDER_OPTIONS.get(provider, ()):
        if not config.get(option):
            problems.append(f"{option} is required for the {provider} provider")

    return problems


def ensure_valid_sink_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the config unchanged, or raise SinkConfigError."""
    problems = validate_sink_config(config)
    if problems:
        raise SinkConfigError(problems, provider=config.get("provider"))
    return config
