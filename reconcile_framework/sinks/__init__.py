"""
Persistence backends for import-ready records.

Key Components:
- Sink: Capability interface (test, import, fetch, purge)
- SinkFactory: Provider tag -> sink instance
- deliver: Sequential batched writes with per-batch failure accounting
"""

from reconcile_framework.sinks.base import Sink, ImportResult
from reconcile_framework.sinks.factory import SinkFactory, validate_sink_config
from reconcile_framework.sinks.delivery import deliver

__all__ = ['Sink', 'ImportResult', 'SinkFactory', 'validate_sink_config', 'deliver']
