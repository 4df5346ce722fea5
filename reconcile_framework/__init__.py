"""
Tabular data reconciliation.

Takes a raw table of headers and string cells, profiles it, maps its columns
onto a target schema, validates and safely fixes the records, and returns one
PipelineResult ready for review or import.

Key Components:
- ReconciliationEngine: Runs the six pipeline stages
- PipelineConfig: YAML job configuration
- load_csv: Delimited-file reader producing a RawTable
- SinkFactory / deliver: Batched delivery of import-ready records
"""

__version__ = "1.0.0"

from reconcile_framework.core.config import PipelineConfig, load_schema
from reconcile_framework.core.engine import ReconciliationEngine
from reconcile_framework.core.results import Diagnostic, PipelineResult, Severity, Transformation
from reconcile_framework.core.schema import Schema, SchemaField, ValidationRules
from reconcile_framework.core.table import RawTable
from reconcile_framework.loaders.csv_loader import load_csv
from reconcile_framework.sinks.delivery import deliver
from reconcile_framework.sinks.factory import SinkFactory

__all__ = [
    '__version__',
    'PipelineConfig',
    'load_schema',
    'ReconciliationEngine',
    'Diagnostic',
    'PipelineResult',
    'Severity',
    'Transformation',
    'Schema',
    'SchemaField',
    'ValidationRules',
    'RawTable',
    'load_csv',
    'deliver',
    'SinkFactory',
]
