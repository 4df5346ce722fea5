"""
Column profiling and schema inference.

Key Components:
- TypeInferrer: Per-value and per-column primitive type detection
- ColumnAnalyzer: Column profiles and recommendations over a row sample
- SchemaInferencer: Synthesizes a schema from column profiles
"""

from reconcile_framework.profiler.type_inferrer import TypeInferrer, TypeInference
from reconcile_framework.profiler.analyzer import (
    ColumnAnalyzer,
    ColumnProfile,
    AnalysisResult,
    QualityReport,
    analyze_quality,
)
from reconcile_framework.profiler.schema_inferencer import (
    SchemaInferencer,
    normalize_field_name,
    validate_schema,
    merge_schemas,
    generate_schema_doc,
)

__all__ = [
    'TypeInferrer',
    'TypeInference',
    'ColumnAnalyzer',
    'ColumnProfile',
    'AnalysisResult',
    'QualityReport',
    'analyze_quality',
    'SchemaInferencer',
    'normalize_field_name',
    'validate_schema',
    'merge_schemas',
    'generate_schema_doc',
]
