"""
Reconciliation Framework Constants.

This module defines the magic numbers, configuration defaults, and fixed
vocabularies used throughout the reconciliation pipeline. Centralizing these
values keeps the stages consistent with each other and documents their purpose.
"""

# ============================================================================
# Sampling Constants
# ============================================================================

# Number of leading rows handed to the Analyzer and SchemaInferencer
DEFAULT_SAMPLE_SIZE: int = 10

# Distinct sample values kept per column profile
MAX_SAMPLE_VALUES: int = 5


# ============================================================================
# Analyzer Thresholds
# ============================================================================

# Null ratio (percent of sampled rows) above which a column is flagged optional
HIGH_NULL_PERCENTAGE: float = 50.0

# Columns with at most this many distinct values are enum candidates...
ENUM_MAX_UNIQUE_VALUES: int = 10

# ...provided they also stay below this share of sampled rows (percent)
ENUM_MAX_UNIQUE_PERCENTAGE: float = 20.0

# Completeness (percent of filled cells) below which a quality issue is raised
LOW_COMPLETENESS_PERCENTAGE: float = 70.0


# ============================================================================
# Schema Inference
# ============================================================================

# Share of non-empty sampled values at which an inferred field becomes required
REQUIRED_FIELD_THRESHOLD: float = 0.9

# Primitive types the Analyzer can detect
DETECTABLE_TYPES: tuple = ("string", "number", "boolean", "date", "email", "url")

# Every type tag a schema field may carry
SCHEMA_FIELD_TYPES: tuple = DETECTABLE_TYPES + ("array", "object")


# ============================================================================
# Field Matching Confidence Tiers
# ============================================================================

EXACT_MATCH_CONFIDENCE: float = 1.0
VARIANT_MATCH_CONFIDENCE: float = 0.9
SYNONYM_MATCH_CONFIDENCE: float = 0.85
PARTIAL_MATCH_CONFIDENCE: float = 0.6

# Mappings below this confidence are flagged for manual review
REVIEW_CONFIDENCE_THRESHOLD: float = 0.8


# ============================================================================
# Validation Constants
# ============================================================================

# Values longer than this raise a warning in schema-absent validation
MAX_REASONABLE_STRING_LENGTH: int = 10_000

# Boolean vocabulary shared by the Analyzer, Validator and Fixer
TRUE_VALUES: tuple = ("true", "yes", "1")
FALSE_VALUES: tuple = ("false", "no", "0")
BOOLEAN_VALUES: tuple = TRUE_VALUES + FALSE_VALUES


# ============================================================================
# Transformation Operation Tags
# ============================================================================

OPERATION_AUTO_FIX: str = "auto-fix"
OPERATION_MARK_DUPLICATE: str = "mark-duplicate"
OPERATION_REMOVE_DUPLICATE: str = "remove-duplicate"
OPERATION_NORMALIZE_DATE: str = "normalize-date"
OPERATION_FILL_DEFAULT: str = "fill-default"


# ============================================================================
# Sink Delivery
# ============================================================================

# Records per batch submitted to a sink
DEFAULT_BATCH_SIZE: int = 500

# Hard ceiling on batch size regardless of configuration
MAX_BATCH_SIZE: int = 1_000

# Rows returned by Sink.fetch_data
FETCH_LIMIT: int = 100


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration/schema file size (10MB)
# Security measure: Prevents DoS attacks via huge YAML files
MAX_YAML_FILE_SIZE: int = 10 * 1024 * 1024

# Maximum YAML nesting depth
MAX_YAML_NESTING_DEPTH: int = 20

# Maximum number of keys/items across a YAML document
MAX_YAML_KEY_COUNT: int = 10_000

# Maximum length of any string inside a YAML document
MAX_STRING_LENGTH: int = 10 * 1024 * 1024


# ============================================================================
# Exit Codes
# ============================================================================

EXIT_SUCCESS: int = 0
EXIT_UNRESOLVED_ERRORS: int = 1
EXIT_FATAL: int = 2
