"""Header-to-field matching and row projection."""

from reconcile_framework.mapping.field_matcher import FieldMatcher, MappingResult
from reconcile_framework.mapping.transformer import Transformer, TransformResult

__all__ = ['FieldMatcher', 'MappingResult', 'Transformer', 'TransformResult']
