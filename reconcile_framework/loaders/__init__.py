"""Readers that turn files into a RawTable."""

from reconcile_framework.loaders.csv_loader import load_csv, detect_delimiter, detect_encoding

__all__ = ['load_csv', 'detect_delimiter', 'detect_encoding']
