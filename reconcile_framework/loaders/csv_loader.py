"""Delimited-text loader producing a RawTable."""

import csv
import logging
import warnings
from pathlib import Path
from typing import List, Optional

import pandas as pd

from reconcile_framework.core.exceptions import (
    DataLoadError,
    FileNotFoundError,
    UnsupportedFormatError,
)
from reconcile_framework.core.table import RawTable

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {
    ".csv": ",",
    ".tsv": "\t",
    ".txt": None,
}


def detect_delimiter(file_path: str, sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a delimited file.

    Args:
        file_path: Path to the file
        sample_size: Number of bytes to sample for detection

    Returns:
        Detected delimiter character, defaults to ',' if detection fails
    """
    encodings = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)

            sniffer = csv.Sniffer()
            dialect = sniffer.sniff(sample, delimiters=',\t|;:')
            return dialect.delimiter
        except UnicodeDecodeError:
            continue
        except csv.Error:
            break

    return ','


def detect_encoding(file_path: str) -> str:
    """
    Detect the encoding of a file by trying common encodings.

    Returns:
        Detected encoding name, defaults to 'utf-8'
    """
    encodings = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


def _cell(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def load_csv(
    file_path: str,
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
) -> RawTable:
    """
    Read a delimited file into a RawTable.

    The first record is the header row. Every cell is kept as the raw string
    from the file (no trimming, no type conversion); cells missing from short
    rows become None and surplus cells on long rows are dropped. Blank lines
    are skipped.

    Args:
        file_path: Path to a .csv, .tsv or .txt file
        delimiter: Field delimiter; sniffed when None
        encoding: Text encoding; detected when None

    Raises:
        FileNotFoundError: The file does not exist
        UnsupportedFormatError: The extension is not a delimited-text one
        DataLoadError: The file cannot be decoded or parsed
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(str(file_path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(str(file_path), suffix or "(none)", sorted(SUPPORTED_EXTENSIONS))

    if path.stat().st_size == 0:
        logger.warning(f"Empty file: {file_path}")
        return RawTable(headers=(), rows=())

    if delimiter is None:
        delimiter = SUPPORTED_EXTENSIONS[suffix] or detect_delimiter(str(path))
        if delimiter != ',':
            logger.info(f"Using delimiter: {repr(delimiter)}")

    if encoding is None:
        encoding = detect_encoding(str(path))
        if encoding not in ('utf-8', 'utf-8-sig'):
            logger.info(f"Auto-detected encoding: {encoding}")

    read_options = dict(
        sep=delimiter,
        encoding=encoding,
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        engine="python",
    )

    headers: List[str] = []
    try:
        header_frame = pd.read_csv(path, nrows=1, **read_options)
        headers = [_cell(h) or "" for h in header_frame.iloc[0].tolist()] if len(header_frame) else []
        if not headers:
            return RawTable(headers=(), rows=())

        width = len(headers)

        # With index_col=False pandas drops cells beyond the named columns and
        # pads short rows, warning when it had to drop anything
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            frame = pd.read_csv(
                path,
                skiprows=1,
                names=list(range(width)),
                **read_options,
            )
        truncated = any(issubclass(w.category, pd.errors.ParserWarning) for w in caught)

    except pd.errors.EmptyDataError:
        logger.warning(f"No data rows in {file_path}")
        return RawTable(headers=tuple(headers), rows=())

    except pd.errors.ParserError as e:
        raise DataLoadError(
            f"Parsing error in {file_path} (delimiter {repr(delimiter)}): {e}",
            file_path=str(file_path),
            original_exception=e,
        )

    except UnicodeDecodeError as e:
        raise DataLoadError(
            f"Encoding error in {file_path}: Cannot decode file with {encoding} encoding. "
            f"Try specifying a different encoding (e.g., cp1252, latin-1, utf-16).",
            file_path=str(file_path),
            original_exception=e,
        )

    if truncated:
        logger.warning(f"Rows in {file_path} had more cells than headers; surplus cells were dropped")

    rows = [
        tuple(_cell(value) for value in record)
        for record in frame.itertuples(index=False, name=None)
    ]
    logger.info(f"Loaded {len(rows)} rows x {width} columns from {file_path}")
    return RawTable(headers=tuple(headers), rows=tuple(rows))
