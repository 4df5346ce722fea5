"""
JSON serialization utilities for pipeline results.

Records may carry numpy scalars or pandas timestamps when callers feed the
pipeline from DataFrames; these helpers turn them into plain JSON values so
results serialize identically across runs.
"""

import json
import math
import numpy as np
import pandas as pd
from datetime import datetime, date
from typing import Any


class NumpyJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles numpy, pandas and datetime values.

    Converts:
    - numpy int types → Python int
    - numpy float types → Python float (NaN/inf → null)
    - numpy bool → Python bool
    - numpy arrays → Python lists
    - pandas Timestamp, datetime, date → ISO format string
    - sets → sorted lists
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.integer):
            return int(obj)

        if isinstance(obj, np.floating):
            if np.isnan(obj) or np.isinf(obj):
                return None
            return float(obj)

        if isinstance(obj, np.bool_):
            return bool(obj)

        if isinstance(obj, np.ndarray):
            return obj.tolist()

        if isinstance(obj, pd.Timestamp):
            return obj.isoformat()

        if isinstance(obj, (datetime, date)):
            return obj.isoformat()

        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)

        return super().default(obj)


def convert_to_json_serializable(obj: Any) -> Any:
    """
    Recursively convert object to JSON-serializable types.

    Args:
        obj: Object to convert

    Returns:
        JSON-serializable version of object
    """
    if obj is None:
        return None

    if isinstance(obj, np.integer):
        return int(obj)

    if isinstance(obj, (np.floating, float)) and not isinstance(obj, bool):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return float(obj)

    if isinstance(obj, np.bool_):
        return bool(obj)

    if isinstance(obj, np.ndarray):
        return [convert_to_json_serializable(item) for item in obj.tolist()]

    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, dict):
        return {
            str(key): convert_to_json_serializable(value)
            for key, value in obj.items()
        }

    if isinstance(obj, (list, tuple)):
        return [convert_to_json_serializable(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return [convert_to_json_serializable(item) for item in sorted(obj, key=str)]

    return obj


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """
    Serialize object to a JSON string using the custom encoder.

    Keys are emitted in insertion order so identical results produce
    byte-identical output.
    """
    if 'cls' not in kwargs:
        kwargs['cls'] = NumpyJSONEncoder
    if 'indent' not in kwargs:
        kwargs['indent'] = 2
    kwargs.setdefault('ensure_ascii', False)

    return json.dumps(convert_to_json_serializable(obj), **kwargs)


def safe_json_dump(obj: Any, fp, **kwargs) -> None:
    """Serialize object to a JSON file using the custom encoder."""
    if 'cls' not in kwargs:
        kwargs['cls'] = NumpyJSONEncoder
    if 'indent' not in kwargs:
        kwargs['indent'] = 2
    kwargs.setdefault('ensure_ascii', False)

    json.dump(convert_to_json_serializable(obj), fp, **kwargs)


def canonical_record_key(record: dict) -> str:
    """
    Full serialized form of a record, used for exact-duplicate removal.

    Keys are sorted so field order does not matter; values keep their type.
    """
    return json.dumps(
        convert_to_json_serializable(record),
        sort_keys=True,
        cls=NumpyJSONEncoder,
        ensure_ascii=False,
        default=str,
    )
