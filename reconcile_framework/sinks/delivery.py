"""
Batched delivery of records to a sink.

Batches are submitted one after another. A batch the sink rejects is counted
as a failure and recorded; the remaining batches are still attempted.
"""

from typing import Any, Callable, Dict, List, Optional

from reconcile_framework.core.constants import DEFAULT_BATCH_SIZE, MAX_BATCH_SIZE
from reconcile_framework.core.exceptions import SinkError
from reconcile_framework.core.logging_config import get_logger
from reconcile_framework.sinks.base import ImportResult, Sink
from reconcile_framework.sinks.factory import ensure_valid_sink_config

logger = get_logger(__name__)


def deliver(
    records: List[Dict[str, Any]],
    sink: Sink,
    config: Dict[str, Any],
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> ImportResult:
    """
    Write records to a sink in sequential batches.

    Args:
        records: Records to write, usually ``PipelineResult.import_ready()``
        sink: Target sink
        config: Sink configuration (provider, collection, provider options)
        batch_size: Records per batch, capped at MAX_BATCH_SIZE
        on_progress: Called after each successful batch with
            (records delivered so far, total records)

    Returns:
        ImportResult aggregated over all batches

    Raises:
        SinkConfigError: The configuration is incomplete
    """
    ensure_valid_sink_config(config)
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    batch_size = min(batch_size, MAX_BATCH_SIZE)

    total = len(records)
    result = ImportResult()
    collection = config.get("collection")
    logger.info(f"Delivering {total} records to {sink.provider}:{collection} in batches of {batch_size}")

    for batch_index, start in enumerate(range(0, total, batch_size)):
        batch = records[start:start + batch_size]
        try:
            written = sink.import_data(batch, config)
        except SinkError as e:
            logger.warning(f"Batch {batch_index} rejected by {sink.provider}: {e.message}")
            result.failure += len(batch)
            result.errors.append({"batch": batch_index, "error": e.message})
            continue

        result.success += written.success
        result.failure += written.failure
        result.errors.extend(written.errors)
        if on_progress:
            on_progress(result.success, total)

    if result.failure:
        logger.warning(f"Delivery finished with {result.failure} failed records in {len(result.errors)} batches")
    else:
        logger.info(f"Delivered {result.success} records")
    return result
