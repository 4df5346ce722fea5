"""
Unit tests for batched delivery to sinks.
"""

import pytest

from reconcile_framework.core.constants import MAX_BATCH_SIZE
from reconcile_framework.core.exceptions import SinkConfigError, SinkError
from reconcile_framework.sinks.delivery import deliver
from reconcile_framework.sinks.memory_sink import MemorySink


CONFIG = {"provider": "memory", "collection": "people"}


class FlakySink(MemorySink):
    """Rejects the batches whose index is listed in ``failing``."""

    def __init__(self, failing):
        super().__init__()
        self.failing = set(failing)
        self.batch_sizes = []

    def import_data(self, records, config, on_progress=None):
        index = len(self.batch_sizes)
        self.batch_sizes.append(len(records))
        if index in self.failing:
            raise SinkError(f"batch {index} refused", provider=self.provider, collection=config["collection"])
        return super().import_data(records, config, on_progress)


@pytest.mark.unit
class TestDeliver:

    def test_all_batches_succeed(self):
        sink = MemorySink()
        records = [{"n": i} for i in range(5)]

        result = deliver(records, sink, CONFIG, batch_size=2)

        assert result.to_dict() == {"success": 5, "failure": 0, "errors": []}
        assert sink.collections["people"] == records

    def test_failed_batch_does_not_stop_the_rest(self):
        sink = FlakySink(failing=[1])
        records = [{"n": i} for i in range(5)]

        result = deliver(records, sink, CONFIG, batch_size=2)

        assert sink.batch_sizes == [2, 2, 1]
        assert result.success == 3
        assert result.failure == 2
        assert result.errors == [{"batch": 1, "error": "batch 1 refused"}]
        assert not result.ok

    def test_batches_are_sequential_and_ordered(self):
        sink = MemorySink()
        records = [{"n": i} for i in range(7)]
        deliver(records, sink, CONFIG, batch_size=3)
        assert [r["n"] for r in sink.collections["people"]] == list(range(7))

    def test_progress(self):
        progress = []
        deliver([{"n": i} for i in range(5)], FlakySink(failing=[0]), CONFIG, batch_size=2,
                on_progress=lambda done, total: progress.append((done, total)))
        assert progress == [(2, 5), (3, 5)]

    def test_batch_size_capped(self):
        sink = FlakySink(failing=[])
        deliver([{"n": i} for i in range(MAX_BATCH_SIZE + 1)], sink, CONFIG, batch_size=MAX_BATCH_SIZE * 5)
        assert sink.batch_sizes == [MAX_BATCH_SIZE, 1]

    def test_no_records(self):
        sink = FlakySink(failing=[])
        result = deliver([], sink, CONFIG)
        assert result.success == 0
        assert sink.batch_sizes == []

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            deliver([{"n": 1}], MemorySink(), CONFIG, batch_size=0)

    def test_incomplete_config(self):
        with pytest.raises(SinkConfigError):
            deliver([{"n": 1}], MemorySink(), {"provider": "memory"})

    def test_records_not_mutated(self):
        records = [{"n": 1}]
        sink = MemorySink()
        deliver(records, sink, CONFIG)
        sink.collections["people"][0]["n"] = 99
        assert records == [{"n": 1}]
