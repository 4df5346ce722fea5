"""Raw tabular input handed to the pipeline."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Any


@dataclass(frozen=True)
class RawTable:
    """
    Ordered headers plus ordered rows of raw cell values.

    Headers need not be unique. Cells are raw strings or None. The table is
    immutable once built; the pipeline only ever reads it.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[Optional[Any], ...], ...]

    @classmethod
    def from_lists(cls, headers: Sequence[str], rows: Sequence[Sequence[Optional[Any]]]) -> "RawTable":
        return cls(
            headers=tuple(headers),
            rows=tuple(tuple(row) for row in rows),
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def sample(self, size: int) -> List[Tuple[Optional[Any], ...]]:
        """First ``size`` rows."""
        return list(self.rows[:size])
