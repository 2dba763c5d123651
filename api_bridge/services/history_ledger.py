"""
Bounded history of executed requests.

The ledger keeps the most recent records in insertion order and drops the
oldest one once capacity is reached. Statistics are computed from the
current buffer on every call.
"""

from collections import Counter, deque
from typing import Callable, Iterator

from ..models.history import RequestRecord
from ..schemas.history import LedgerStats


DEFAULT_CAPACITY = 100


class HistoryLedger:
    """Fixed-capacity FIFO buffer of request records."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._records: deque[RequestRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def append(self, record: RequestRecord) -> None:
        self._records.append(record)

    def recent(self, n: int) -> list[RequestRecord]:
        """The last ``n`` records, oldest first."""
        if n <= 0:
            return []
        return list(self._records)[-n:]

    def filter(self, predicate: Callable[[RequestRecord], bool]) -> list[RequestRecord]:
        return [record for record in self._records if predicate(record)]

    def stats(self) -> LedgerStats:
        records = list(self._records)
        total = len(records)
        successful = sum(1 for record in records if record.success)

        if total:
            success_rate = round(successful / total * 100, 2)
            average = round(sum(record.response_time_ms for record in records) / total, 2)
            # most_common keeps first-seen order on ties
            most_used = Counter(record.api_name for record in records).most_common(1)[0][0]
        else:
            success_rate = 0.0
            average = 0.0
            most_used = None

        return LedgerStats(
            total_requests=total,
            successful_requests=successful,
            success_rate=success_rate,
            average_response_time_ms=average,
            most_used_api_name=most_used,
            last_10=records[-10:],
        )

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RequestRecord]:
        return iter(list(self._records))
