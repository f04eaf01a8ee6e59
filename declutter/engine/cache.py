"""Time-bounded, partitioned history of recently seen messages."""

from __future__ import annotations

import threading

from loguru import logger

from declutter.core.models import EvictionStats, MessageRecord, Partition, PartitionKey
from declutter.engine.similarity import similarity


class RepetitionCache:
    """In-memory TTL cache that scores each new message against its partition.

    Not process-safe. All access goes through one lock, so a host that runs
    eviction on another thread cannot tear a scan-then-append.
    """

    def __init__(self, *, ttl_seconds: float = 30.0, similarity_threshold: float = 80.0) -> None:
        self._partitions: dict[PartitionKey, Partition] = {}
        self._ttl = float(ttl_seconds)
        self._similarity_threshold = float(similarity_threshold)
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def similarity_threshold(self) -> float:
        return self._similarity_threshold

    def configure(
        self,
        *,
        ttl_seconds: float | None = None,
        similarity_threshold: float | None = None,
    ) -> None:
        """Change the values used by subsequent calls; existing records keep their expiry."""
        with self._lock:
            if ttl_seconds is not None:
                self._ttl = float(ttl_seconds)
            if similarity_threshold is not None:
                self._similarity_threshold = float(similarity_threshold)

    def record_and_score(self, key: PartitionKey, text: object, now: float) -> int:
        """Store ``text`` under ``key`` and return its repetition count.

        The first message ever seen for a key scores 0. Afterwards the count
        is 1 for the message itself plus one per live record in the partition
        whose similarity exceeds the threshold.
        """
        if not isinstance(text, str):
            text = ""
        with self._lock:
            expires_at = now + self._ttl
            partition = self._partitions.get(key)
            if partition is None:
                self._partitions[key] = Partition(
                    messages=[MessageRecord(text=text, expires_at=expires_at)],
                    expires_at=expires_at,
                )
                return 0

            partition.expires_at = expires_at
            cutoff = self._similarity_threshold / 100
            count = 1
            for record in partition.messages:
                if record.expires_at <= now:
                    continue
                if similarity(text, record.text) > cutoff:
                    count += 1
            partition.messages.append(MessageRecord(text=text, expires_at=expires_at))
            return count

    def evict(self, now: float) -> EvictionStats:
        """Drop idle partitions whole and prune expired records from live ones."""
        partitions_dropped = 0
        records_dropped = 0
        records_left = 0
        with self._lock:
            for key in list(self._partitions):
                partition = self._partitions[key]
                if partition.expires_at < now:
                    records_dropped += len(partition.messages)
                    partitions_dropped += 1
                    del self._partitions[key]
                    continue

                live = [record for record in partition.messages if record.expires_at > now]
                records_dropped += len(partition.messages) - len(live)
                if not live:
                    partitions_dropped += 1
                    del self._partitions[key]
                    continue
                partition.messages = live
                records_left += len(live)
            partitions_left = len(self._partitions)

        if partitions_dropped or records_dropped:
            logger.debug(
                "declutter_evict dropped_partitions={} dropped_records={} partitions={} records={}",
                partitions_dropped,
                records_dropped,
                partitions_left,
                records_left,
            )
        return EvictionStats(
            partitions_dropped=partitions_dropped,
            records_dropped=records_dropped,
            partitions_left=partitions_left,
            records_left=records_left,
        )

    def clear(self) -> None:
        with self._lock:
            self._partitions.clear()

    # ── Introspection ────────────────────────────────────────────────

    def partition(self, key: PartitionKey) -> tuple[MessageRecord, ...]:
        """Snapshot of one partition's records, oldest first (empty if absent)."""
        with self._lock:
            partition = self._partitions.get(key)
            if partition is None:
                return ()
            return tuple(
                MessageRecord(text=r.text, expires_at=r.expires_at) for r in partition.messages
            )

    def partition_expires_at(self, key: PartitionKey) -> float | None:
        with self._lock:
            partition = self._partitions.get(key)
            return partition.expires_at if partition is not None else None

    def record_count(self) -> int:
        with self._lock:
            return sum(len(p.messages) for p in self._partitions.values())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._partitions

    def __len__(self) -> int:
        with self._lock:
            return len(self._partitions)
