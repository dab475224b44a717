# lsct/core/grouping.py
"""
Append-only grouping of paths by label.

Buckets are found by hash lookup and the label keys are sorted once, when the
store is drained or counted. Labels compare as their UTF-8 bytes. Within a
bucket, paths keep the order in which they were added (first added, first
drained).
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List
import structlog

from lsct.exceptions import GroupingStoreError

log = structlog.get_logger(__name__)

def encode_label(label: str) -> bytes:
    return label.encode("utf-8", errors="surrogateescape")

@dataclass
class Bucket:
    # all paths sharing one label, in insertion order.
    label: str
    paths: List[bytes] = field(default_factory=list)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

class GroupingStore:
    def __init__(self):
        self._buckets: Dict[bytes, Bucket] = {}
        self._path_count = 0
        self._drained = False

    def add(self, label: str, path: bytes) -> None:
        if self._drained:
            raise GroupingStoreError("cannot add to a grouping store that has already been drained")
        key = encode_label(label)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = Bucket(label=label)
            self._buckets[key] = bucket
            log.debug("label_bucket_created", label=label)
        # bytes(...) detaches the stored path from any mutable buffer the caller passed.
        bucket.paths.append(bytes(path))
        self._path_count += 1

    def drain(self, visit_fn: Callable[[str, Bucket], None]) -> None:
        """Visits every bucket once, in ascending label order.

        The store is consumed by this call: later `add` or `drain` calls
        raise GroupingStoreError.
        """
        if self._drained:
            raise GroupingStoreError("grouping store has already been drained")
        self._drained = True
        for key in sorted(self._buckets):
            bucket = self._buckets[key]
            visit_fn(bucket.label, bucket)

    def counts(self) -> Dict[str, int]:
        # label -> number of paths, in ascending label order.
        return {self._buckets[k].label: len(self._buckets[k]) for k in sorted(self._buckets)}

    @property
    def label_count(self) -> int:
        return len(self._buckets)

    @property
    def is_empty(self) -> bool:
        return self._path_count == 0

    @property
    def drained(self) -> bool:
        return self._drained

    def __len__(self) -> int:
        return self._path_count
