import sys
from typing import BinaryIO, Optional
import structlog

from lsct.config.settings import NEWLINE_TERMINATOR
from lsct.core.grouping import Bucket, GroupingStore, encode_label
from lsct.exceptions import NothingToListError, OutputError

log = structlog.get_logger(__name__)

class Emitter:
    # writes one "<label>: <path><term>" or "<path><term>" record per path.

    def __init__(self, stream: Optional[BinaryIO] = None, mime_format: bool = False, terminator: bytes = NEWLINE_TERMINATOR):
        if len(terminator) != 1:
            raise ValueError(f"record terminator must be a single byte, got {terminator!r}")
        self.stream = stream if stream is not None else sys.stdout.buffer
        self.mime_format = mime_format
        self.terminator = terminator
        self.records_written = 0

    def format_record(self, label: str, path: bytes) -> bytes:
        if self.mime_format:
            return encode_label(label) + b": " + path + self.terminator
        return path + self.terminator

    def emit(self, label: str, path: bytes) -> None:
        try:
            self.stream.write(self.format_record(label, path))
        except OSError as e:
            raise OutputError(f"failed to write to output: {e}")
        self.records_written += 1

    def _emit_bucket(self, label: str, bucket: Bucket) -> None:
        for path in bucket:
            self.emit(label, path)

    def drain(self, store: GroupingStore) -> int:
        # drains the whole store; an empty store means there was nothing to list.
        if store.is_empty:
            raise NothingToListError("Nothing to list")
        store.drain(self._emit_bucket)
        try:
            self.stream.flush()
        except OSError as e:
            raise OutputError(f"failed to flush output: {e}")
        log.info("records_emitted", count=self.records_written, labels=store.label_count)
        return self.records_written
