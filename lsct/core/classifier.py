# lsct/core/classifier.py
"""
Boundary to the content-type classification backend.

A classifier turns a non-empty regular file into a label string. It also
declares the two labels the walker assigns without consulting it: one for
zero-byte files and one for symlinks. The walker never calls `classify` for
anything but non-empty regular files.
"""
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple
import structlog

from lsct.config.settings import ClassifierMode, DEFAULT_CLASSIFIER_MODE
from lsct.exceptions import ClassifierInitError, ClassificationError

log = structlog.get_logger(__name__)

class EntryKind(Enum):
    # filesystem entry kinds as seen by a non-following stat.
    REGULAR = "regular"
    SYMLINK = "symlink"
    DIRECTORY = "directory"
    OTHER = "other"

class Classifier:
    """Base classifier. Subclasses implement `classify`.

    Usable as a context manager; the handle is opened once before the walk
    and closed once after the run, whether it completes or aborts.
    """

    empty_label: str = "empty file"
    symlink_label: str = "symlink"

    def open(self) -> "Classifier":
        return self

    def close(self) -> None:
        pass

    def __enter__(self) -> "Classifier":
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def classify(self, path: bytes, size: int, kind: EntryKind) -> str:
        raise NotImplementedError

# (empty label, symlink label) per mode, mirroring what libmagic itself
# reports for such entries in that mode.
MAGIC_FIXED_LABELS: Dict[ClassifierMode, Tuple[str, str]] = {
    ClassifierMode.MIME: ("inode/x-empty", "inode/symlink"),
    ClassifierMode.MIME_CHARSET: ("inode/x-empty; charset=binary", "inode/symlink"),
    ClassifierMode.DESCRIPTION: (Classifier.empty_label, Classifier.symlink_label),
}

class MagicClassifier(Classifier):
    # libmagic-backed classifier via python-magic.

    def __init__(self, mode: ClassifierMode = DEFAULT_CLASSIFIER_MODE, magic_file: Optional[Path] = None):
        self.mode = mode
        self.magic_file = magic_file
        self.empty_label, self.symlink_label = MAGIC_FIXED_LABELS[mode]
        self._magic = None
        self._lib = None
        self._backend_errors: Tuple[type, ...] = (OSError,)

    def open(self) -> "MagicClassifier":
        if self._magic is not None:
            return self
        try:
            import magic
        except ImportError as e:
            raise ClassifierInitError(f"failed to initialise libmagic: {e}")

        self._lib = magic
        self._backend_errors = (magic.MagicException, OSError)
        db = str(self.magic_file) if self.magic_file else None
        try:
            self._magic = magic.Magic(
                mime=self.mode in (ClassifierMode.MIME, ClassifierMode.MIME_CHARSET),
                mime_encoding=self.mode is ClassifierMode.MIME_CHARSET,
                magic_file=db,
            )
        except self._backend_errors as e:
            raise ClassifierInitError(f"failed to load libmagic database: {e}")

        # classifying must not touch access times; backend errors must surface as errors.
        flags = self._magic.flags | magic.MAGIC_PRESERVE_ATIME | magic.MAGIC_ERROR
        if magic.magic_setflags(self._magic.cookie, flags) == -1:
            self.close()
            raise ClassifierInitError("libmagic does not support preserving access times on this system")
        log.debug("magic_classifier_opened", mode=self.mode.value, magic_file=db)
        return self

    def close(self) -> None:
        if self._magic is not None:
            if self._magic.cookie:
                self._lib.magic_close(self._magic.cookie)
                # stops python-magic from closing the same cookie again on collection.
                self._magic.cookie = None
            self._magic = None
            log.debug("magic_classifier_closed")

    def classify(self, path: bytes, size: int, kind: EntryKind) -> str:
        if self._magic is None:
            raise ClassifierInitError("libmagic classifier used before it was opened")
        try:
            label = self._magic.from_file(path)
        except self._backend_errors as e:
            raise ClassificationError(path, f"libmagic error: {e}")
        if not label:
            raise ClassificationError(path, "libmagic returned no type")
        return label
