import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
import structlog

log = structlog.get_logger(__name__)

# walked when no root is given on the command line.
DEFAULT_ROOT = b"."
NEWLINE_TERMINATOR = b"\n"
NUL_TERMINATOR = b"\0"

class ClassifierMode(Enum):
    # selects what the magic backend reports for each file.
    MIME = "mime"
    MIME_CHARSET = "mime-charset"
    DESCRIPTION = "description"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["ClassifierMode"]:
        if not s:
            return None
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_classifier_mode_string", input_string=s)
            return None

DEFAULT_CLASSIFIER_MODE = ClassifierMode.MIME

@dataclass
class ListingConfig:
    # holds all configuration parameters for a single run.
    roots: List[bytes] = field(default_factory=list)
    include_hidden: bool = False
    mime_format: bool = False
    null_terminator: bool = False
    ignore_inaccessible_roots: bool = False
    classifier_mode: ClassifierMode = DEFAULT_CLASSIFIER_MODE
    magic_file: Optional[Path] = None
    console_show_summary: bool = False

    def __post_init__(self):
        # roots may come from TOML as text; the walker works on bytes throughout.
        self.roots = [os.fsencode(r) for r in self.roots]

    @property
    def terminator(self) -> bytes:
        return NUL_TERMINATOR if self.null_terminator else NEWLINE_TERMINATOR

    @property
    def uses_default_root(self) -> bool:
        return not self.roots

    @property
    def effective_roots(self) -> List[bytes]:
        return list(self.roots) if self.roots else [DEFAULT_ROOT]
