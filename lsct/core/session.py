# lsct/core/session.py
from typing import BinaryIO, Dict, Optional
import structlog

from lsct.config.settings import ListingConfig
from lsct.core.classifier import Classifier, MagicClassifier
from lsct.core.emitter import Emitter
from lsct.core.grouping import GroupingStore
from lsct.core.walker import TreeWalker

log = structlog.get_logger(__name__)

def build_classifier(config: ListingConfig) -> Classifier:
    return MagicClassifier(mode=config.classifier_mode, magic_file=config.magic_file)

class ListingSession:
    # owns the classifier handle and grouping store for exactly one run.
    def __init__(self, config: ListingConfig, classifier: Optional[Classifier] = None, stream: Optional[BinaryIO] = None):
        self.config: ListingConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.classifier: Classifier = classifier if classifier is not None else build_classifier(config)
        self.store = GroupingStore()
        self.walker = TreeWalker(
            self.classifier,
            self.store,
            include_hidden=config.include_hidden,
            ignore_inaccessible_roots=config.ignore_inaccessible_roots,
        )
        self.emitter = Emitter(stream=stream, mime_format=config.mime_format, terminator=config.terminator)
        self.label_counts: Dict[str, int] = {}

    def walk_roots(self) -> None:
        report_relative = self.config.uses_default_root
        for root in self.config.effective_roots:
            self.walker.walk(root, report_relative=report_relative)

    def run(self) -> int:
        # walks every root, then drains the store once; returns the record count.
        self.log.info("listing_run_started", roots=len(self.config.effective_roots))
        with self.classifier:
            self.walk_roots()
            self.label_counts = self.store.counts()
            written = self.emitter.drain(self.store)
        self.log.info(
            "listing_run_complete",
            records=written,
            labels=len(self.label_counts),
            visited=self.walker.entries_visited,
            warnings=self.walker.warnings,
        )
        return written
