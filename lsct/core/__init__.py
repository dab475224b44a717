# lsct/core/__init__.py
"""
Listing engine for lsct.

The walker classifies entries and groups them by label; the emitter drains
the groups in label order. ListingSession wires the pieces together for a
single run.
"""
from .classifier import Classifier, MagicClassifier, EntryKind
from .grouping import GroupingStore, Bucket
from .walker import TreeWalker, WalkDecision
from .emitter import Emitter
from .session import ListingSession

__all__ = [
    "Classifier",
    "MagicClassifier",
    "EntryKind",
    "GroupingStore",
    "Bucket",
    "TreeWalker",
    "WalkDecision",
    "Emitter",
    "ListingSession",
]
