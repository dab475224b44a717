# lsct/core/walker.py
import os
import stat
from enum import Enum
from typing import List, Tuple
import structlog

from lsct.core.classifier import Classifier, EntryKind
from lsct.core.grouping import GroupingStore
from lsct.exceptions import RootInaccessibleError

log = structlog.get_logger(__name__)

# names that only ever appear as path components given on the command line.
TRAVERSAL_ARTIFACTS = (b".", b"..")

class WalkDecision(Enum):
    # what the walker does after visiting a node.
    CONTINUE = "continue"
    SKIP_ENTRY = "skip_entry"
    SKIP_SUBTREE = "skip_subtree"

def entry_kind(mode: int) -> EntryKind:
    if stat.S_ISREG(mode):
        return EntryKind.REGULAR
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.OTHER

def is_hidden_name(name: bytes) -> bool:
    return name.startswith(b".")

def _error_text(e: OSError) -> str:
    return e.strerror or str(e)

class TreeWalker:
    """Physical depth-first walk feeding classified entries into a GroupingStore.

    Symlinks are never followed; they are visited as leaves. Siblings are
    visited in ascending byte order of their names, so the order in which
    paths reach the store is deterministic for a given tree.
    """

    def __init__(
        self,
        classifier: Classifier,
        store: GroupingStore,
        include_hidden: bool = False,
        ignore_inaccessible_roots: bool = False,
    ):
        self.classifier = classifier
        self.store = store
        self.include_hidden = include_hidden
        self.ignore_inaccessible_roots = ignore_inaccessible_roots
        self.entries_visited = 0
        self.entries_classified = 0
        self.warnings = 0

    def visit(self, path: bytes, shown_path: bytes, st: os.stat_result, is_root: bool = False) -> WalkDecision:
        # classifies one node and decides how the walk proceeds from it.
        self.entries_visited += 1
        kind = entry_kind(st.st_mode)
        base = os.path.basename(path)
        # a root argument is never suppressed by its own name.
        suppressed = not self.include_hidden and not is_root and is_hidden_name(base)

        if kind is EntryKind.DIRECTORY:
            if base in TRAVERSAL_ARTIFACTS:
                return WalkDecision.CONTINUE
            return WalkDecision.SKIP_SUBTREE if suppressed else WalkDecision.CONTINUE

        if kind is EntryKind.OTHER or suppressed:
            return WalkDecision.SKIP_ENTRY

        if kind is EntryKind.SYMLINK:
            label = self.classifier.symlink_label
        elif st.st_size == 0:
            label = self.classifier.empty_label
        else:
            label = self.classifier.classify(path, st.st_size, kind)

        self.store.add(label, shown_path)
        self.entries_classified += 1
        return WalkDecision.CONTINUE

    def walk(self, root: bytes, report_relative: bool = False) -> None:
        """Walks one root.

        With `report_relative`, paths below the root are reported relative to
        it (no leading "./" for the current directory).
        """
        log.info("root_walk_started", root=os.fsdecode(root))
        try:
            st = os.lstat(root)
        except OSError as e:
            self._root_inaccessible(root, e)
            return

        decision = self.visit(root, root, st, is_root=True)
        if decision is not WalkDecision.CONTINUE or not stat.S_ISDIR(st.st_mode):
            return

        try:
            names = self._list_directory(root)
        except OSError as e:
            self._root_inaccessible(root, e)
            return

        stack = self._children(root, b"" if report_relative else root, names)
        while stack:
            path, shown_path = stack.pop()
            try:
                st = os.lstat(path)
            except OSError as e:
                self._warn("entry_inaccessible", path, e)
                continue

            decision = self.visit(path, shown_path, st)
            if decision is WalkDecision.SKIP_SUBTREE:
                log.debug("subtree_pruned", path=os.fsdecode(path))
                continue
            if decision is not WalkDecision.CONTINUE or not stat.S_ISDIR(st.st_mode):
                continue

            try:
                names = self._list_directory(path)
            except OSError as e:
                self._warn("directory_unreadable", path, e)
                continue
            stack.extend(self._children(path, shown_path, names))

        log.info("root_walk_finished", root=os.fsdecode(root), visited=self.entries_visited)

    @staticmethod
    def _list_directory(path: bytes) -> List[bytes]:
        with os.scandir(path) as it:
            return sorted(entry.name for entry in it)

    @staticmethod
    def _children(parent: bytes, shown_parent: bytes, names: List[bytes]) -> List[Tuple[bytes, bytes]]:
        # reversed so that popping from the stack yields ascending name order.
        return [
            (os.path.join(parent, name), os.path.join(shown_parent, name) if shown_parent else name)
            for name in reversed(names)
        ]

    def _root_inaccessible(self, root: bytes, e: OSError) -> None:
        if not self.ignore_inaccessible_roots:
            raise RootInaccessibleError(root, _error_text(e))
        self._warn("root_inaccessible_skipped", root, e)

    def _warn(self, event: str, path: bytes, e: OSError) -> None:
        self.warnings += 1
        log.warning(event, path=os.fsdecode(path), error=_error_text(e))
