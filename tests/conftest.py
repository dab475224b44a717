import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from lsct.core.classifier import Classifier, EntryKind
from lsct.exceptions import ClassificationError


class RecordingClassifier(Classifier):
    """Labels files by base name and records every call it receives."""

    def __init__(self, labels: Optional[Dict[bytes, str]] = None, default: str = "application/octet-stream", fail_on=()):
        self.labels = labels or {}
        self.default = default
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[bytes, int, EntryKind]] = []
        self.opened = 0
        self.closed = 0

    def open(self):
        self.opened += 1
        return self

    def close(self):
        self.closed += 1

    def classify(self, path, size, kind):
        self.calls.append((path, size, kind))
        base = os.path.basename(path)
        if base in self.fail_on:
            raise ClassificationError(path, "simulated backend failure")
        return self.labels.get(base, self.default)

    @property
    def called_paths(self) -> List[bytes]:
        return [c[0] for c in self.calls]


def create_tree(root: Path, files: Dict[str, str]):
    """Creates files (relative path -> content) below root, making parents as needed."""
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    # keeps a developer's ~/.config/lsct/config.toml out of the tests.
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def classifier() -> RecordingClassifier:
    return RecordingClassifier(labels={b"a.txt": "text/plain"})


@pytest.fixture
def example_tree(tmp_path: Path) -> Path:
    """a.txt (10 bytes), .hidden/b.txt and link -> a.txt."""
    proj_dir = tmp_path / "example"
    proj_dir.mkdir()
    create_tree(proj_dir, {"a.txt": "some text\n", ".hidden/b.txt": "hidden text\n"})
    os.symlink("a.txt", proj_dir / "link")
    return proj_dir
