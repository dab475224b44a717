# lsct/config/__init__.py
"""
Run configuration for lsct: the ListingConfig dataclass and the TOML
loader that layers user, project and profile settings beneath the CLI.
"""
from .settings import ListingConfig, ClassifierMode

__all__ = ["ListingConfig", "ClassifierMode"]
