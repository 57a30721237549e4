"""
Core resolution engine for pomgraph.

Example:
    >>> from pomgraph.core import Repository
"""

from __future__ import annotations

from pomgraph.core.cache import CacheEntry, ResolutionCache
from pomgraph.core.loader import ClasspathUnit, Loader, MaterializingLoader
from pomgraph.core.manifest import (
    DocumentView,
    Manifest,
    ManifestParser,
    XmlDocumentView,
    parse_document,
)
from pomgraph.core.repository import Repository
from pomgraph.core.resolver import DependencyResolver, canonical_roots

__all__ = [
    "CacheEntry",
    "ResolutionCache",
    "ClasspathUnit",
    "Loader",
    "MaterializingLoader",
    "DocumentView",
    "Manifest",
    "ManifestParser",
    "XmlDocumentView",
    "parse_document",
    "Repository",
    "DependencyResolver",
    "canonical_roots",
]
