"""Artifact persistence."""

from .artifacts import CONTENT_FILENAME, ROUTES_FILENAME, RUNTIME_FILENAME, ArtifactStore

__all__ = ["ArtifactStore", "CONTENT_FILENAME", "ROUTES_FILENAME", "RUNTIME_FILENAME"]
