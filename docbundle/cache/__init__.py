"""Checksum lock cache for incremental document processing."""

from .manager import LockCache, compute_checksum

__all__ = ["LockCache", "compute_checksum"]
