"""
Transcript logging for transform runs.

Records one JSON line per processed document so a run can be audited
after the fact (which provider produced which output, and from what input).
"""

from .logging import TranscriptEntry, TranscriptLogger

__all__ = ["TranscriptEntry", "TranscriptLogger"]
