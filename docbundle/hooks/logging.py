"""
Transcript logger for the document transform.

Appends a JSONL entry per processed document and keeps simple run counters.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


@dataclass
class TranscriptEntry:
    """Log entry for one processed document."""
    timestamp: str
    path: str
    status: str  # "transformed" or "passthrough"
    checksum: str
    output_path: str
    input_chars: int
    output_chars: int
    provider: Optional[str] = None
    model: Optional[str] = None
    used_fallback: bool = False


class TranscriptLogger:
    """JSONL transcript of processed documents."""

    def __init__(self, log_file: Path):
        """
        Initialize the transcript logger.

        Args:
            log_file: Path to the JSONL transcript file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.log_file.touch(exist_ok=True)

        self.stats = {
            "entries": 0,
            "fallbacks": 0,
        }

    def record(
        self,
        path: str,
        status: str,
        checksum: str,
        output_path: str,
        input_chars: int,
        output_chars: int,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        used_fallback: bool = False,
    ) -> TranscriptEntry:
        """Append one entry and return it."""
        entry = TranscriptEntry(
            timestamp=datetime.now().isoformat(),
            path=path,
            status=status,
            checksum=checksum,
            output_path=output_path,
            input_chars=input_chars,
            output_chars=output_chars,
            provider=provider,
            model=model,
            used_fallback=used_fallback,
        )

        with open(self.log_file, 'a', encoding='utf-8') as f:
            f.write(json.dumps(asdict(entry)) + '\n')

        self.stats["entries"] += 1
        if used_fallback:
            self.stats["fallbacks"] += 1

        return entry

    def get_stats(self) -> Dict[str, int]:
        return self.stats.copy()
