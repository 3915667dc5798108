from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List

from shadowlogs.decoding.decoder import DecodedLog

logger = logging.getLogger(__name__)


def decoded_log_to_json_line(decoded: DecodedLog) -> str:
    """Serialize a decoded log as a compact JSON line (parameter order preserved)."""
    record = {
        "event": decoded.name,
        "contract": decoded.address,
        "block_number": decoded.meta.block_number,
        "tx_hash": decoded.meta.tx_hash,
        "log_index": decoded.meta.log_index,
        "values": decoded.values,
    }
    return json.dumps(record, separators=(",", ":")) + "\n"


class JsonlSink:
    """Append-only NDJSON writer for decoded logs.

    Each line is flushed and fsynced so a crash never leaves a torn record.
    """

    def __init__(self, path: str) -> None:
        """Initialize the sink at the given path.

        Args:
            path: File path for the JSONL output
        """
        self.path = path
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        open(self.path, "a").close()
        self.written = 0

    def add(self, decoded: DecodedLog) -> List[Path]:
        """Append one decoded log."""
        self._write_line(self.path, decoded_log_to_json_line(decoded))
        self.written += 1
        return []

    def close(self) -> Path | None:
        if self.written:
            logger.info("wrote %d decoded logs to %s", self.written, self.path)
            return Path(self.path)
        return None

    @staticmethod
    def _write_line(path: str, line: str) -> None:
        """Write a line to file with immediate flush and sync."""
        with open(path, "a", buffering=1) as f:
            f.write(line)
            f.flush()
            os.fsync(f.fileno())
