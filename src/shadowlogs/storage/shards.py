from __future__ import annotations

import glob
import logging
import os
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from shadowlogs.core.models import Column
from shadowlogs.decoding.decoder import DecodedLog

logger = logging.getLogger(__name__)


class ShardsDir:
    """Directory of numbered Parquet shards (`shard_00000.parquet`, ...)."""

    def __init__(self, shards_dir: Path):
        self.shards_dir = shards_dir
        self.shards_dir.mkdir(exist_ok=True, parents=True)

    def shards_files_pattern(self) -> str:
        return (self.shards_dir / "shard_*.parquet").as_posix()

    def list_shards(self) -> list[str]:
        return sorted(glob.glob(self.shards_files_pattern()))

    def shard_path(self, idx: int) -> Path:
        return self.shards_dir / f"shard_{idx:05d}.parquet"


class ShardWriter:
    """
    Shard writer using dynamic columns:
    every decoded parameter name becomes a column on the fly.

    Rows are buffered in memory and written `rows_per_shard` at a time;
    numbering continues after any shards already present in the directory.
    """

    def __init__(
        self,
        shards_dir: ShardsDir,
        *,
        rows_per_shard: int = 10_000,
        codec: str = "zstd",
        write_final_partial: bool = True,
    ) -> None:
        self.rows_per_shard = rows_per_shard
        self.codec = codec
        self.write_final_partial = write_final_partial

        self.shards_dir = shards_dir
        self.buf = Column.empty()
        self.shard_idx = self._init_from_existing()

    def _init_from_existing(self) -> int:
        """Return the index following the last existing shard."""
        existing = self.shards_dir.list_shards()
        if not existing:
            return 0
        last_path = existing[-1]
        return int(os.path.basename(last_path).split("_")[1].split(".")[0]) + 1

    def _atomic_write(self, out_path: Path, table: pa.Table) -> Path | None:
        """Write Parquet atomically (tmp + replace)."""
        if len(table) == 0:
            return None
        tmp = out_path.with_suffix(".tmp")
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, out_path)
        logger.info("wrote %s (rows=%d, cols=%d)", out_path, len(table), len(table.schema))
        return out_path

    def _flush(self, n: int) -> Path | None:
        tbl = self.buf.take_first(n).to_arrow_table()
        out_path = self._atomic_write(self.shards_dir.shard_path(self.shard_idx), tbl)
        if out_path:
            self.shard_idx += 1
        return out_path

    # ---------- core API ----------

    def add(self, decoded: DecodedLog) -> list[Path]:
        """Buffer one decoded log; write shards as they become full.

        Returns a list of shard paths that were written.
        """
        self.buf.append_decoded(
            event_name=decoded.name,
            meta=decoded.meta,
            values=decoded.values,
            contract_addr=decoded.address,
        )
        written: list[Path] = []
        while self.buf.size() >= self.rows_per_shard:
            out_path = self._flush(self.rows_per_shard)
            if out_path:
                written.append(out_path)
        return written

    def close(self) -> Path | None:
        """Flush remaining rows as a final (possibly short) shard.

        With `write_final_partial=False` the incomplete rows are dropped.
        Returns the shard path written (if any).
        """
        remaining = self.buf.size()
        if remaining == 0:
            return None
        if not self.write_final_partial:
            self.buf = Column.empty()
            return None
        return self._flush(remaining)
