"""
CSV enumeration of a ContentIndex: one row per entry, bucket by bucket.
Columns: display name, size, CRC-32 of the first 64 KiB, modification date.
"""
import csv
import logging
from typing import TextIO

from deldup.core.errors import ReadError
from deldup.core.index import ContentIndex
from deldup.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class ExportService:
    @staticmethod
    def write_index_csv(index: ContentIndex, stream: TextIO) -> int:
        """
        Writes every entry of `index` to `stream`.
        Entries whose metadata can no longer be read are logged and left out.

        Returns:
            Number of rows written.
        """
        writer = csv.writer(stream, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        rows = 0
        for bucket in index.buckets():
            for entry in bucket:
                try:
                    row = [
                        entry.display_name,
                        entry.size(),
                        entry.partial_fingerprint(),
                        ConvertUtils.timestamp_to_csv(entry.modified_time()),
                    ]
                except ReadError as e:
                    logger.warning(f"Skipping {entry.display_name} in export: {e}")
                    continue
                writer.writerow(row)
                rows += 1
        return rows
