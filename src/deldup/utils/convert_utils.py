"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import time

CSV_DATE_FORMAT = "%d/%m/%Y-%H:%M:%S"


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.5KB, 3.2MB).
        """
        if size_bytes < 0:
            return "0B"

        units = ["B", "KB", "MB", "GB", "TB", "PB"]
        for unit in units:
            if size_bytes < 1024:
                return f"{size_bytes:.2f}{unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f}EB"

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a Unix timestamp to a human-readable string.
        Uses local time by default.
        """
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"

    @staticmethod
    def timestamp_to_csv(timestamp: float) -> str:
        """Timestamp in the export format, e.g. '07/02/2026-14:05:09'."""
        return ConvertUtils.timestamp_to_human(timestamp, CSV_DATE_FORMAT)
