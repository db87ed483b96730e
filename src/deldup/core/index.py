"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Multi-valued index from composite key ('partial_crc:size') to every entry
sharing that key, in the order the entries were inserted.

Built by a single writer, then only read. Nothing is ever removed.
"""
from typing import Dict, Iterator, List, Sequence, Union

from deldup.core.models import FileIdentity


class ContentIndex:
    """
    Maps a composite key to its collision bucket.
    Membership of a bucket means "candidate duplicate", not proof.
    """

    def __init__(self):
        self._buckets: Dict[str, List[FileIdentity]] = {}
        self._entry_count = 0

    def insert(self, entry: FileIdentity) -> Sequence[FileIdentity]:
        """
        Appends `entry` to the bucket of its composite key, creating the bucket if needed.

        Raises:
            ReadError: If the entry's key cannot be computed; nothing is inserted.
        """
        key = entry.composite_key()
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = []
            self._buckets[key] = bucket
        bucket.append(entry)
        self._entry_count += 1
        return tuple(bucket)

    def lookup(self, key: Union[str, FileIdentity]) -> Sequence[FileIdentity]:
        """
        Returns the bucket for a composite key (or for an entry's key).
        An absent key yields an empty tuple; buckets are never empty otherwise.
        """
        if isinstance(key, FileIdentity):
            key = key.composite_key()
        return tuple(self._buckets.get(key, ()))

    def keys(self) -> Iterator[str]:
        return iter(self._buckets.keys())

    def buckets(self) -> Iterator[Sequence[FileIdentity]]:
        """Yields each bucket, in order of first insertion."""
        for bucket in self._buckets.values():
            yield tuple(bucket)

    def entries(self) -> Iterator[FileIdentity]:
        """Yields every entry, bucket by bucket."""
        for bucket in self._buckets.values():
            yield from bucket

    @property
    def entry_count(self) -> int:
        return self._entry_count

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key) -> bool:
        if isinstance(key, FileIdentity):
            key = key.composite_key()
        return key in self._buckets

    def __repr__(self):
        return f"<ContentIndex keys={len(self._buckets)}, entries={self._entry_count}>"
