"""Read-only, sorted key/value lookup backed directly by a binary map file."""

from __future__ import annotations

import os
import struct
import sys
from collections.abc import Iterator

_RECORD = struct.Struct("<QQ")


class FileMap:
    """Binary-searches a file of sorted little-endian 64-bit key/value records.

    The file is never loaded whole; every lookup seeks and reads records. The
    most recently found record is cached so that a membership test followed by
    a lookup of the same key reads the file only once.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._file = open(path, "rb")
        self._file.seek(0, os.SEEK_END)
        self._size = self._file.tell() // _RECORD.size
        self._cached: tuple[int, int] | None = None
        print(f"Loaded {self._size} items from {os.fspath(path)}.", file=sys.stderr)

    def close(self) -> None:
        """Close the underlying file; closing twice is harmless."""
        self._file.close()

    def __enter__(self) -> FileMap:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _record(self, position: int) -> tuple[int, int]:
        self._file.seek(position * _RECORD.size)
        return _RECORD.unpack(self._file.read(_RECORD.size))

    def _find(self, idx: int) -> int | None:
        if self._cached is not None and self._cached[0] == idx:
            return self._cached[1]
        left, right = 0, self._size
        while left < right:
            middle = (left + right) // 2
            key, value = self._record(middle)
            if key < idx:
                left = middle + 1
            elif key > idx:
                right = middle
            else:
                self._cached = (key, value)
                return value
        return None

    def __contains__(self, idx: object) -> bool:
        if not isinstance(idx, int):
            return False
        return self._find(idx) is not None

    def __getitem__(self, idx: int) -> int:
        """The value stored for ``idx``, or 0 when the key is absent."""
        value = self._find(idx)
        return 0 if value is None else value

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """Yield every (key, value) record in file order."""
        for position in range(self._size):
            yield self._record(position)

    def __len__(self) -> int:
        return self._size