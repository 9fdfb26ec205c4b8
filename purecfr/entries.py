"""Typed tables of regrets and average-strategy counts."""

from __future__ import annotations

import struct
from typing import BinaryIO, Sequence

import numpy as np

from .constants import EntryType

# The entry type precedes the entries as a native-order C int.
_TYPE_HEADER = struct.Struct("=i")


class EntriesError(Exception):
    """Raised when entries cannot be written, read or loaded."""


class Entries:
    """A flat table of integer entries, indexed by bucket and solution index.

    Entries given as data at construction are treated as loaded and may not
    be written out or overwritten from a file.
    """

    def __init__(
        self,
        entry_type: EntryType,
        num_entries_per_bucket: int,
        total_num_entries: int,
        data=None,
    ) -> None:
        self.entry_type = EntryType(entry_type)
        self.num_entries_per_bucket = num_entries_per_bucket
        self.total_num_entries = total_num_entries
        self._dtype = np.dtype(self.entry_type.dtype_name)
        self._info = np.iinfo(self._dtype)
        if data is None:
            self._entries = np.zeros(total_num_entries, dtype=self._dtype)
            self.data_was_loaded = False
        else:
            entries = np.asarray(data, dtype=self._dtype)
            if entries.shape != (total_num_entries,):
                raise EntriesError(
                    f"expected {total_num_entries} entries, got shape {entries.shape}"
                )
            self._entries = entries
            self.data_was_loaded = True

    @property
    def data(self) -> np.ndarray:
        """The underlying array of entries."""
        return self._entries

    def entry_index(self, bucket: int, soln_idx: int) -> int:
        return self.num_entries_per_bucket * bucket + soln_idx

    def _span(self, bucket: int, soln_idx: int, count: int) -> slice:
        base = self.entry_index(bucket, soln_idx)
        if base < 0 or count < 0 or base + count > self.total_num_entries:
            raise IndexError(
                f"entries {base}..{base + count} out of range 0..{self.total_num_entries}"
            )
        return slice(base, base + count)

    def _wrap(self, value: int) -> int:
        span = 1 << (8 * self._dtype.itemsize)
        low = int(self._info.min)
        return (value - low) % span + low

    def pos_values(
        self, bucket: int, soln_idx: int, num_choices: int
    ) -> tuple[list[int], int]:
        """The entries with negatives replaced by zero, and their sum."""
        local = self._entries[self._span(bucket, soln_idx, num_choices)]
        values = [max(int(v), 0) for v in local]
        return values, sum(values)

    def local_values(
        self, bucket: int, soln_idx: int, num_choices: int
    ) -> tuple[list[int], int]:
        """The entries as they are, and their sum."""
        local = self._entries[self._span(bucket, soln_idx, num_choices)]
        values = [int(v) for v in local]
        return values, sum(values)

    def update_regret(
        self, bucket: int, soln_idx: int, values: Sequence[int], retval: int
    ) -> None:
        """Add values[c] - retval to each entry, skipping any that would overflow."""
        span = self._span(bucket, soln_idx, len(values))
        for offset, value in enumerate(values):
            index = span.start + offset
            old = int(self._entries[index])
            diff = value - retval
            new = self._wrap(old + diff)
            if (diff < 0 and new < old) or (diff > 0 and new > old):
                self._entries[index] = new

    def increment_entry(self, bucket: int, soln_idx: int, choice: int) -> bool:
        """Add one to an entry; return True if the count overflowed."""
        index = self._span(bucket, soln_idx, choice + 1).stop - 1
        new = self._wrap(int(self._entries[index]) + 1)
        self._entries[index] = new
        return new <= 0

    def get_values(self, bucket: int, soln_idx: int, num_choices: int) -> list[int]:
        return [int(v) for v in self._entries[self._span(bucket, soln_idx, num_choices)]]

    def set_values(self, bucket: int, soln_idx: int, values: Sequence[int]) -> None:
        span = self._span(bucket, soln_idx, len(values))
        self._entries[span] = np.asarray(values, dtype=self._dtype)

    def write(self, file: BinaryIO) -> None:
        """Write the entry type followed by all entries."""
        if self.data_was_loaded:
            raise EntriesError(
                "tried to write data that was loaded at instantiation, which is not allowed"
            )
        file.write(_TYPE_HEADER.pack(int(self.entry_type)))
        file.write(self._entries.tobytes())

    def load(self, file: BinaryIO) -> None:
        """Read entries written by write(), checking the stored type."""
        if self.data_was_loaded:
            raise EntriesError(
                "tried to load from file on top of loaded data at instantiation, "
                "which is not allowed"
            )
        header = file.read(_TYPE_HEADER.size)
        if len(header) != _TYPE_HEADER.size:
            raise EntriesError("failed to read entry type")
        (found,) = _TYPE_HEADER.unpack(header)
        if found != int(self.entry_type):
            raise EntriesError(
                f"type [{found}] found, but expected type [{int(self.entry_type)}]"
            )
        expected = self.total_num_entries * self._dtype.itemsize
        raw = file.read(expected)
        if len(raw) != expected:
            read = len(raw) // self._dtype.itemsize
            raise EntriesError(
                f"error while loading; only read {read} of {self.total_num_entries} entries"
            )
        self._entries[:] = np.frombuffer(raw, dtype=self._dtype)


def load_entries(
    buffer, offset: int, num_entries_per_bucket: int, total_num_entries: int
) -> tuple[Entries, int]:
    """Wrap entries stored in a buffer at offset without copying them.

    Returns the entries and the offset just past them.
    """
    view = memoryview(buffer)
    if offset + _TYPE_HEADER.size > view.nbytes:
        raise EntriesError("buffer too short for entry type")
    (raw_type,) = _TYPE_HEADER.unpack_from(view, offset)
    try:
        entry_type = EntryType(raw_type)
    except ValueError:
        raise EntriesError(f"unrecognized entry type [{raw_type}]") from None
    dtype = np.dtype(entry_type.dtype_name)
    start = offset + _TYPE_HEADER.size
    end = start + total_num_entries * dtype.itemsize
    if end > view.nbytes:
        raise EntriesError(
            f"buffer too short for {total_num_entries} entries of type {entry_type.name}"
        )
    data = np.frombuffer(buffer, dtype=dtype, count=total_num_entries, offset=start)
    return Entries(entry_type, num_entries_per_bucket, total_num_entries, data), end