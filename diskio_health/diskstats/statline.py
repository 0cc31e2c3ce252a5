"""Statline model and /proc/diskstats line parser.

Each line of /proc/diskstats carries at least 14 whitespace-separated fields:

    ==  ===================================
     1  major number
     2  minor number
     3  device name
     4  reads completed successfully
     5  reads merged
     6  sectors read
     7  time spent reading (ms)
     8  writes completed
     9  writes merged
    10  sectors written
    11  time spent writing (ms)
    12  I/Os currently in progress
    13  time spent doing I/Os (ms)
    14  weighted time spent doing I/Os (ms)
    ==  ===================================

Kernel 4.18+ appends four discard fields (15-18) and kernel 5.5+ two flush
fields (19-20). Those are ignored here.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

SECTOR_SIZE = 512  # bytes, fixed by the kernel regardless of device geometry
FIELD_COUNT = 14
NAME_INDEX = 2
U64_MAX = 2**64 - 1


class DiskstatsParseError(ValueError):
    """Raised when a diskstats line cannot be parsed into a Statline."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed diskstats line ({reason}): {line!r}")


# ── Model ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Statline:
    """One counter record for one block device."""

    major: int
    minor: int
    name: str
    reads_completed: int
    reads_merged: int
    sectors_read: int
    read_time_ms: int
    writes_completed: int
    writes_merged: int
    sectors_written: int
    write_time_ms: int
    in_flight: int
    total_time_ms: int
    weighted_time_ms: int

    def counters(self) -> tuple[int, ...]:
        """The 13 numeric fields in diskstats order (name excluded)."""
        return tuple(
            getattr(self, f.name) for f in fields(self) if f.name != "name"
        )

    def delta(self, previous: Statline) -> Statline:
        """Field-wise ``self - previous``; major/minor come out as 0.

        Counters are assumed monotonic between polls. A device reset shows up
        as negative values rather than being corrected.
        """
        values = [a - b for a, b in zip(self.counters(), previous.counters())]
        values.insert(NAME_INDEX, self.name)
        return Statline(*values)

    def rate(self) -> tuple[int, int]:
        """Bytes read and written, from the sector counters."""
        return rate(self)


def rate(statline: Statline) -> tuple[int, int]:
    """Convert sector counters to ``(read_bytes, write_bytes)``.

    Applied to a delta this is the bytes moved during one poll interval,
    not a per-second rate.
    """
    return statline.sectors_read * SECTOR_SIZE, statline.sectors_written * SECTOR_SIZE


# ── Parser ───────────────────────────────────────────────────────────────────


def _parse_u64(field: str, line: str) -> int:
    if not (field.isascii() and field.isdigit()):
        raise DiskstatsParseError(line, f"not an unsigned integer: {field!r}")
    value = int(field)
    if value > U64_MAX:
        raise DiskstatsParseError(line, f"value out of 64-bit range: {field}")
    return value


def parse_line(line: str) -> Statline:
    """Parse the first 14 fields of a diskstats line."""
    parts = line.split()
    if len(parts) < FIELD_COUNT:
        raise DiskstatsParseError(line, f"expected {FIELD_COUNT} fields, got {len(parts)}")

    values: list[int | str] = []
    for i, part in enumerate(parts[:FIELD_COUNT]):
        if i == NAME_INDEX:
            values.append(part)
        else:
            values.append(_parse_u64(part, line))
    return Statline(*values)  # type: ignore[arg-type]
