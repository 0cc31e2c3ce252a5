"""Diskstats subsystem — /proc/diskstats parsing, polling and device names."""

from .device import resolve_device_name
from .source import Diskstats
from .statline import SECTOR_SIZE, DiskstatsParseError, Statline, parse_line, rate
