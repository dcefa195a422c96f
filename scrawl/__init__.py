"""
scrawl: notes and snippets kept as tagged files in one directory.

Each entry is one file named ``ID[_tag]*[.asc]``. The entry store scans,
filters and orders those files; the duration module converts shorthand
like ``1d2h`` to and from seconds.
"""

from scrawl.duration import DurationParseError, format_duration, parse_duration, shift_time
from scrawl.store import EntryStore, build_filter, pick
from scrawl.types import Entry, EntryFilter, decode_filename, encode_filename

__all__ = [
    "Entry",
    "EntryFilter",
    "EntryStore",
    "DurationParseError",
    "build_filter",
    "decode_filename",
    "encode_filename",
    "format_duration",
    "parse_duration",
    "pick",
    "shift_time",
]
