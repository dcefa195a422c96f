"""
Data types for scrawl entries and the filename grammar that stores them.

    filename := id ("_" tag)* [".asc"]
    id       := [0-9]+
    tag      := [A-Za-z0-9]+      (lowercased on both encode and decode)
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional


# Marks entries whose body is an ASCII-armored encrypted container
ENCRYPTED_SUFFIX = ".asc"

TAG_SEPARATOR = "_"

_TAG_RE = re.compile(r'[A-Za-z0-9]+')
_FILENAME_RE = re.compile(
    r'(?P<id>[0-9]+)(?P<tags>(?:_[A-Za-z0-9]+)*)(?P<suffix>\.asc)?'
)


@dataclass(frozen=True)
class Entry:
    """
    One stored note, backed by one file in the store directory.

    Attributes:
        id: Integer identifier, normally the creation epoch second
        tags: Lowercase tags in the order they were given at creation
        encrypted: True when the file holds an encrypted container
        path: Location of the backing file (None before it is written)
    """
    id: int
    tags: tuple[str, ...] = ()
    encrypted: bool = False
    path: Optional[Path] = field(default=None, compare=False)

    @property
    def filename(self) -> str:
        return encode_filename(self.id, self.tags, encrypted=self.encrypted)

    def has_any_tag(self, wanted: set[str]) -> bool:
        """True when no tags are wanted or this entry carries one of them."""
        if not wanted:
            return True
        return any(t in wanted for t in self.tags)


@dataclass(frozen=True)
class EntryFilter:
    """Criteria applied to a directory scan. Bounds are inclusive."""
    id: Optional[int] = None
    after: Optional[int] = None
    before: Optional[int] = None
    tags: tuple[str, ...] = ()
    reverse: bool = False

    def matches(self, entry: Entry) -> bool:
        if self.id is not None and entry.id != self.id:
            return False
        if self.after is not None and entry.id < self.after:
            return False
        if self.before is not None and entry.id > self.before:
            return False
        return entry.has_any_tag({t.lower() for t in self.tags})


def validate_tag(tag: str) -> str:
    """Return the lowercased tag, or raise ValueError if it is not alphanumeric."""
    if not _TAG_RE.fullmatch(tag):
        raise ValueError(f"Tag must be alphanumeric (a-z, 0-9): {tag!r}")
    return tag.lower()


def normalize_tags(tags) -> tuple[str, ...]:
    """Validate and lowercase tags, keeping order and duplicates."""
    return tuple(validate_tag(t) for t in tags or ())


def encode_filename(id: int, tags=(), *, encrypted: bool = False) -> str:
    """Compose the store filename for an entry."""
    if id < 0:
        raise ValueError(f"Entry ID must be non-negative: {id}")
    name = str(id) + "".join(TAG_SEPARATOR + t for t in normalize_tags(tags))
    if encrypted:
        name += ENCRYPTED_SUFFIX
    return name


def decode_filename(name: str) -> Optional[Entry]:
    """Parse a filename into an Entry, or None if it is not a store member."""
    m = _FILENAME_RE.fullmatch(name)
    if not m:
        return None
    tags = tuple(t.lower() for t in m.group("tags").split(TAG_SEPARATOR)[1:])
    return Entry(
        id=int(m.group("id")),
        tags=tags,
        encrypted=m.group("suffix") is not None,
    )


def local_datetime(epoch: int, date_format: str) -> str:
    """Format an epoch second count in local time.

    IDs can be arbitrary integers; anything outside the platform's
    datetime range is shown as the raw number.
    """
    try:
        return datetime.fromtimestamp(epoch).strftime(date_format)
    except (ValueError, OverflowError, OSError):
        return str(epoch)
