"""
Entry store: a flat directory of files whose names carry ID and tags.

Every operation scans the directory once. There is no index, no cache
and no locking; concurrent writers with the same ID overwrite each other.

Enumeration order is the directory listing sorted by filename. Selections
come back reversed (newest first for same-width timestamp IDs) unless the
filter asks for reverse, which yields enumeration order.
"""

import logging
import os
import re
import tempfile
import time
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, Optional

from .config import StoreConfig
from .duration import DurationParseError, parse_duration
from .errors import ArgumentError, ContentError, EmptyResultError, NotFoundError, SetupError
from .providers import ClickEditor, Editor, Encryptor, GpgEncryptor
from .types import Entry, EntryFilter, decode_filename, normalize_tags

logger = logging.getLogger(__name__)

# Half-width of the window used by --on
DAY_WINDOW = 12 * 3600

_EPOCH_RE = re.compile(r'[0-9]+')


def system_clock() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


def parse_time_bound(value: str, now: int) -> int:
    """
    Turn a time bound into an epoch second count.

    Accepts:
    - Bare integer: used as-is (an entry ID / epoch)
    - ISO date or datetime: 2026-01-15, 2026-01-15T08:30 (local time)
    - Shorthand duration: 3d, 1w2d, 12h (that long before now)
    """
    value = value.strip()
    if _EPOCH_RE.fullmatch(value):
        return int(value)

    if value[:1].isdigit() and "-" in value:
        try:
            return int(datetime.fromisoformat(value).timestamp())
        except (ValueError, OverflowError, OSError) as e:
            raise ArgumentError(f"Invalid date: {value!r}") from e

    try:
        return now - parse_duration(value)
    except DurationParseError as e:
        raise ArgumentError(
            f"{e}. Use an ID (1700000000), a date (2026-01-15) or a duration (3d, 1w2h)"
        ) from e


def build_filter(
    *,
    now: int,
    tags=(),
    id: Optional[int] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    on: Optional[str] = None,
    reverse: bool = False,
) -> EntryFilter:
    """Validate command-line criteria into an EntryFilter."""
    try:
        wanted = normalize_tags(tags)
    except ValueError as e:
        raise ArgumentError(str(e)) from e
    if id is not None and id < 0:
        raise ArgumentError(f"ID must be non-negative: {id}")

    lower = parse_time_bound(after, now) if after else None
    upper = parse_time_bound(before, now) if before else None
    if on:
        center = parse_time_bound(on, now)
        lower = center - DAY_WINDOW if lower is None else max(lower, center - DAY_WINDOW)
        upper = center + DAY_WINDOW if upper is None else min(upper, center + DAY_WINDOW)

    return EntryFilter(id=id, after=lower, before=upper, tags=wanted, reverse=reverse)


def pick(entries: list[Entry], index: int) -> Entry:
    """
    Resolve a signed index into an ordered selection.

    Non-negative indices count from the front, negative ones from the back.
    Valid indices satisfy |index| <= len(entries) - 1.
    """
    if not entries:
        raise EmptyResultError("No entries match the given filters")
    max_index = len(entries) - 1
    if abs(index) > max_index:
        raise NotFoundError(f"Index {index} out of range (max index: {max_index})")
    return entries[index]


class EntryStore:
    """
    Notes stored as individually named files in one directory.

    The editor, encryptor and clock are injected so that everything except
    the external programs can be exercised directly.
    """

    def __init__(
        self,
        config: StoreConfig,
        *,
        clock: Optional[Callable[[], int]] = None,
        editor: Optional[Editor] = None,
        encryptor: Optional[Encryptor] = None,
    ):
        self.config = config
        self.path = Path(config.path)
        self._clock = clock or system_clock
        self._editor = editor or ClickEditor(config.editor)
        self._encryptor = encryptor or GpgEncryptor(config.gpg_binary)

    def now(self) -> int:
        return self._clock()

    # -- Queries --

    def scan(self) -> Iterator[Entry]:
        """Decode every store member in the directory, in enumeration order."""
        try:
            names = sorted(os.listdir(self.path))
        except FileNotFoundError as e:
            raise SetupError(f"Store directory does not exist: {self.path}") from e
        except OSError as e:
            raise SetupError(f"Cannot read store directory {self.path}: {e}") from e

        for name in names:
            entry = decode_filename(name)
            if entry is None:
                continue
            full = self.path / name
            if not full.is_file():
                continue
            yield replace(entry, path=full)

    def select(self, flt: EntryFilter) -> list[Entry]:
        """Return matching entries, reversed from enumeration order by default."""
        matched = [e for e in self.scan() if flt.matches(e)]
        if not flt.reverse:
            matched.reverse()
        logger.debug("Selected %d entries with %s", len(matched), flt)
        return matched

    def get(self, flt: EntryFilter, index: int) -> Entry:
        return pick(self.select(flt), index)

    def read(self, entry: Entry) -> bytes:
        """Return the entry body, decrypting it if needed."""
        try:
            data = entry.path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Entry vanished: {entry.path}") from e
        except OSError as e:
            raise ContentError(f"Cannot read {entry.path}: {e}") from e
        if entry.encrypted:
            data = self._encryptor.decrypt(data, self.config.recipient)
        return data

    def tags(self, flt: EntryFilter) -> list[str]:
        """Distinct tags across the filtered set, sorted."""
        return sorted({t for entry in self.select(flt) for t in entry.tags})

    # -- Mutators --

    def add(
        self,
        body: Optional[bytes] = None,
        *,
        tags=(),
        id: Optional[int] = None,
        encrypt: bool = False,
    ) -> Path:
        """
        Create a new entry and return its path.

        With no body the editor is opened on an empty scratch file. Nothing
        is written to the store unless non-empty content was obtained.
        """
        try:
            entry = Entry(
                id=self.now() if id is None else id,
                tags=normalize_tags(tags),
                encrypted=encrypt,
            )
            filename = entry.filename
        except ValueError as e:
            raise ArgumentError(str(e)) from e

        if encrypt and not self.config.recipient:
            raise ContentError(
                "No GPG recipient: set SCRAWL_GPG_KEY or 'scrawl config gpg_key KEY'"
            )
        if body is None:
            body = self._compose()
        if not body.strip():
            raise ContentError("Empty entry, nothing saved")

        if encrypt:
            body = self._encryptor.encrypt(body, self.config.recipient)

        target = self.path / filename
        self._write_atomic(target, body)
        logger.info("Added %s", target)
        return target

    def edit(self, flt: EntryFilter, index: int) -> Path:
        """Open the resolved entry in the editor, re-encrypting if needed."""
        entry = self.get(flt, index)
        if not entry.encrypted:
            self._editor.edit(entry.path)
            logger.info("Edited %s", entry.path)
            return entry.path

        plain = self.read(entry)
        scratch = self._scratch_file()
        try:
            scratch.write_bytes(plain)
            self._editor.edit(scratch)
            edited = scratch.read_bytes()
        finally:
            scratch.unlink(missing_ok=True)
        self._write_atomic(entry.path, self._encryptor.encrypt(edited, self.config.recipient))
        logger.info("Edited %s (re-encrypted)", entry.path)
        return entry.path

    def delete(self, flt: EntryFilter, index: int) -> Path:
        """Remove the resolved entry and return its former path."""
        return self.remove(self.get(flt, index))

    def remove(self, entry: Entry) -> Path:
        try:
            entry.path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"Entry vanished: {entry.path}") from e
        except OSError as e:
            raise ContentError(f"Cannot delete {entry.path}: {e}") from e
        logger.info("Deleted %s", entry.path)
        return entry.path

    # -- Internals --

    def _scratch_file(self) -> Path:
        fd, name = tempfile.mkstemp(prefix="scrawl-", suffix=".txt")
        os.close(fd)
        return Path(name)

    def _compose(self) -> bytes:
        """Collect a new body from the editor via an empty scratch file."""
        scratch = self._scratch_file()
        try:
            self._editor.edit(scratch)
            return scratch.read_bytes()
        finally:
            scratch.unlink(missing_ok=True)

    def _write_atomic(self, target: Path, data: bytes) -> None:
        """Write to a hidden temp file in the store, then rename over target."""
        try:
            fd, tmp = tempfile.mkstemp(dir=self.path, prefix=".scrawl-", suffix=".tmp")
        except OSError as e:
            raise ContentError(f"Cannot write to {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, target)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise ContentError(f"Cannot write {target}: {e}") from e
