"""
Shared pytest fixtures for scrawl tests.

Provides in-memory editor and encryption doubles and a fixed clock so no
external programs run during testing.
"""

import base64
from pathlib import Path

import pytest

from scrawl.config import StoreConfig
from scrawl.errors import ContentError
from scrawl.store import EntryStore

NOW = 1_700_000_000


class FixedClock:
    """Clock frozen at a fixed epoch second."""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now


class FakeEditor:
    """
    Editor double that rewrites the file it is handed.

    ``text`` may be bytes (replaces the file) or a callable taking the old
    content and returning the new one.
    """

    def __init__(self, text=b"edited body\n", fail: bool = False):
        self.text = text
        self.fail = fail
        self.edited: list[Path] = []
        self.seen: list[bytes] = []

    def edit(self, path: Path) -> None:
        self.edited.append(path)
        self.seen.append(path.read_bytes())
        if self.fail:
            raise ContentError("editor exited with status 1")
        new = self.text(self.seen[-1]) if callable(self.text) else self.text
        path.write_bytes(new)


class FakeEncryptor:
    """Reversible stand-in for GPG: base64 inside an armor-like envelope."""

    HEADER = b"-----BEGIN FAKE MESSAGE-----\n"
    FOOTER = b"\n-----END FAKE MESSAGE-----\n"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.keys: list = []

    def encrypt(self, data: bytes, key) -> bytes:
        self.keys.append(key)
        if self.fail:
            raise ContentError("Encryption failed")
        return self.HEADER + base64.b64encode(data) + self.FOOTER

    def decrypt(self, data: bytes, key) -> bytes:
        if not data.startswith(self.HEADER) or not data.endswith(self.FOOTER):
            raise ContentError("Decryption failed: not an encrypted message")
        return base64.b64decode(data[len(self.HEADER):-len(self.FOOTER)])


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def encryptor():
    return FakeEncryptor()


@pytest.fixture
def store_dir(tmp_path):
    path = tmp_path / "store"
    path.mkdir()
    return path


@pytest.fixture
def store(store_dir, clock, editor, encryptor):
    """EntryStore over an empty temporary directory with test doubles."""
    config = StoreConfig(path=store_dir, gpg_key="me@example.com")
    return EntryStore(config, clock=clock, editor=editor, encryptor=encryptor)


@pytest.fixture
def make_entry(store_dir):
    """Write a raw file into the store directory by name."""
    def _make(name: str, body: bytes = b"body\n") -> Path:
        path = store_dir / name
        path.write_bytes(body)
        return path
    return _make
