"""
Base provider protocols.

These define the external collaborators the entry store depends on.
Using Protocol for structural subtyping - no explicit inheritance required.
"""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Editor(Protocol):
    """
    Opens a file for interactive editing.

    Example implementation:
        class NanoEditor:
            def edit(self, path: Path) -> None:
                if subprocess.run(["nano", str(path)]).returncode != 0:
                    raise ContentError("nano failed")
    """

    def edit(self, path: Path) -> None:
        """
        Edit the file at path, blocking until the editor exits.

        Raises:
            ContentError: If the editor could not run or exited non-zero
        """
        ...


@runtime_checkable
class Encryptor(Protocol):
    """
    Converts entry bodies to and from an encrypted container.
    """

    def encrypt(self, data: bytes, key: Optional[str]) -> bytes:
        """
        Encrypt data for the given key reference.

        Raises:
            ContentError: If encryption fails
        """
        ...

    def decrypt(self, data: bytes, key: Optional[str]) -> bytes:
        """
        Decrypt data previously produced by encrypt().

        Raises:
            ContentError: If decryption fails
        """
        ...
