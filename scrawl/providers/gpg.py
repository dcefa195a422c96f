"""
GPG encryption provider.

Shells out to the gpg binary with ASCII armor so encrypted entries stay
plain text on disk.
"""

import logging
import subprocess
from typing import Optional

from ..errors import ContentError

logger = logging.getLogger(__name__)


class GpgEncryptor:
    """Encrypts to a recipient key, decrypts with whatever key gpg-agent holds."""

    def __init__(self, binary: str = "gpg"):
        self.binary = binary

    def _run(self, args: list[str], data: bytes, action: str) -> bytes:
        cmd = [self.binary, "--batch", "--yes", "--quiet", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, input=data, capture_output=True, check=False)
        except OSError as e:
            raise ContentError(f"Cannot run {self.binary}: {e}") from e
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ContentError(f"{action} failed ({self.binary} exited {result.returncode}): {stderr}")
        return result.stdout

    def encrypt(self, data: bytes, key: Optional[str]) -> bytes:
        if not key:
            raise ContentError(
                "No encryption key configured. Set SCRAWL_GPG_KEY or run: scrawl config gpg_key KEY"
            )
        return self._run(["--armor", "--encrypt", "--recipient", key], data, "Encryption")

    def decrypt(self, data: bytes, key: Optional[str]) -> bytes:
        # gpg picks the secret key from the message itself
        return self._run(["--decrypt"], data, "Decryption")
