"""
External collaborators for the entry store: editor and encryption.
"""

from .base import Editor, Encryptor
from .editor import ClickEditor
from .gpg import GpgEncryptor

__all__ = ["Editor", "Encryptor", "ClickEditor", "GpgEncryptor"]
