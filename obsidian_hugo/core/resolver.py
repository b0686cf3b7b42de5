"""Locate image files referenced from a note."""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from obsidian_hugo.core.models import ImageNotFoundError, NoteContext


def is_readable_file(path: Path) -> bool:
    """True for a regular file the current user may read.

    Paths the OS refuses to stat (e.g. a name over the length limit) count
    as missing.
    """
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError as e:
        logger.debug(f"Cannot check {path}: {e}")
        return False


class ImageResolver:
    """Resolve image references with a fixed precedence.

    Priority:
    0. Vault-rooted reference (``/folder/image.png``), relative to the vault
    1. Folder named after the note, next to the note (``Note/image.png``)
    2. The note's own folder
    3. The vault root
    4. Each configured attachment folder under the vault root
    5. For references containing a folder, relative to the note's folder
       and then to the vault root
    """

    def __init__(self, attachment_folders: Optional[Sequence[str]] = None):
        """Initialize ImageResolver.

        Args:
            attachment_folders: Vault-relative folder names searched after the
                note's own locations (e.g. ["Attachments", "assets"])
        """
        self.attachment_folders = list(attachment_folders or [])

    def candidates(self, note: NoteContext, reference: str) -> List[Path]:
        """All paths that resolution will try, in order, without duplicates."""
        vault = Path(note.vault_root)
        reference = reference.replace('\\', '/')
        relative = reference.lstrip('/')
        note_dir = note.directory

        search: List[Path] = []
        if reference.startswith('/'):
            search.append(vault / relative)

        bases = [
            vault / note_dir / note.base_name,
            vault / note_dir,
            vault,
        ]
        bases.extend(vault / folder for folder in self.attachment_folders)
        search.extend(base / relative for base in bases)

        if '/' in relative:
            search.append(vault / note_dir / relative)
            search.append(vault / relative)

        unique: List[Path] = []
        for candidate in search:
            if candidate not in unique:
                unique.append(candidate)
        return unique

    async def resolve(self, note: NoteContext, reference: str) -> Path:
        """Return the first readable candidate for ``reference``.

        Args:
            note: The note containing the reference
            reference: Image name or path as written in the note

        Returns:
            Absolute path of the image

        Raises:
            ImageNotFoundError: If no candidate exists, listing every attempt
        """
        logger.debug(f"Searching for image '{reference}' relative to note '{note.relative_path}'")
        attempted = self.candidates(note, reference)

        for candidate in attempted:
            if await asyncio.to_thread(is_readable_file, candidate):
                logger.debug(f"Found image at: {candidate}")
                return candidate
            logger.debug(f"Image not found at: {candidate}")

        raise ImageNotFoundError(reference, note.relative_path.as_posix(), attempted)
