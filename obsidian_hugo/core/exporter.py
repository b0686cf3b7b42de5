"""Export notes into a Hugo site."""

import asyncio
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from obsidian_hugo._logging import configure_logging
from obsidian_hugo.config import ExportConfig, load_config
from obsidian_hugo.core.materializer import ImageMaterializer
from obsidian_hugo.core.models import (
    BatchResult,
    InvalidInputError,
    NoteContext,
    NoteError,
    NoteExportError,
    NoteNotFoundError,
    NoteReadError,
    NoteWriteError,
)
from obsidian_hugo.core.processor import ContentProcessor
from obsidian_hugo.core.resolver import ImageResolver
from obsidian_hugo.transforms import frontmatter
from obsidian_hugo.transforms.links import section_link
from obsidian_hugo.transforms.naming import sanitize_filename

NoteReader = Callable[[NoteContext], str]
Notifier = Callable[[str], None]


def _read_note(note: NoteContext) -> str:
    return note.read_raw()


class Exporter:
    """Writes processed notes to the posts directory.

    Notes of a batch are exported one after another; the images inside a
    single note are handled concurrently by the processor.
    """

    def __init__(
        self,
        config: ExportConfig,
        processor: ContentProcessor,
        reader: Optional[NoteReader] = None,
        notifier: Optional[Notifier] = None,
    ):
        """Initialize Exporter.

        Args:
            config: Export settings
            processor: Transforms note text
            reader: Reads a note's text (default: from disk)
            notifier: Receives user-facing messages; omitted means none are sent
        """
        self.config = config
        self.processor = processor
        self.reader = reader or _read_note
        self.notifier = notifier

    def output_path(self, note: NoteContext) -> Path:
        """Where an exported note is written."""
        return self.config.posts_path / f"{sanitize_filename(note.base_name)}.md"

    async def export_one(self, note: Optional[NoteContext], is_batch: bool = False) -> Path:
        """Export a single note.

        Args:
            note: The note to export
            is_batch: Suppress the per-note success notice

        Returns:
            Path of the written markdown file

        Raises:
            NoteNotFoundError: If no note is given
            InvalidInputError: If the note is not a markdown file
            NoteExportError: If reading, processing or writing fails; the
                cause is chained
        """
        if note is None:
            raise NoteNotFoundError("No file selected or active for export.")
        if note.extension != 'md':
            raise InvalidInputError(f"Cannot export non-markdown file: {note.name}")

        logger.debug(f"Starting export for: {note.relative_path}")
        try:
            raw = await self._read(note)
            content = await self.processor.process(note, raw)
            destination = await self._write(note, content)
        except Exception as e:
            logger.debug(f"Error during export of {note.name}: {e}")
            raise NoteExportError(note.name, str(e)) from e

        if not is_batch:
            self._notify(f"Exported '{note.name}' to '{destination.name}'")
        return destination

    async def export_many(self, notes: Iterable[NoteContext]) -> BatchResult:
        """Export notes sequentially, never stopping at a failure.

        Args:
            notes: Notes to export

        Returns:
            BatchResult with the written paths and per-note failures
        """
        notes = list(notes)
        result = BatchResult()
        if not notes:
            self._notify("No markdown files selected or open to export.")
            return result

        total = len(notes)
        self._notify(f"Starting export of {total} files...")

        for index, note in enumerate(notes, start=1):
            try:
                result.exported.append(await self.export_one(note, is_batch=True))
            except Exception as e:
                logger.error(f"Failed to export {index}/{total}: {note.name}: {e}")
                result.failures.append(NoteError(path=note.path, error=str(e), title=note.base_name))

        self._notify(result.summary())
        logger.debug(f"Batch export completed. Success: {result.succeeded}, Failed: {result.failed}")
        return result

    async def _read(self, note: NoteContext) -> str:
        try:
            return await asyncio.to_thread(self.reader, note)
        except FileNotFoundError as e:
            raise NoteNotFoundError(f"Note not found: {note.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise NoteReadError(f"Failed to read note '{note.path}': {e}") from e

    async def _write(self, note: NoteContext, content: str) -> Path:
        destination = self.output_path(note)
        logger.debug(f"Writing exported note to: {destination}")
        try:
            await asyncio.to_thread(self._write_file, destination, content)
        except OSError as e:
            raise NoteWriteError(f"Failed to write file '{destination.name}': {e}") from e
        logger.debug(f"Successfully wrote: {destination}")
        return destination

    @staticmethod
    def _write_file(destination: Path, content: str) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding='utf-8')

    def _notify(self, message: str) -> None:
        if self.notifier:
            self.notifier(message)


def create_exporter(
    config: ExportConfig,
    reader: Optional[NoteReader] = None,
    notifier: Optional[Notifier] = None,
) -> Exporter:
    """Wire an Exporter and its collaborators from a config value."""
    transforms = []
    if config.remove_keys or config.add_fields:
        transforms.append(frontmatter.prune_and_add(
            remove_keys=config.remove_keys or None,
            add_fields=config.add_fields or None,
        ))
    if config.titlecase_titles:
        transforms.append(frontmatter.title_case())

    processor = ContentProcessor(
        resolver=ImageResolver(config.attachment_folders),
        materializer=ImageMaterializer(config.static_images_path, config.image_url_prefix),
        link_transform=section_link(config.posts_section),
        frontmatter_transform=frontmatter.compose(*transforms) if transforms else None,
    )
    return Exporter(config, processor, reader=reader, notifier=notifier)


def create_exporter_from_config(
    config_path: Union[str, Path],
    reader: Optional[NoteReader] = None,
    notifier: Optional[Notifier] = None,
) -> Exporter:
    """Load a YAML config, set up logging and build an Exporter."""
    config = load_config(config_path)
    configure_logging(config.debug_mode)
    logger.debug("Settings loaded.")
    return create_exporter(config, reader=reader, notifier=notifier)
