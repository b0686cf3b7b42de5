"""Core components for Obsidian Hugo export."""

from obsidian_hugo.core.models import (
    BatchResult,
    Document,
    ExportError,
    ImageNotFoundError,
    NoteContext,
    NoteError,
    NoteExportError,
    PartialFailureError,
)
from obsidian_hugo.core.resolver import ImageResolver
from obsidian_hugo.core.materializer import ImageMaterializer
from obsidian_hugo.core.processor import ContentProcessor
from obsidian_hugo.core.exporter import Exporter, create_exporter, create_exporter_from_config

__all__ = [
    "BatchResult",
    "Document",
    "ExportError",
    "ImageNotFoundError",
    "NoteContext",
    "NoteError",
    "NoteExportError",
    "PartialFailureError",
    "ImageResolver",
    "ImageMaterializer",
    "ContentProcessor",
    "Exporter",
    "create_exporter",
    "create_exporter_from_config",
]
