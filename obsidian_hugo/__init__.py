"""
Obsidian Hugo - Export Obsidian notes to a Hugo site

Converts notes written with Obsidian conventions into Hugo-ready markdown:
- Wikilink conversion to site links
- Image lookup across the vault and copying into static/
- Front matter defaulting and transformation
- Code blocks and inline code left untouched
"""

from obsidian_hugo.core.models import BatchResult, Document, ExportError, NoteContext, NoteError, PartialFailureError
from obsidian_hugo.core.processor import ContentProcessor
from obsidian_hugo.core.exporter import Exporter, create_exporter, create_exporter_from_config
from obsidian_hugo.config import ExportConfig, load_config
from obsidian_hugo._logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "Document",
    "ExportError",
    "NoteContext",
    "NoteError",
    "PartialFailureError",
    "ContentProcessor",
    "Exporter",
    "create_exporter",
    "create_exporter_from_config",
    "ExportConfig",
    "load_config",
    "configure_logging",
]
