"""Data models and error types for Obsidian Hugo export."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import unquote


# --- Errors -----------------------------------------------------------------


class ExportError(Exception):
    """Base class for every error raised by the export pipeline."""


class ConfigError(ExportError):
    """Raised when export configuration cannot be loaded."""


class NotFoundError(ExportError):
    """A note or an image could not be located."""


class NoteNotFoundError(NotFoundError):
    """No note was given, or the note file does not exist."""


class ImageNotFoundError(NotFoundError):
    """An image reference did not match any candidate location."""

    def __init__(self, reference: str, note_path: str, attempted: List[Path]):
        self.reference = reference
        self.note_path = note_path
        self.attempted = list(attempted)
        searched = ', '.join(f"'{p}'" for p in self.attempted)
        super().__init__(
            f"Image not found: '{reference}'. "
            f"Searched locations based on note '{note_path}': {searched}"
        )


class InvalidInputError(ExportError):
    """The note cannot be exported as given (wrong type, bad front matter)."""


class FrontmatterError(InvalidInputError):
    """The leading metadata block is not a valid YAML mapping."""


class IOFailureError(ExportError):
    """A read, write, copy or mkdir failed on the filesystem."""


class NoteReadError(IOFailureError):
    """The source note could not be read."""


class NoteWriteError(IOFailureError):
    """The exported note could not be written."""


class ImageCopyError(IOFailureError):
    """An image could not be copied into the static directory."""

    def __init__(self, source: Path, destination: Path, message: str):
        self.source = source
        self.destination = destination
        super().__init__(
            f"Failed to copy image from '{source}' to '{destination}': {message}"
        )


class NoteExportError(ExportError):
    """A single note failed to export. The underlying error is ``__cause__``."""

    def __init__(self, note_name: str, message: str):
        self.note_name = note_name
        super().__init__(f"Export failed for {note_name}: {message}")


class PartialFailureError(ExportError):
    """Some notes of a batch export failed."""

    def __init__(self, result: "BatchResult"):
        self.result = result
        names = ', '.join(f.path.name for f in result.failures)
        super().__init__(f"{result.summary()} Failed: {names}")


# --- Notes ------------------------------------------------------------------


@dataclass(frozen=True)
class NoteContext:
    """Location of a note inside a vault.

    Content is read on demand, so a batch can be assembled without loading
    every note into memory.
    """
    vault_root: Path
    relative_path: Path

    @classmethod
    def from_path(cls, vault_root: Path, path: Path) -> "NoteContext":
        """Build a context from a note path inside ``vault_root``.

        Args:
            vault_root: The vault directory
            path: Absolute path, or a path already relative to the vault

        Raises:
            InvalidInputError: If an absolute path lies outside the vault
        """
        vault_root = Path(vault_root).resolve()
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(vault_root)
            except ValueError as e:
                raise InvalidInputError(f"Note '{path}' is not inside vault '{vault_root}'") from e
        return cls(vault_root=vault_root, relative_path=path)

    @property
    def path(self) -> Path:
        return self.vault_root / self.relative_path

    @property
    def name(self) -> str:
        return self.relative_path.name

    @property
    def base_name(self) -> str:
        return self.relative_path.stem

    @property
    def extension(self) -> str:
        return self.relative_path.suffix.lstrip('.').lower()

    @property
    def directory(self) -> str:
        """Vault-relative folder of the note, empty for the vault root."""
        parent = self.relative_path.parent.as_posix()
        return '' if parent == '.' else parent

    def read_raw(self) -> str:
        """Read file contents on demand."""
        return self.path.read_text(encoding='utf-8')


@dataclass
class Document:
    """A note split into its metadata block and markdown body."""
    metadata: Dict[str, Any]
    body: str


# --- Token sequence -----------------------------------------------------------


class SpanKind(Enum):
    FENCED = "fenced"
    INLINE = "inline"


class ImageSyntax(Enum):
    WIKI = "wiki"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class Literal:
    """Plain text, open to rewriting."""
    text: str


@dataclass(frozen=True)
class CodeSpan:
    """A masked code region. ``index`` counts spans of the same kind."""
    kind: SpanKind
    index: int
    text: str


@dataclass(frozen=True)
class ImageReference:
    syntax: ImageSyntax
    raw_target: str
    alt_text: str
    source_text: str

    @property
    def target(self) -> str:
        """The path used for lookup on disk."""
        if self.syntax is ImageSyntax.MARKDOWN:
            return unquote(self.raw_target)
        return self.raw_target


@dataclass(frozen=True)
class WikilinkReference:
    target: str
    display_text: str
    source_text: str


@dataclass(frozen=True)
class ImageToken:
    reference: ImageReference


@dataclass(frozen=True)
class WikilinkToken:
    reference: WikilinkReference


Segment = Union[Literal, CodeSpan]
Token = Union[Literal, CodeSpan, ImageToken, WikilinkToken]


@dataclass(frozen=True)
class ResolvedImage:
    """An image found on disk and the flat file name it is published under."""
    source_path: Path
    destination_name: str


# --- Results ------------------------------------------------------------------


@dataclass
class NoteError:
    """An error that occurred while exporting a note."""
    path: Path
    error: str
    title: Optional[str] = None


@dataclass
class BatchResult:
    """Outcome of exporting several notes."""
    exported: List[Path] = field(default_factory=list)
    failures: List[NoteError] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.exported)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def summary(self) -> str:
        return f"Exported {self.succeeded}/{self.total} files."

    def raise_for_failures(self) -> None:
        """Raise PartialFailureError if any note failed."""
        if self.failures:
            raise PartialFailureError(self)
