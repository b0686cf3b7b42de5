"""Front matter parsing, defaulting and transform factories.

The split/merge/dump helpers turn raw note text into a ``Document`` and back.
The factories create transform functions that reshape the merged metadata
before it is written out.
"""

import datetime
import re
from typing import Any, Callable, Dict, List, Optional

import titlecase as tc
import yaml

from obsidian_hugo.core.models import Document, FrontmatterError, NoteContext

FrontmatterTransform = Callable[[Dict[str, Any], NoteContext], Dict[str, Any]]

FRONTMATTER_PATTERN = re.compile(
    r'\A---[ \t]*\r?\n(?P<yaml>.*?)^---[ \t]*\r?$\n?',
    re.MULTILINE | re.DOTALL,
)

REQUIRED_KEYS = ('title', 'date')


def split_frontmatter(raw_content: str) -> Document:
    """Split note text into its metadata mapping and body.

    Args:
        raw_content: Full file content including any front matter

    Returns:
        Document with empty metadata when the note has no front matter

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping
    """
    match = FRONTMATTER_PATTERN.match(raw_content)
    if match is None:
        return Document(metadata={}, body=raw_content)

    try:
        metadata = yaml.safe_load(match.group('yaml'))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Failed to parse front matter: {e}") from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontmatterError(
            f"Front matter must be a mapping, got {type(metadata).__name__}"
        )

    return Document(metadata=metadata, body=raw_content[match.end():])


def now_iso(now: Optional[datetime.datetime] = None) -> str:
    """ISO-8601 timestamp in UTC, to the second."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec='seconds')


def merge_defaults(
    metadata: Dict[str, Any],
    note_name: str,
    now: Optional[datetime.datetime] = None,
) -> Dict[str, Any]:
    """Fill ``title`` and ``date`` when missing, keeping every existing key.

    Existing values win on all keys. An empty ``title`` or ``date`` counts as
    missing.

    Args:
        metadata: Parsed front matter
        note_name: Note file stem, used as the default title
        now: Timestamp used as the default date

    Returns:
        New mapping ordered title, date, then the original keys
    """
    merged: Dict[str, Any] = {
        'title': note_name,
        'date': now_iso(now),
    }
    for key, value in metadata.items():
        if key in REQUIRED_KEYS and (value is None or value == ''):
            continue
        merged[key] = value
    return merged


def dump_document(document: Document) -> str:
    """Serialize a document as YAML front matter followed by the body.

    The body is kept as is, with a newline added only if it lacks one.
    """
    content = document.body if document.body.endswith('\n') else document.body + '\n'
    if not document.metadata:
        return content

    frontmatter_str = yaml.dump(
        document.metadata,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    return f"---\n{frontmatter_str}---\n{content}"


def identity() -> FrontmatterTransform:
    """Create a pass-through transform that returns frontmatter unchanged.

    Returns:
        A transform function (frontmatter, note) -> frontmatter
    """
    def transform(fm: Dict[str, Any], note: NoteContext) -> Dict[str, Any]:
        return fm.copy()
    return transform


def prune_and_add(
    keep_keys: Optional[List[str]] = None,
    remove_keys: Optional[List[str]] = None,
    add_fields: Optional[Dict[str, Any]] = None
) -> FrontmatterTransform:
    """Create a transform that prunes keys and/or adds fields.

    If keep_keys is provided, only those keys are kept.
    If remove_keys is provided (and keep_keys is not), those keys are removed.
    add_fields are added only where the note does not already set them.
    ``title`` and ``date`` are never pruned.

    Args:
        keep_keys: List of keys to keep (exclusive with remove_keys)
        remove_keys: List of keys to remove
        add_fields: Dict of fields to add

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any], note: NoteContext) -> Dict[str, Any]:
        if keep_keys is not None:
            keep = set(keep_keys) | set(REQUIRED_KEYS)
            result = {k: v for k, v in fm.items() if k in keep}
        elif remove_keys is not None:
            result = {
                k: v for k, v in fm.items()
                if k not in remove_keys or k in REQUIRED_KEYS
            }
        else:
            result = fm.copy()

        for key, value in (add_fields or {}).items():
            result.setdefault(key, value)

        return result
    return transform


def title_case() -> FrontmatterTransform:
    """Create a transform that title-cases the ``title`` field.

    Semicolons in titles break some YAML consumers and become colons.

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any], note: NoteContext) -> Dict[str, Any]:
        result = fm.copy()
        title = result.get('title')
        if isinstance(title, str) and title:
            result['title'] = tc.titlecase(title).replace(';', ':')
        return result
    return transform


def compose(*transforms: FrontmatterTransform) -> FrontmatterTransform:
    """Chain transforms left to right."""
    def transform(fm: Dict[str, Any], note: NoteContext) -> Dict[str, Any]:
        result = fm.copy()
        for step in transforms:
            result = step(result, note)
        return result
    return transform
