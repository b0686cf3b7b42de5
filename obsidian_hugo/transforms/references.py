"""Find image embeds and wikilinks in masked note text."""

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Optional

from loguru import logger

from obsidian_hugo.core.models import (
    ImageReference,
    ImageSyntax,
    ImageToken,
    Literal,
    Segment,
    Token,
    WikilinkReference,
    WikilinkToken,
)

# Pattern for wiki image embeds: ![[image.png]] or ![[image.png|alt]]
WIKI_IMAGE_PATTERN = r'!\[\[(?P<wiki_name>[^\]\n]+?)\]\]'

# Pattern for markdown images: ![alt](path) or ![alt](path "title")
MARKDOWN_IMAGE_PATTERN = r'!\[(?P<alt>[^\]]*)\]\((?P<path>[^)\s]+?)(?:\s+"[^"]+")?\)'

# Pattern for wikilinks: [[target]] or [[target|display]]
WIKILINK_PATTERN = r'\[\[(?P<target>[^|\]\n]+?)(?:\|(?P<display>[^\]\n]+?))?\]\]'

# Alternation order matters: an embed starting with "!" must win over the
# wikilink that starts one character later.
REFERENCE_PATTERN = re.compile(
    f'(?P<wiki_image>{WIKI_IMAGE_PATTERN})'
    f'|(?P<markdown_image>{MARKDOWN_IMAGE_PATTERN})'
    f'|(?P<wikilink>{WIKILINK_PATTERN})'
)

# Obsidian embed sizes: ![[image.png|300]] or ![[image.png|300x200]]
_SIZE_HINT = re.compile(r'^\d+(?:x\d+)?$')
_FILE_EXTENSION = re.compile(r'\.\w{2,5}$')
EXTERNAL_PREFIXES = ('http://', 'https://')


def is_external(path: str) -> bool:
    return path.startswith(EXTERNAL_PREFIXES)


def should_skip_wikilink(target: str) -> bool:
    """Whether a wikilink points at a file, an absolute path or a URL."""
    return bool(
        _FILE_EXTENSION.search(target)
        or target.startswith('http:')
        or target.startswith('https://')
        or target.startswith('/')
    )


def _wiki_image(match: re.Match) -> ImageReference:
    inner = match.group('wiki_name').strip()
    name, _, alt = inner.partition('|')
    name = name.strip()
    alt = alt.strip()
    if not alt or _SIZE_HINT.match(alt):
        alt = PurePosixPath(name).stem
    return ImageReference(
        syntax=ImageSyntax.WIKI,
        raw_target=name,
        alt_text=alt,
        source_text=match.group(0),
    )


def _markdown_image(match: re.Match) -> Optional[ImageReference]:
    path = match.group('path').strip()
    if is_external(path):
        logger.debug(f"Skipping external image: {path}")
        return None
    return ImageReference(
        syntax=ImageSyntax.MARKDOWN,
        raw_target=path,
        alt_text=match.group('alt').strip(),
        source_text=match.group(0),
    )


def _wikilink(match: re.Match) -> WikilinkReference:
    display = match.group('display')
    target = match.group('target').strip()
    return WikilinkReference(
        target=target,
        display_text=display.strip() if display else target,
        source_text=match.group(0),
    )


def _tokenize_literal(text: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0

    for match in REFERENCE_PATTERN.finditer(text):
        token: Optional[Token] = None
        if match.group('wiki_image'):
            token = ImageToken(_wiki_image(match))
        elif match.group('markdown_image'):
            reference = _markdown_image(match)
            if reference is not None:
                token = ImageToken(reference)
        else:
            token = WikilinkToken(_wikilink(match))

        if token is None:
            continue

        logger.debug(f"Found reference: {match.group(0)}")
        if match.start() > position:
            tokens.append(Literal(text[position:match.start()]))
        tokens.append(token)
        position = match.end()

    if position < len(text):
        tokens.append(Literal(text[position:]))
    return tokens


def tokenize(segments: Iterable[Segment]) -> List[Token]:
    """Split every literal segment into text, image and wikilink tokens.

    Code spans pass through unchanged.
    """
    tokens: List[Token] = []
    for segment in segments:
        if isinstance(segment, Literal):
            tokens.extend(_tokenize_literal(segment.text))
        else:
            tokens.append(segment)
    return tokens


def find_images(tokens: Iterable[Token]) -> List[ImageReference]:
    """Image references in document order, one per occurrence."""
    return [t.reference for t in tokens if isinstance(t, ImageToken)]


def find_wikilinks(tokens: Iterable[Token]) -> List[WikilinkReference]:
    """Wikilinks in document order, skipped ones included."""
    return [t.reference for t in tokens if isinstance(t, WikilinkToken)]
