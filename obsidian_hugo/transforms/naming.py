"""Slug and filename helpers shared by links, images and output files."""

import re
import unicodedata

from loguru import logger

_NON_SLUG_CHARS = re.compile(r'[^\w\s-]')
_SLUG_SEPARATORS = re.compile(r'[\s_-]+')

_WHITESPACE = re.compile(r'\s+')
# <>:"/\|?* plus ASCII control characters
_FORBIDDEN_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_REPEATED_HYPHENS = re.compile(r'-{2,}')

FALLBACK_FILENAME = "untitled"


def slugify(text: str) -> str:
    """Convert text into a lowercase, hyphenated, URL-friendly slug.

    Accented characters are decomposed and their marks dropped, so
    ``"Héllo, World!"`` becomes ``"hello-world"``.
    """
    decomposed = unicodedata.normalize('NFKD', str(text))
    stripped = ''.join(c for c in decomposed if not unicodedata.combining(c))
    slug = _NON_SLUG_CHARS.sub('', stripped.lower().strip())
    slug = _SLUG_SEPARATORS.sub('-', slug)
    return slug.strip('-')


def sanitize_filename(filename: str) -> str:
    """Make a file name safe for common filesystems and URLs.

    Whitespace becomes a hyphen and characters that are illegal on Windows or
    POSIX are removed. An empty result falls back to ``"untitled"``.
    """
    sanitized = _WHITESPACE.sub('-', filename)
    sanitized = _FORBIDDEN_FILENAME_CHARS.sub('', sanitized)
    sanitized = _REPEATED_HYPHENS.sub('-', sanitized)
    sanitized = sanitized.strip('-')

    if sanitized != filename:
        logger.debug(f"Sanitized filename: '{filename}' -> '{sanitized}'")

    return sanitized or FALLBACK_FILENAME
