"""Content processor for transforming Obsidian notes into Hugo markdown."""

import asyncio
import datetime
from typing import Callable, Dict, List, Optional

import inflection
from loguru import logger

from obsidian_hugo.core.materializer import ImageMaterializer
from obsidian_hugo.core.models import (
    Document,
    ExportError,
    ImageReference,
    ImageSyntax,
    ImageToken,
    Literal,
    NoteContext,
    Token,
    WikilinkReference,
    WikilinkToken,
)
from obsidian_hugo.core.resolver import ImageResolver
from obsidian_hugo.transforms.frontmatter import (
    FrontmatterTransform,
    dump_document,
    merge_defaults,
    split_frontmatter,
)
from obsidian_hugo.transforms.links import LinkTransform, section_link
from obsidian_hugo.transforms.masking import mask, unmask
from obsidian_hugo.transforms.naming import slugify
from obsidian_hugo.transforms.references import find_images, should_skip_wikilink, tokenize


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def image_error_comment(reference: ImageReference) -> str:
    """Visible placeholder left where an image could not be exported."""
    kind = "WIKI" if reference.syntax is ImageSyntax.WIKI else "MARKDOWN"
    return f"<!-- ERROR PROCESSING {kind} IMAGE: {reference.raw_target} -->"


class ContentProcessor:
    """Processes Obsidian note content for a Hugo site.

    Handles:
    - Front matter defaulting and transformation
    - Code masking, so nothing inside code is rewritten
    - Image lookup, copying and link rewriting
    - Wikilink to markdown link conversion
    """

    def __init__(
        self,
        resolver: ImageResolver,
        materializer: ImageMaterializer,
        link_transform: Optional[LinkTransform] = None,
        frontmatter_transform: Optional[FrontmatterTransform] = None,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ):
        """Initialize ContentProcessor.

        Args:
            resolver: Finds image files referenced by a note
            materializer: Copies images and renders their markdown
            link_transform: Renders converted wikilinks (default: /posts/<slug>/)
            frontmatter_transform: Optional transform applied after defaulting
            clock: Source of the default ``date`` value
        """
        self.resolver = resolver
        self.materializer = materializer
        self.link_transform = link_transform or section_link("posts")
        self.frontmatter_transform = frontmatter_transform
        self.clock = clock

    async def process(self, note: NoteContext, raw_content: str) -> str:
        """Transform a whole note, front matter included.

        Args:
            note: The note being exported
            raw_content: Its current text

        Returns:
            Complete markdown string with YAML front matter
        """
        logger.debug(f"Processing markdown for: {note.relative_path}")
        document = split_frontmatter(raw_content)

        metadata = merge_defaults(document.metadata, note.base_name, self.clock())
        if self.frontmatter_transform:
            metadata = self.frontmatter_transform(metadata, note)
        logger.debug(f"Final front matter for {note.name}: {metadata}")

        body = await self.process_body(note, document.body)
        return dump_document(Document(metadata=metadata, body=body))

    async def process_body(self, note: NoteContext, body: str) -> str:
        """Rewrite images and wikilinks in a note body, leaving code untouched.

        Args:
            note: The note the body belongs to
            body: Markdown without front matter

        Returns:
            The rewritten body
        """
        tokens = tokenize(mask(body))
        replacements = await self._process_images(note, tokens)

        rendered: List[Token] = []
        for token in tokens:
            if isinstance(token, ImageToken):
                rendered.append(Literal(replacements[token.reference]))
            elif isinstance(token, WikilinkToken):
                rendered.append(Literal(self._render_wikilink(token.reference)))
            else:
                rendered.append(token)

        logger.debug(f"Finished processing content body for: {note.name}")
        return unmask(rendered)

    async def _process_images(self, note: NoteContext, tokens: List[Token]) -> Dict[ImageReference, str]:
        """Resolve and copy every distinct image reference concurrently.

        Identical references share one result, so each destination file is
        copied once per note.
        """
        references: List[ImageReference] = []
        for reference in find_images(tokens):
            if reference not in references:
                references.append(reference)

        results = await asyncio.gather(
            *(self._handle_image(note, reference) for reference in references)
        )
        return dict(zip(references, results))

    async def _handle_image(self, note: NoteContext, reference: ImageReference) -> str:
        """Find, copy and render one image; failures become an HTML comment."""
        logger.debug(f"Handling image: '{reference.target}' referenced in {note.name}")
        try:
            source = await self.resolver.resolve(note, reference.target)
            return await self.materializer.materialize(source, reference.target, reference.alt_text)
        except ExportError as e:
            logger.warning(f"Failed to process image '{reference.raw_target}' in {note.name}: {e}")
            return image_error_comment(reference)

    def _render_wikilink(self, link: WikilinkReference) -> str:
        target = link.target
        if should_skip_wikilink(target):
            logger.debug(f"Skipping wikilink for file/URL/absolute target: {link.source_text}")
            return link.source_text

        page, _, heading = target.partition('#')
        page = page.strip()
        anchor = inflection.parameterize(heading) if heading else ""

        if not page:
            result = f"[{link.display_text.lstrip('#').strip()}](#{anchor})"
        else:
            result = self.link_transform(link.display_text, slugify(page), anchor)

        logger.debug(f"Processed wikilink: {link.source_text} -> {result}")
        return result
