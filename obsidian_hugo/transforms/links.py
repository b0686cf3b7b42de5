"""Link transform factories for Obsidian Hugo export.

A link transform turns display text, a page slug and an optional heading
anchor into the markdown link written in place of a wikilink.
"""

from typing import Callable

LinkTransform = Callable[[str, str, str], str]


def section_link(section: str = "posts") -> LinkTransform:
    """Create a transform producing ``[text](/<section>/<slug>/)`` links.

    Args:
        section: Hugo content section the pages live in

    Returns:
        A transform function (text, slug, anchor) -> markdown link
    """
    section = section.strip('/')
    prefix = f"/{section}" if section else ""

    def transform(text: str, slug: str, anchor: str = "") -> str:
        fragment = f"#{anchor}" if anchor else ""
        return f"[{text}]({prefix}/{slug}/{fragment})"
    return transform


def hugo_ref() -> LinkTransform:
    """Create a transform that emits Hugo ``ref`` shortcodes.

    Returns:
        A transform function (text, slug, anchor) -> markdown link
    """
    def transform(text: str, slug: str, anchor: str = "") -> str:
        fragment = f"#{anchor}" if anchor else ""
        return f'[{text}]({{{{< ref "{slug}{fragment}" >}}}})'
    return transform
