"""Copy resolved images into the site's static directory."""

import asyncio
import shutil
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from loguru import logger

from obsidian_hugo.core.models import ImageCopyError, ResolvedImage
from obsidian_hugo.transforms.naming import sanitize_filename

# Characters encodeURIComponent leaves alone beyond quote()'s defaults
_URL_SAFE = "!~*'()"


class ImageMaterializer:
    """Publishes images under a flat static directory."""

    def __init__(self, static_images_dir: Path, image_url_prefix: str = "/images"):
        """Initialize ImageMaterializer.

        Args:
            static_images_dir: Absolute directory images are copied into
            image_url_prefix: URL path that directory is served under
        """
        self.static_images_dir = Path(static_images_dir)
        prefix = image_url_prefix.strip('/')
        self.image_url_prefix = f"/{prefix}" if prefix else ""

    def plan(self, source_path: Path, desired_basename: str) -> ResolvedImage:
        """Pick the published file name; subfolders in the reference are dropped."""
        basename = PurePosixPath(desired_basename.replace('\\', '/')).name
        return ResolvedImage(
            source_path=Path(source_path),
            destination_name=sanitize_filename(basename),
        )

    def url_for(self, destination_name: str) -> str:
        return f"{self.image_url_prefix}/{quote(destination_name, safe=_URL_SAFE)}"

    async def materialize(self, source_path: Path, desired_basename: str, alt_text: str = "") -> str:
        """Copy an image and return the markdown that displays it.

        Args:
            source_path: Resolved image file
            desired_basename: Reference as written in the note
            alt_text: Alt text; defaults to the published file stem

        Returns:
            Markdown image such as ``![alt](/images/name.png)``

        Raises:
            ImageCopyError: If the directory cannot be created or the copy fails
        """
        resolved = self.plan(source_path, desired_basename)
        destination = self.static_images_dir / resolved.destination_name
        logger.debug(f"Image destination path: {destination}")

        await asyncio.to_thread(self._copy, resolved.source_path, destination)

        final_alt = alt_text or PurePosixPath(resolved.destination_name).stem
        markdown = f"![{final_alt}]({self.url_for(resolved.destination_name)})"
        logger.debug(f"Generated image markdown: {markdown}")
        return markdown

    def _copy(self, source: Path, destination: Path) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if destination.exists():
                logger.debug(f"Image already exists at destination: {destination}. Overwriting.")
            shutil.copyfile(source, destination)
        except OSError as e:
            raise ImageCopyError(source, destination, str(e)) from e
        logger.debug(f"Copied image from {source} to {destination}")
