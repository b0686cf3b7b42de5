"""Export configuration.

A single ``ExportConfig`` value is passed to every component; nothing reads
settings from module-level state.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from obsidian_hugo.core.models import ConfigError

DEFAULT_POSTS_DIRECTORY = "~/hugo-blog/content/posts"
DEFAULT_STATIC_IMAGES_DIRECTORY = "~/hugo-blog/static/images"
DEFAULT_ATTACHMENT_FOLDERS = ["Attachments", "assets", "images"]


def resolve_path(raw_path: Union[str, Path]) -> Path:
    """Expand a leading ``~`` and make the path absolute."""
    raw = str(raw_path)
    if raw.startswith('~'):
        raw = str(Path.home()) + '/' + raw[1:].lstrip('/\\')
    return Path(raw).resolve()


@dataclass
class ExportConfig:
    """Settings for exporting notes into a Hugo site.

    Attributes:
        posts_directory: Where exported notes are written
        static_images_directory: Where referenced images are copied
        debug_mode: Log every internal step
        image_url_prefix: URL path the static images directory is served under
        posts_section: Hugo section used for converted wikilinks
        attachment_folders: Vault folders searched for images after the note's own folders
        titlecase_titles: Title-case the ``title`` field on export
        remove_keys: Front matter keys dropped on export
        add_fields: Front matter fields added when a note does not set them
    """
    posts_directory: str = DEFAULT_POSTS_DIRECTORY
    static_images_directory: str = DEFAULT_STATIC_IMAGES_DIRECTORY
    debug_mode: bool = False
    image_url_prefix: str = "/images"
    posts_section: str = "posts"
    attachment_folders: List[str] = field(
        default_factory=lambda: list(DEFAULT_ATTACHMENT_FOLDERS)
    )
    titlecase_titles: bool = False
    remove_keys: List[str] = field(default_factory=list)
    add_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def posts_path(self) -> Path:
        return resolve_path(self.posts_directory)

    @property
    def static_images_path(self) -> Path:
        return resolve_path(self.static_images_directory)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ExportConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**data)


def load_config(path: Union[str, Path]) -> ExportConfig:
    """Load an ExportConfig from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    config_path = resolve_path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in '{config_path}': {e}") from e

    return ExportConfig.from_dict(data)
