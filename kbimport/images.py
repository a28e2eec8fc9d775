"""Rewrite local markdown image references to managed storage.

Every ``![alt](target)`` whose target is a local file is copied to
``<managed>/<language>/<category-slug>/<filename>`` on the public disk and
the reference is rewritten to the file's public URL. Remote images and
references to missing files are left untouched.

Two different images with the same filename in one category share a
destination, so the later copy replaces the earlier one.
"""

import logging
import re
from pathlib import Path

from slugify import slugify as to_slug

from kbimport.config import MANAGED_SUBDIR
from kbimport.paths import resolve
from kbimport.storage.assets import AssetStorage

logger = logging.getLogger(__name__)

IMAGE_REF = re.compile(r"!\[(.*?)\]\((.*?)\)")
_REMOTE = re.compile(r"^https?://")
_PUNCTUATION = re.compile(r"[^\w\s-]")


def slugify(text: str) -> str:
    """Convert text to a URL-safe, lowercase, hyphen-separated slug.

    Non-Latin scripts are transliterated to ASCII (``设置`` becomes
    ``she-zhi``). ``@`` is spelled out as ``at``, other punctuation is dropped
    and underscores become hyphens.
    """
    text = _PUNCTUATION.sub("", text.replace("@", "-at-"))
    return to_slug(text)


def destination_dir(language: str, category: str) -> str:
    """Disk-relative directory for a category's images."""
    return f"{MANAGED_SUBDIR}/{language}/{slugify(category)}"


class ImageRewriter:
    """Mirrors local images referenced by a markdown body.

    Args:
        assets: Public-disk storage the images are copied into.
    """

    def __init__(self, assets: AssetStorage):
        self.assets = assets

    def rewrite(self, body: str, source_dir: Path, language: str, category: str) -> str:
        """Return ``body`` with every eligible image reference rewritten.

        Args:
            body: Markdown text.
            source_dir: Directory of the markdown file; targets resolve against it.
            language: Language code of the record.
            category: Category name; slugged into the destination path.

        Raises:
            StorageError: If a directory cannot be created or a copy fails.
        """

        def replace(match: "re.Match") -> str:
            alt_text, target = match.group(1), match.group(2)

            if _REMOTE.match(target):
                return match.group(0)

            image_path = resolve(source_dir, target)
            if not image_path.is_file():
                logger.debug(f"Image not found, leaving reference: {image_path}")
                return match.group(0)

            rel_path = self.assets.copy_file(image_path, destination_dir(language, category))
            return f"![{alt_text}]({self.assets.url(rel_path)})"

        return IMAGE_REF.sub(replace, body)
